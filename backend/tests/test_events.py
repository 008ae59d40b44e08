import pytest
from pydantic import ValidationError

from linking.events import Event, EventLog, EventType


def test_event_accepts_log_keys():
    event = Event.model_validate(
        {
            "timestamp": 1200,
            "type": "heal",
            "abilityGameID": 61295,
            "sourceID": 1,
            "targetID": 2,
            "amount": 5000,
            "overheal": 300,
            "sourceInstance": 4,
        }
    )

    assert event.type == EventType.HEAL
    assert event.ability_id == 61295
    assert event.source_id == 1
    assert event.target_id == 2
    assert event.amount == 5000
    # unknown keys are kept as payload
    assert event.sourceInstance == 4


def test_event_is_immutable(make_event):
    event = make_event(1000, "cast", 1064)

    with pytest.raises(ValidationError):
        event.timestamp = 2000


def test_identical_events_are_distinct(make_event):
    first = make_event(1000, "heal", 1064, amount=10)
    second = make_event(1000, "heal", 1064, amount=10)

    assert first != second
    assert first == first
    assert len({first, second}) == 2


def test_unknown_event_type_is_rejected():
    with pytest.raises(ValidationError):
        Event.model_validate(
            {"timestamp": 0, "type": "combatantinfo", "abilityGameID": 0, "sourceID": 1}
        )


def test_event_log_sorts_stably(make_event):
    late = make_event(2000, "cast", 1)
    first_at_1000 = make_event(1000, "cast", 2)
    second_at_1000 = make_event(1000, "heal", 3)

    log = EventLog([late, first_at_1000, second_at_1000])

    assert list(log) == [first_at_1000, second_at_1000, late]
    assert log.position(late) == 2


def test_event_log_window_is_inclusive(make_event):
    events = [make_event(t, "heal", 1) for t in (900, 1000, 1050, 1100, 1101)]
    log = EventLog(events)

    assert log.between(1000, 1100) == tuple(events[1:4])
    assert log.bounds(1000, 1100) == (1, 4)
    assert log.between(1200, 1300) == ()


def test_event_log_position_of_foreign_event(make_event):
    log = EventLog([make_event(1000, "cast", 1)])

    assert log.position(make_event(1000, "cast", 1)) is None


def test_event_log_validates_raw_events():
    log = EventLog(
        [{"timestamp": 5, "type": "cast", "abilityGameID": 1064, "sourceID": 1}]
    )

    assert log[0].ability_id == 1064
    assert log[0].target_id is None
