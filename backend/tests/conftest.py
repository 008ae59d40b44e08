import pytest

from linking.events import Event, EventType
from report import Combatant

PLAYER = 1


@pytest.fixture
def make_event():
    def _make_event(timestamp, type, ability_id, target_id=2, source_id=PLAYER, **payload):
        return Event(
            timestamp=timestamp,
            type=EventType(type),
            ability_id=ability_id,
            source_id=source_id,
            target_id=target_id,
            **payload,
        )

    return _make_event


@pytest.fixture
def combatant():
    def _combatant(*talents):
        return Combatant({"talents": [{"id": talent} for talent in talents]})

    return _combatant
