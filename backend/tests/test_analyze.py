from linking import constants as c
from linking.analyze import Analyzer, analyze
from report import Combatant, Fight, Source

PLAYER = 1
PET = 50


def raw(timestamp, type, ability_id, source_id=PLAYER, target_id=2, **payload):
    return {
        "timestamp": timestamp,
        "type": type,
        "abilityGameID": ability_id,
        "sourceID": source_id,
        "targetID": target_id,
        **payload,
    }


def make_fight(events, talents=(c.RIPTIDE,)):
    return Fight(
        events,
        Source(PLAYER, "Tidecaller", pets=[PET]),
        combatant_info={"talents": [{"spellID": talent} for talent in talents]},
        start_time=0,
        encounter_name="Training Dummy",
    )


def test_combatant_talents():
    combatant = Combatant({"talents": [61295, {"id": 1064}, {"talentID": 73920}]})

    assert combatant.has_talent(61295)
    assert combatant.has_talent(1064)
    assert combatant.has_talent(73920)
    assert not combatant.has_talent(207778)
    assert combatant.talents == [1064, 61295, 73920]
    assert not Combatant(None).has_talent(61295)


def test_fight_skips_untracked_event_types():
    fight = make_fight(
        [
            raw(0, "combatantinfo", 0),
            raw(1000, "cast", c.RIPTIDE),
            raw(1000, "applydebuffstack", 123),
        ]
    )

    assert len(fight.events) == 1
    assert fight.duration == 1000


def test_analyze_restoration_fight():
    fight = make_fight(
        [
            raw(1000, "cast", c.RIPTIDE),
            raw(1000, "applybuff", c.RIPTIDE),
            raw(1010, "heal", c.RIPTIDE, amount=1000),
            # another healer's riptide on the same target
            raw(1020, "heal", c.RIPTIDE, source_id=7),
        ]
    )

    result = analyze(fight, "Restoration")

    assert result["spec"] == "Restoration"
    assert result["fight_metadata"]["source"] == "Tidecaller"
    assert result["fight_metadata"]["duration"] == 1020
    assert result["relation_counts"] == {c.HARDCAST: 2}
    assert result["relations"] == {1: {c.HARDCAST: [0]}, 2: {c.HARDCAST: [0]}}
    assert [event["timestamp"] for event in result["events"]] == [1000, 1000, 1010]
    assert result["events"][0]["abilityGameID"] == c.RIPTIDE


def test_pet_events_are_kept():
    fight = make_fight(
        [
            raw(1000, "cast", c.RIPTIDE, source_id=PET, target_id=3),
            raw(1000, "heal", c.RIPTIDE, source_id=9, target_id=PET),
            raw(1000, "heal", c.RIPTIDE, source_id=9, target_id=10),
        ]
    )

    result = analyze(fight, "Restoration")

    assert len(result["events"]) == 2


def test_unknown_spec_uses_default_links():
    fight = make_fight([raw(1000, "cast", c.RIPTIDE), raw(1000, "applybuff", c.RIPTIDE)])
    analyzer = Analyzer(fight, "Enhancement")

    result = analyzer.analyze()

    assert analyzer.spec == "Default"
    assert result["relations"] == {}
    assert result["relation_counts"] == {}
