import logging
from typing import List, Optional

from linking.events import EventLog, EventType

KNOWN_EVENT_TYPES = {event_type.value for event_type in EventType}


class Combatant:
    def __init__(self, combatant_info):
        self._combatant_info = combatant_info or {}
        self._talents = self._parse_talents(self._combatant_info)

    @staticmethod
    def _parse_talents(combatant_info):
        talents = set()

        for talent in combatant_info.get("talents", []):
            if isinstance(talent, dict):
                talent_id = (
                    talent.get("id")
                    or talent.get("spellID")
                    or talent.get("talentID")
                )
            else:
                talent_id = talent
            if talent_id is not None:
                talents.add(int(talent_id))
        return talents

    @property
    def talents(self):
        return sorted(self._talents)

    def has_talent(self, talent):
        talent_id = getattr(talent, "id", talent)
        return talent_id in self._talents


class Source:
    def __init__(self, id: int, name: str = "", pets: Optional[List[int]] = None):
        self.id = id
        self.name = name
        self.pets = pets or []


class Fight:
    def __init__(
        self,
        events,
        source: Source,
        combatant_info=None,
        start_time=0,
        end_time=None,
        encounter_name=None,
    ):
        self.source = source
        self.start_time = start_time
        self.encounter_name = encounter_name
        self._combatant_info = {source.id: combatant_info or {}}
        self.events = EventLog(self._known_events(events))
        if end_time is None:
            end_time = self.events[-1].timestamp if len(self.events) else start_time
        self.end_time = end_time

    @staticmethod
    def _known_events(events):
        known = []
        skipped = 0

        for event in events:
            event_type = event.get("type") if isinstance(event, dict) else event.type
            if event_type not in KNOWN_EVENT_TYPES:
                skipped += 1
                continue
            known.append(event)

        if skipped:
            logging.debug(f"Skipped {skipped} events with untracked types")
        return known

    @property
    def duration(self):
        return self.end_time - self.start_time

    def get_combatant_info(self, source_id):
        return self._combatant_info.get(source_id, {})

    @property
    def combatant(self):
        return Combatant(self.get_combatant_info(self.source.id))
