import bisect
import logging
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class EventType(str, Enum):
    CAST = "cast"
    BEGIN_CAST = "begincast"
    HEAL = "heal"
    ABSORBED = "absorbed"
    APPLY_BUFF = "applybuff"
    APPLY_BUFF_STACK = "applybuffstack"
    REFRESH_BUFF = "refreshbuff"
    REMOVE_BUFF = "removebuff"
    REMOVE_BUFF_STACK = "removebuffstack"
    APPLY_DEBUFF = "applydebuff"
    REFRESH_DEBUFF = "refreshdebuff"
    REMOVE_DEBUFF = "removedebuff"
    DAMAGE = "damage"
    SUMMON = "summon"
    RESOURCE_CHANGE = "resourcechange"


class Event(BaseModel):
    """A single combat log event.

    Events are frozen once ingested. Equality falls back to identity so two
    heals with identical payloads at the same millisecond stay distinct.
    """

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    timestamp: int
    type: EventType
    ability_id: int = Field(alias="abilityGameID")
    source_id: int = Field(alias="sourceID")
    target_id: Optional[int] = Field(default=None, alias="targetID")

    amount: Optional[int] = None
    overheal: Optional[int] = None
    absorbed: Optional[int] = None
    stack: Optional[int] = None
    target_is_friendly: Optional[bool] = Field(default=None, alias="targetIsFriendly")
    hit_type: Optional[int] = Field(default=None, alias="hitType")

    def __eq__(self, other):
        return self is other

    def __hash__(self):
        return id(self)

    def __repr__(self):
        return (
            f"Event({self.type.value} ability={self.ability_id} "
            f"t={self.timestamp} {self.source_id}->{self.target_id})"
        )


class EventLog:
    """Chronologically ordered, read-only sequence of events for one run."""

    def __init__(self, events: Iterable[Union[Event, dict]]):
        events = [
            event if isinstance(event, Event) else Event.model_validate(event)
            for event in events
        ]
        if any(
            later.timestamp < earlier.timestamp
            for earlier, later in zip(events, events[1:])
        ):
            logging.warning("Events were not in chronological order, sorting them")
            # sorted() is stable, equal timestamps keep their input order
            events = sorted(events, key=lambda e: e.timestamp)

        self._events: Tuple[Event, ...] = tuple(events)
        self._timestamps: List[int] = [event.timestamp for event in self._events]
        self._positions = {id(event): i for i, event in enumerate(self._events)}

    def __len__(self):
        return len(self._events)

    def __iter__(self) -> Iterator[Event]:
        return iter(self._events)

    def __getitem__(self, index):
        return self._events[index]

    def position(self, event: Event) -> Optional[int]:
        return self._positions.get(id(event))

    def bounds(self, start: int, end: int) -> Tuple[int, int]:
        lo = bisect.bisect_left(self._timestamps, start)
        hi = bisect.bisect_right(self._timestamps, end)
        return lo, hi

    def between(self, start: int, end: int) -> Tuple[Event, ...]:
        lo, hi = self.bounds(start, end)
        return self._events[lo:hi]
