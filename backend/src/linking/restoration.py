"""Attributes restoration healer spell applications to the cast or talent behind them.

Riptide for example can come from a hardcast, from Primordial Wave or from
Primal Tide Core, and each source is scored differently downstream.
The order of EVENT_LINKS matters: later links exclude events already
claimed by earlier ones.
"""
from typing import List, Optional

from linking.constants import (
    APPLIED_HEAL,
    CAST_BUFFER_MS,
    CHAIN_HEAL,
    CHAIN_HEAL_GROUPING,
    CHAIN_HEAL_LINK,
    DOWNPOUR,
    DOWNPOUR_LINK,
    FLOW_OF_THE_TIDES,
    FLOW_OF_THE_TIDES_TALENT,
    HARDCAST,
    HEALING_RAIN,
    HEALING_RAIN_DURATION_MS,
    HEALING_RAIN_GROUPING,
    HEALING_RAIN_HEAL,
    HEALING_RAIN_LINK,
    HEALING_WAVE,
    HEALING_WAVE_PWAVE,
    OVERFLOWING_SHORES_HEAL,
    OVERFLOWING_SHORES_LINK,
    OVERFLOWING_SHORES_TALENT,
    PRIMAL_TIDE_CORE,
    PRIMAL_TIDE_CORE_TALENT,
    PRIMORDIAL_WAVE,
    PRIMORDIAL_WAVE_BUFF,
    PWAVE_REMOVAL,
    PWAVE_TRAVEL_MS,
    RIPTIDE,
    RIPTIDE_PWAVE,
)
from linking.events import Event, EventType
from linking.link import EventLink
from linking.normalizer import EventLinkNormalizer, RelationGraph
from linking.relations import get_chained, get_first_related, get_related, has_related


def _same_source(linking_event, referenced_event, relations):
    return linking_event.source_id == referenced_event.source_id


EVENT_LINKS = [
    # Riptide
    EventLink(
        link_relation=HARDCAST,
        linking_event_id=RIPTIDE,
        linking_event_type=[EventType.APPLY_BUFF, EventType.REFRESH_BUFF, EventType.HEAL],
        referenced_event_id=RIPTIDE,
        referenced_event_type=EventType.CAST,
        forward_buffer_ms=CAST_BUFFER_MS,
        backward_buffer_ms=CAST_BUFFER_MS,
        is_active=lambda c: c.has_talent(RIPTIDE),
    ),
    EventLink(
        link_relation=RIPTIDE_PWAVE,
        reverse_link_relation=APPLIED_HEAL,
        linking_event_id=RIPTIDE,
        linking_event_type=[EventType.APPLY_BUFF, EventType.REFRESH_BUFF, EventType.HEAL],
        referenced_event_id=PRIMORDIAL_WAVE,
        referenced_event_type=EventType.CAST,
        forward_buffer_ms=PWAVE_TRAVEL_MS,
        backward_buffer_ms=PWAVE_TRAVEL_MS,
        additional_condition=lambda linking, referenced, relations: bool(
            referenced.target_is_friendly
        ),
        is_active=lambda c: c.has_talent(PRIMORDIAL_WAVE),
    ),
    EventLink(
        link_relation=PRIMAL_TIDE_CORE,
        linking_event_id=RIPTIDE,
        linking_event_type=[EventType.APPLY_BUFF, EventType.HEAL],
        referenced_event_id=RIPTIDE,
        referenced_event_type=[EventType.APPLY_BUFF, EventType.REFRESH_BUFF],
        forward_buffer_ms=CAST_BUFFER_MS,
        backward_buffer_ms=CAST_BUFFER_MS,
        any_target=True,
        maximum_links=1,
        additional_condition=lambda linking, referenced, relations: (
            linking.target_id != referenced.target_id
            and linking.source_id == referenced.source_id
            and not relations.has_related(linking, HARDCAST)
            and not relations.has_related(linking, RIPTIDE_PWAVE)
        ),
        is_active=lambda c: c.has_talent(PRIMAL_TIDE_CORE_TALENT),
    ),
    # Healing Wave, needed to tell Primordial Wave echoes apart
    EventLink(
        link_relation=HARDCAST,
        reverse_link_relation=HARDCAST,
        linking_event_id=HEALING_WAVE,
        linking_event_type=EventType.HEAL,
        referenced_event_id=HEALING_WAVE,
        referenced_event_type=EventType.CAST,
        forward_buffer_ms=CAST_BUFFER_MS,
        backward_buffer_ms=CAST_BUFFER_MS,
        maximum_links=1,
    ),
    EventLink(
        link_relation=HEALING_WAVE_PWAVE,
        linking_event_id=HEALING_WAVE,
        linking_event_type=EventType.HEAL,
        referenced_event_id=HEALING_WAVE,
        referenced_event_type=EventType.CAST,
        forward_buffer_ms=PWAVE_TRAVEL_MS,
        backward_buffer_ms=PWAVE_TRAVEL_MS,
        any_target=True,
        additional_condition=lambda linking, referenced, relations: (
            not relations.has_related(linking, HARDCAST)
            and linking.source_id == referenced.source_id
        ),
        is_active=lambda c: c.has_talent(PRIMORDIAL_WAVE),
    ),
    EventLink(
        link_relation=PWAVE_REMOVAL,
        linking_event_id=PRIMORDIAL_WAVE_BUFF,
        linking_event_type=EventType.REMOVE_BUFF,
        referenced_event_id=HEALING_WAVE,
        referenced_event_type=EventType.CAST,
        forward_buffer_ms=CAST_BUFFER_MS,
        backward_buffer_ms=CAST_BUFFER_MS,
        any_target=True,
        is_active=lambda c: c.has_talent(PRIMORDIAL_WAVE),
    ),
    # Healing Rain
    EventLink(
        link_relation=HEALING_RAIN_LINK,
        reverse_link_relation=HEALING_RAIN_LINK,
        linking_event_id=HEALING_RAIN_HEAL,
        linking_event_type=EventType.HEAL,
        referenced_event_id=HEALING_RAIN,
        referenced_event_type=EventType.CAST,
        forward_buffer_ms=HEALING_RAIN_DURATION_MS,
        backward_buffer_ms=CAST_BUFFER_MS,
        any_target=True,
        additional_condition=_same_source,
        is_active=lambda c: c.has_talent(HEALING_RAIN),
    ),
    # ticks of the same pulse on different targets, for targets hit
    EventLink(
        link_relation=HEALING_RAIN_GROUPING,
        linking_event_id=HEALING_RAIN_HEAL,
        linking_event_type=EventType.HEAL,
        referenced_event_id=HEALING_RAIN_HEAL,
        referenced_event_type=EventType.HEAL,
        forward_buffer_ms=CAST_BUFFER_MS,
        backward_buffer_ms=CAST_BUFFER_MS,
        any_target=True,
        additional_condition=lambda linking, referenced, relations: (
            linking.source_id == referenced.source_id
            and linking.target_id != referenced.target_id
        ),
        is_active=lambda c: c.has_talent(HEALING_RAIN),
    ),
    EventLink(
        link_relation=OVERFLOWING_SHORES_LINK,
        reverse_link_relation=OVERFLOWING_SHORES_LINK,
        linking_event_id=OVERFLOWING_SHORES_HEAL,
        linking_event_type=EventType.HEAL,
        referenced_event_id=HEALING_RAIN,
        referenced_event_type=EventType.CAST,
        forward_buffer_ms=CAST_BUFFER_MS,
        backward_buffer_ms=CAST_BUFFER_MS,
        any_target=True,
        additional_condition=_same_source,
        is_active=lambda c: (
            c.has_talent(HEALING_RAIN) and c.has_talent(OVERFLOWING_SHORES_TALENT)
        ),
    ),
    # Chain Heal
    EventLink(
        link_relation=CHAIN_HEAL_GROUPING,
        linking_event_id=CHAIN_HEAL,
        linking_event_type=EventType.HEAL,
        referenced_event_id=CHAIN_HEAL,
        referenced_event_type=EventType.HEAL,
        forward_buffer_ms=CAST_BUFFER_MS,
        backward_buffer_ms=CAST_BUFFER_MS,
        any_target=True,
        additional_condition=_same_source,
    ),
    EventLink(
        link_relation=CHAIN_HEAL_LINK,
        reverse_link_relation=CHAIN_HEAL_LINK,
        linking_event_id=CHAIN_HEAL,
        linking_event_type=EventType.HEAL,
        referenced_event_id=CHAIN_HEAL,
        referenced_event_type=EventType.CAST,
        forward_buffer_ms=CAST_BUFFER_MS,
        backward_buffer_ms=CAST_BUFFER_MS,
        any_target=True,
        additional_condition=_same_source,
    ),
    # riptide consumed by chain heal
    EventLink(
        link_relation=FLOW_OF_THE_TIDES,
        reverse_link_relation=FLOW_OF_THE_TIDES,
        linking_event_id=RIPTIDE,
        linking_event_type=EventType.REMOVE_BUFF,
        referenced_event_id=CHAIN_HEAL,
        referenced_event_type=EventType.CAST,
        forward_buffer_ms=CAST_BUFFER_MS,
        backward_buffer_ms=CAST_BUFFER_MS,
        is_active=lambda c: c.has_talent(FLOW_OF_THE_TIDES_TALENT),
    ),
    EventLink(
        link_relation=DOWNPOUR_LINK,
        reverse_link_relation=DOWNPOUR_LINK,
        linking_event_id=DOWNPOUR,
        linking_event_type=EventType.HEAL,
        referenced_event_id=DOWNPOUR,
        referenced_event_type=EventType.CAST,
        forward_buffer_ms=CAST_BUFFER_MS,
        backward_buffer_ms=CAST_BUFFER_MS,
        any_target=True,
        additional_condition=_same_source,
        is_active=lambda c: c.has_talent(DOWNPOUR),
    ),
]


class CastLinkNormalizer(EventLinkNormalizer):
    EVENT_LINKS = EVENT_LINKS


def is_from_hardcast(relations: RelationGraph, event: Event) -> bool:
    return has_related(relations, event, HARDCAST)


def is_riptide_from_primordial_wave(relations: RelationGraph, event: Event) -> bool:
    return has_related(relations, event, RIPTIDE_PWAVE)


def is_healing_wave_from_primordial_wave(relations: RelationGraph, event: Event) -> bool:
    return has_related(relations, event, HEALING_WAVE_PWAVE)


def was_primordial_wave_consumed(relations: RelationGraph, event: Event) -> bool:
    return has_related(relations, event, PWAVE_REMOVAL)


def is_from_primal_tide_core(relations: RelationGraph, event: Event) -> bool:
    return not is_from_hardcast(relations, event) and not is_riptide_from_primordial_wave(
        relations, event
    )


def get_riptide_cast_event(relations: RelationGraph, event: Event) -> Optional[Event]:
    if is_from_hardcast(relations, event):
        return get_first_related(relations, event, HARDCAST)
    if is_riptide_from_primordial_wave(relations, event):
        return get_first_related(relations, event, RIPTIDE_PWAVE)
    return None


def get_healing_rain_events(relations: RelationGraph, event: Event) -> List[Event]:
    return list(get_related(relations, event, HEALING_RAIN_LINK))


def get_healing_rain_heal_events_for_tick(relations: RelationGraph, event: Event):
    return [event] + list(get_related(relations, event, HEALING_RAIN_GROUPING))


def get_overflowing_shores_events(relations: RelationGraph, event: Event) -> List[Event]:
    return list(get_related(relations, event, OVERFLOWING_SHORES_LINK))


def get_downpour_events(relations: RelationGraph, event: Event) -> List[Event]:
    return list(get_related(relations, event, DOWNPOUR_LINK))


def was_riptide_consumed(relations: RelationGraph, event: Event) -> bool:
    return has_related(relations, event, FLOW_OF_THE_TIDES)


def get_chain_heals(relations: RelationGraph, event: Event) -> List[Event]:
    return list(get_related(relations, event, CHAIN_HEAL_LINK))


def get_chain_heal_grouping(relations: RelationGraph, event: Event):
    return [event] + list(get_related(relations, event, CHAIN_HEAL_GROUPING))


def get_flow_of_the_tides_chain_heals(relations: RelationGraph, event: Event):
    """Heals of the chain heal that consumed this riptide removal, if any."""
    return list(get_chained(relations, event, FLOW_OF_THE_TIDES, CHAIN_HEAL_LINK))
