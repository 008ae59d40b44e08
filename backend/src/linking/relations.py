from typing import Optional, Tuple

from linking.events import Event
from linking.normalizer import RelationGraph


def has_related(relations: RelationGraph, event: Event, relation: str) -> bool:
    return relations.has_related(event, relation)


def get_related(relations: RelationGraph, event: Event, relation: str) -> Tuple[Event, ...]:
    return relations.get_related(event, relation)


def get_first_related(
    relations: RelationGraph, event: Event, relation: str
) -> Optional[Event]:
    related = relations.get_related(event, relation)
    return related[0] if related else None


def get_chained(relations: RelationGraph, event: Event, *relation_path: str):
    """Follow ``relation_path`` one hop at a time from ``event``.

    e.g. ``get_chained(relations, removal, FLOW_OF_THE_TIDES, CHAIN_HEAL)``
    goes from a buff removal to the cast that consumed it, then to the
    heals of that cast.
    """
    current = (event,)
    for relation in relation_path:
        seen = set()
        hop = []
        for source in current:
            for related in relations.get_related(source, relation):
                if id(related) not in seen:
                    seen.add(id(related))
                    hop.append(related)
        current = tuple(hop)
    return current
