import bisect
import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from linking.base import BasePreprocessor
from linking.events import Event, EventLog
from linking.link import EventLink, LinkConfigurationError


class RelationGraph:
    """Named, directed relations between events of a single EventLog.

    Relation lists keep the order links were made in and never hold the
    same event twice. Once frozen the graph is read-only.
    """

    def __init__(self, events: EventLog):
        self._events = events
        self._relations: Dict[int, Dict[str, list]] = defaultdict(dict)
        self._frozen = False

    @property
    def events(self) -> EventLog:
        return self._events

    @property
    def frozen(self):
        return self._frozen

    def _position(self, event: Event) -> int:
        position = self._events.position(event)
        if position is None:
            raise ValueError(f"{event!r} is not part of this event log")
        return position

    def add(self, linking_event: Event, relation: str, referenced_event: Event) -> bool:
        if self._frozen:
            raise RuntimeError("Relation graph is frozen")

        position = self._position(linking_event)
        related = self._relations[position].setdefault(relation, [])
        referenced_position = self._position(referenced_event)
        if referenced_position in related:
            return False
        related.append(referenced_position)
        return True

    def freeze(self):
        for relations in self._relations.values():
            for relation, related in relations.items():
                relations[relation] = tuple(related)
        self._relations = dict(self._relations)
        self._frozen = True

    def _related_positions(self, event: Event, relation: str) -> Sequence[int]:
        position = self._events.position(event)
        if position is None:
            return ()
        return self._relations.get(position, {}).get(relation, ())

    def has_related(self, event: Event, relation: str) -> bool:
        return len(self._related_positions(event, relation)) > 0

    def get_related(self, event: Event, relation: str) -> Tuple[Event, ...]:
        return tuple(
            self._events[position]
            for position in self._related_positions(event, relation)
        )

    def relation_names(self) -> List[str]:
        names = set()
        for relations in self._relations.values():
            names.update(name for name, related in relations.items() if related)
        return sorted(names)

    def count(self, relation: str) -> int:
        return sum(
            len(relations.get(relation, ())) for relations in self._relations.values()
        )

    def to_dict(self):
        return {
            position: {
                relation: list(related)
                for relation, related in self._relations[position].items()
                if related
            }
            for position in sorted(self._relations)
            if any(self._relations[position].values())
        }


def _link_rule(events: EventLog, link: EventLink, maximum_links, graph: RelationGraph):
    # events the rule could link from, in stream order
    candidates = [
        (position, event)
        for position, event in enumerate(events)
        if link.matches_linking(event)
    ]
    if not candidates:
        return 0
    candidate_timestamps = [event.timestamp for _, event in candidates]
    links_by_candidate = defaultdict(int)
    links_made = 0

    for referenced_event in events:
        if not link.matches_referenced(referenced_event):
            continue

        start, end = link.window(referenced_event)
        lo = bisect.bisect_left(candidate_timestamps, start)
        hi = bisect.bisect_right(candidate_timestamps, end)

        for position, linking_event in candidates[lo:hi]:
            if linking_event is referenced_event:
                continue
            if link.same_target_required and (
                linking_event.target_id != referenced_event.target_id
            ):
                continue
            if (
                maximum_links is not None
                and links_by_candidate[position] >= maximum_links
            ):
                continue
            if not link.check_condition(linking_event, referenced_event, graph):
                continue

            added = graph.add(linking_event, link.link_relation, referenced_event)
            if link.reverse_link_relation:
                graph.add(referenced_event, link.reverse_link_relation, linking_event)
            if added:
                links_by_candidate[position] += 1
                links_made += 1

    return links_made


def build_relations(
    events: Union[EventLog, Iterable[Event]],
    links: Sequence[EventLink],
    combatant,
) -> RelationGraph:
    """Run every active link against the event stream, in declaration order.

    Rule order matters: an ``additional_condition`` only sees relations made
    by the rules declared before it.
    """
    if not isinstance(events, EventLog):
        events = EventLog(events)

    for link in links:
        if not isinstance(link, EventLink):
            raise LinkConfigurationError(f"Expected an EventLink, got {link!r}")
        link.validate()

    active_links = []
    for link in links:
        if link.check_active(combatant):
            active_links.append((link, link.resolve_maximum_links(combatant)))
        else:
            logging.debug(f"Skipping inactive event link {link.link_relation}")

    graph = RelationGraph(events)
    for link, maximum_links in active_links:
        links_made = _link_rule(events, link, maximum_links, graph)
        logging.debug(f"Event link {link.link_relation} made {links_made} links")
    graph.freeze()

    logging.info(
        f"Linked {len(events)} events with {len(active_links)}/{len(links)} active links"
    )
    return graph


class EventLinkNormalizer(BasePreprocessor):
    EVENT_LINKS: Sequence[EventLink] = ()

    def __init__(self, combatant, event_links: Optional[Sequence[EventLink]] = None):
        self._combatant = combatant
        self._event_links = list(
            self.EVENT_LINKS if event_links is None else event_links
        )
        self._events = []
        self._relations = None

    @property
    def event_links(self):
        return list(self._event_links)

    def preprocess_event(self, event):
        if self._relations is not None:
            raise RuntimeError("Events were already normalized")
        self._events.append(event)

    def normalize(self) -> RelationGraph:
        if self._relations is None:
            self._relations = build_relations(
                self._events, self._event_links, self._combatant
            )
        return self._relations

    @property
    def relations(self) -> RelationGraph:
        return self.normalize()
