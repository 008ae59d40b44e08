from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Tuple, Union

from linking.events import Event, EventType


class LinkConfigurationError(Exception):
    pass


class LinkConditionError(LinkConfigurationError):
    pass


def _as_tuple(value) -> tuple:
    if value is None:
        return ()
    if isinstance(value, (str, int, EventType)):
        return (value,)
    return tuple(value)


@dataclass(frozen=True)
class EventLink:
    """Describes how one class of "linking" events relates to "referenced" ones.

    A linking event falls inside the window of a referenced event when
    ``referenced.timestamp - backward_buffer_ms <= linking.timestamp <=
    referenced.timestamp + forward_buffer_ms``.

    ``additional_condition`` is called as ``(linking_event, referenced_event,
    relations)`` where ``relations`` is the graph built so far, so a rule can
    check relations written by rules declared before it.
    ``maximum_links`` caps how many referenced events a single linking event
    binds to under this rule, either as an int or as a callable taking the
    combatant.
    """

    link_relation: str
    linking_event_id: Any
    linking_event_type: Any
    referenced_event_id: Any
    referenced_event_type: Any
    forward_buffer_ms: int = 0
    backward_buffer_ms: int = 0
    reverse_link_relation: Optional[str] = None
    any_target: bool = False
    maximum_links: Union[int, Callable[[Any], int], None] = None
    additional_condition: Optional[Callable[[Event, Event, Any], bool]] = field(
        default=None, compare=False
    )
    is_active: Optional[Callable[[Any], bool]] = field(default=None, compare=False)

    def __post_init__(self):
        for name in (
            "linking_event_id",
            "linking_event_type",
            "referenced_event_id",
            "referenced_event_type",
        ):
            object.__setattr__(self, name, _as_tuple(getattr(self, name)))
        for name in ("linking_event_type", "referenced_event_type"):
            try:
                types = tuple(EventType(t) for t in getattr(self, name))
            except ValueError:
                # left as-is, validate() reports it
                continue
            object.__setattr__(self, name, types)

    @property
    def same_target_required(self) -> bool:
        return not self.any_target

    def problems(self):
        problems = []
        if not isinstance(self.link_relation, str) or not self.link_relation:
            problems.append("link_relation must be a non-empty string")
        if self.reverse_link_relation is not None and (
            not isinstance(self.reverse_link_relation, str)
            or not self.reverse_link_relation
        ):
            problems.append("reverse_link_relation must be a non-empty string")

        for name in (
            "linking_event_id",
            "linking_event_type",
            "referenced_event_id",
            "referenced_event_type",
        ):
            if not getattr(self, name):
                problems.append(f"{name} must not be empty")
        for name in ("linking_event_type", "referenced_event_type"):
            if not all(isinstance(t, EventType) for t in getattr(self, name)):
                problems.append(f"{name} contains an unknown event type")

        for name in ("forward_buffer_ms", "backward_buffer_ms"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                problems.append(f"{name} must be an integer")
            elif value < 0:
                problems.append(f"{name} must not be negative")

        if self.maximum_links is not None and not callable(self.maximum_links):
            if (
                isinstance(self.maximum_links, bool)
                or not isinstance(self.maximum_links, int)
                or self.maximum_links < 1
            ):
                problems.append("maximum_links must be a positive integer")

        for name in ("additional_condition", "is_active"):
            hook = getattr(self, name)
            if hook is not None and not callable(hook):
                problems.append(f"{name} must be callable")
        return problems

    def validate(self):
        problems = self.problems()
        if problems:
            raise LinkConfigurationError(
                f"Invalid event link {self.link_relation!r}: " + "; ".join(problems)
            )

    def matches_linking(self, event: Event) -> bool:
        return (
            event.ability_id in self.linking_event_id
            and event.type in self.linking_event_type
        )

    def matches_referenced(self, event: Event) -> bool:
        return (
            event.ability_id in self.referenced_event_id
            and event.type in self.referenced_event_type
        )

    def window(self, referenced_event: Event) -> Tuple[int, int]:
        return (
            referenced_event.timestamp - self.backward_buffer_ms,
            referenced_event.timestamp + self.forward_buffer_ms,
        )

    def check_active(self, combatant) -> bool:
        if self.is_active is None:
            return True
        try:
            return bool(self.is_active(combatant))
        except Exception as e:
            raise LinkConfigurationError(
                f"is_active for event link {self.link_relation!r} failed: {e}"
            ) from e

    def resolve_maximum_links(self, combatant) -> Optional[int]:
        if not callable(self.maximum_links):
            return self.maximum_links
        try:
            maximum_links = self.maximum_links(combatant)
        except Exception as e:
            raise LinkConfigurationError(
                f"maximum_links for event link {self.link_relation!r} failed: {e}"
            ) from e
        if maximum_links is not None and (
            not isinstance(maximum_links, int) or maximum_links < 1
        ):
            raise LinkConfigurationError(
                f"maximum_links for event link {self.link_relation!r} "
                f"resolved to {maximum_links!r}"
            )
        return maximum_links

    def check_condition(self, linking_event: Event, referenced_event: Event, relations):
        if self.additional_condition is None:
            return True
        try:
            return bool(
                self.additional_condition(linking_event, referenced_event, relations)
            )
        except Exception as e:
            raise LinkConditionError(
                f"additional_condition for event link {self.link_relation!r} failed "
                f"on {linking_event!r} -> {referenced_event!r}: {e}"
            ) from e
