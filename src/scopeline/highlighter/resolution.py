"""Flatten a nested scope-event stream into ordered, non-overlapping spans."""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Iterator, List, Optional

from scopeline.parsing.protocol import EventStreamItem, ParseFailure
from scopeline.runtime.telemetry import env_setting, record_event
from scopeline.scopes.models import (
    EVENT_TYPES,
    ScopeId,
    ScopeStart,
    Source,
    StyledSpan,
)


class ScopeTracking(str, Enum):
    """How the resolver decides which open scope styles a range."""

    # Innermost open scope wins; closing it reveals the enclosing scope.
    STACK = "stack"
    # Only the most recently opened scope is remembered; closing it leaves
    # the range unstyled even when an enclosing scope is still open.
    SINGLE_SLOT = "single_slot"

    @classmethod
    def parse(cls, value: str | "ScopeTracking") -> "ScopeTracking":
        if isinstance(value, ScopeTracking):
            return value
        key = value.strip().lower().replace("-", "_")
        try:
            return cls(key)
        except ValueError as exc:
            raise ValueError(
                f"Unknown scope tracking '{value}'; expected one of "
                f"{[member.value for member in cls]}"
            ) from exc

    @classmethod
    def from_env(cls) -> "ScopeTracking":
        raw = env_setting("SCOPE_TRACKING")
        if not raw:
            return cls.STACK
        try:
            return cls.parse(raw)
        except ValueError:
            record_event(
                "highlight.unknown_tracking", level="warning", data={"value": raw}
            )
            return cls.STACK


class _ScopeStack:
    def __init__(self) -> None:
        self._open: List[ScopeId] = []

    def push(self, scope: ScopeId) -> None:
        self._open.append(scope)

    def pop(self) -> None:
        if self._open:
            self._open.pop()

    @property
    def active(self) -> Optional[ScopeId]:
        return self._open[-1] if self._open else None


class _ScopeSlot:
    def __init__(self) -> None:
        self.active: Optional[ScopeId] = None

    def push(self, scope: ScopeId) -> None:
        self.active = scope

    def pop(self) -> None:
        self.active = None


def resolve_spans(
    events: Iterable[EventStreamItem],
    *,
    length: int,
    tracking: ScopeTracking = ScopeTracking.STACK,
) -> Iterator[StyledSpan]:
    """Yield a span for every ``Source`` range covered by an open scope.

    Items that are not events, ranges that are empty or fall outside
    ``[0, length)``, and ranges that would overlap earlier output are
    skipped. A ``ParseFailure`` raised by the stream ends the line with the
    spans produced so far.
    """

    scopes = _ScopeStack() if tracking is ScopeTracking.STACK else _ScopeSlot()
    position = 0
    skipped = 0
    iterator = iter(events)

    while True:
        try:
            event = next(iterator)
        except StopIteration:
            break
        except ParseFailure as exc:
            record_event(
                "highlight.stream_aborted",
                level="debug",
                data={"reason": str(exc), "position": position},
            )
            break

        if not isinstance(event, EVENT_TYPES):
            skipped += 1
            continue
        if isinstance(event, Source):
            if not 0 <= event.start < event.end <= length or event.start < position:
                skipped += 1
                continue
            position = event.end
            scope = scopes.active
            if scope is not None:
                yield StyledSpan(event.start, event.end, scope)
        elif isinstance(event, ScopeStart):
            scopes.push(event.scope)
        else:
            scopes.pop()

    if skipped:
        record_event(
            "highlight.events_skipped", level="debug", data={"count": skipped}
        )


__all__ = ["ScopeTracking", "resolve_spans"]
