"""Boundary types for the parser that feeds the line highlighter."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Iterable, Optional, Protocol, Union

from scopeline.scopes.models import HighlightEvent

if TYPE_CHECKING:
    from scopeline.scopes.configuration import ScopeConfiguration


class ParseFailure(RuntimeError):
    """Raised (or yielded in place of an event) when a line cannot be parsed."""

    def __init__(self, message: str, *, source: bytes | None = None) -> None:
        super().__init__(message)
        self.source = source


InjectionResolver = Callable[[str], Optional["ScopeConfiguration"]]

EventStreamItem = Union[HighlightEvent, ParseFailure]


class Parser(Protocol):
    """Turns the raw bytes of one line into a flat scope-event stream."""

    def run(
        self,
        configuration: "ScopeConfiguration",
        source: bytes,
        injections: Optional[InjectionResolver] = None,
    ) -> Iterable[EventStreamItem]:
        """Return the ordered, well-nested events for ``source``.

        Raise ``ParseFailure`` when the line cannot be parsed at all. A
        ``ParseFailure`` instance may also stand in for a single broken
        event inside an otherwise usable stream.
        """
        ...


__all__ = [
    "EventStreamItem",
    "InjectionResolver",
    "ParseFailure",
    "Parser",
]
