"""Dataclasses describing highlight events and resolved spans."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

ScopeId = int


@dataclass(frozen=True, slots=True)
class Source:
    """Byte range of the current line with no scope boundary inside it."""

    start: int
    end: int


@dataclass(frozen=True, slots=True)
class ScopeStart:
    """A scope opens at the current position of the stream."""

    scope: ScopeId


@dataclass(frozen=True, slots=True)
class ScopeEnd:
    """The innermost open scope closes."""


HighlightEvent = Union[Source, ScopeStart, ScopeEnd]

EVENT_TYPES = (Source, ScopeStart, ScopeEnd)


@dataclass(frozen=True, slots=True)
class StyledSpan:
    """Byte range of a line paired with the scope that styles it."""

    start: int
    end: int
    scope: ScopeId

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError("span start cannot be negative")
        if self.end < self.start:
            raise ValueError("span end cannot precede its start")

    def __len__(self) -> int:
        return self.end - self.start

    def slice(self, source: bytes) -> bytes:
        return source[self.start : self.end]


__all__ = [
    "EVENT_TYPES",
    "HighlightEvent",
    "ScopeEnd",
    "ScopeId",
    "ScopeStart",
    "Source",
    "StyledSpan",
]
