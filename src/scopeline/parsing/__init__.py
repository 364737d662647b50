"""Parser boundary types; the tree-sitter parser lives in ``treesitter``."""

from .protocol import (
    EventStreamItem,
    InjectionResolver,
    ParseFailure,
    Parser,
)

__all__ = [
    "EventStreamItem",
    "InjectionResolver",
    "ParseFailure",
    "Parser",
]
