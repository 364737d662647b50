"""Textual host adapter for the line highlighter."""

from .controller import TextualHighlightAdapter, TextualUIHooks, char_offset

__all__ = ["TextualHighlightAdapter", "TextualUIHooks", "char_offset"]
