"""Style functions turning scope ids into renderable styles."""

from .format import SCOPE_FORMATS, ScopeFormat, StyleFunction, palette_color, to_style

__all__ = [
    "SCOPE_FORMATS",
    "ScopeFormat",
    "StyleFunction",
    "palette_color",
    "to_style",
]
