"""Default mapping from standard scope ids to rich styles.

Colors come from the active Textual theme so highlighting follows theme
switches. The mapping assumes the configuration was built with
``STANDARD_SCOPE_NAMES``; hosts with their own scope names should supply
their own ``StyleFunction``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Literal, Optional

from rich.style import Style
from textual.color import Color
from textual.theme import Theme

from scopeline.scopes.configuration import STANDARD_SCOPE_NAMES
from scopeline.scopes.models import ScopeId

StyleFunction = Callable[[ScopeId, Theme], Style]

PaletteRole = Literal["primary", "secondary", "success", "error"]
Shade = Literal["weak", "base", "strong"]

_SHADE_AMOUNT = 0.15


@dataclass(frozen=True, slots=True)
class ScopeFormat:
    """Palette entry and weight used for one family of scopes."""

    role: PaletteRole
    shade: Shade = "base"
    bold: bool = False


def _ids(*names: str) -> tuple[ScopeId, ...]:
    return tuple(STANDARD_SCOPE_NAMES.index(name) for name in names)


def _build_formats() -> Dict[ScopeId, ScopeFormat]:
    families = (
        (_ids("comment"), ScopeFormat("secondary", "weak")),
        (_ids("constant", "constant.builtin"), ScopeFormat("error", "weak", bold=True)),
        (_ids("string", "string.special"), ScopeFormat("success")),
        (
            _ids("function", "function.builtin"),
            ScopeFormat("success", "strong", bold=True),
        ),
        (_ids("type", "type.builtin"), ScopeFormat("primary", "weak", bold=True)),
        (_ids("variable"), ScopeFormat("error", "weak")),
        (_ids("keyword", "module"), ScopeFormat("error", "strong", bold=True)),
    )
    formats: Dict[ScopeId, ScopeFormat] = {}
    for scope_ids, scope_format in families:
        for scope in scope_ids:
            formats[scope] = scope_format
    return formats


SCOPE_FORMATS: Dict[ScopeId, ScopeFormat] = _build_formats()


def palette_color(theme: Theme, role: PaletteRole, shade: Shade = "base") -> str:
    """Resolve a theme role to a hex color, lightened or darkened by shade."""

    raw: Optional[str] = getattr(theme, role, None) or theme.primary
    color = Color.parse(raw)
    if shade == "weak":
        color = color.lighten(_SHADE_AMOUNT)
    elif shade == "strong":
        color = color.darken(_SHADE_AMOUNT)
    return color.hex


def to_style(scope: ScopeId, theme: Theme) -> Style:
    scope_format = SCOPE_FORMATS.get(scope)
    if scope_format is None:
        return Style.null()
    return Style(
        color=palette_color(theme, scope_format.role, scope_format.shade),
        bold=scope_format.bold,
    )


__all__ = [
    "SCOPE_FORMATS",
    "ScopeFormat",
    "StyleFunction",
    "palette_color",
    "to_style",
]
