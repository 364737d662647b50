"""Textual adapter that renders highlighted lines as rich ``Text``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Sequence

from rich.text import Text
from textual.theme import Theme

from scopeline.highlighter import LineHighlighter, ScopeTracking
from scopeline.runtime.telemetry import span
from scopeline.scopes.configuration import ScopeConfiguration
from scopeline.styles.format import StyleFunction, to_style


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_lines: Callable[[Sequence[Text]], None]
    update_status: Callable[[str], None] = _noop
    # Optional realtime log callback a host may use to surface debug lines
    log: Callable[[str], None] = _noop


def char_offset(source: bytes, byte_offset: int) -> int:
    """Convert a byte offset in UTF-8 ``source`` to a character offset."""

    return len(source[:byte_offset].decode("utf-8", errors="ignore"))


class TextualHighlightAdapter:
    """Bridges a LineHighlighter to Textual widgets through rich styles."""

    def __init__(
        self,
        highlighter: LineHighlighter,
        hooks: TextualUIHooks,
        *,
        style: StyleFunction = to_style,
        logger_name: str | None = None,
    ) -> None:
        self.highlighter = highlighter
        self.hooks = hooks
        self._style = style
        self._logger_name = logger_name

    def render(
        self, lines: Sequence[str], theme: Theme, *, first_line: int = 0
    ) -> list[Text]:
        """Highlight ``lines`` (the visible range starting at ``first_line``)."""

        with span(
            "adapter::render",
            logger_name=self._logger_name,
            component="adapter",
            metadata={"first_line": first_line, "count": len(lines)},
        ):
            rendered = []
            for index, line in enumerate(lines):
                self.highlighter.change_line(first_line + index)
                rendered.append(self.render_line(line, theme))
        self._log_state("render ->", first_line=first_line, count=len(rendered))
        self.hooks.update_lines(rendered)
        return rendered

    def render_line(self, line: str, theme: Theme) -> Text:
        text = Text(line, end="")
        source = line.encode("utf-8")
        for styled in self.highlighter.highlight_line(source):
            style = self._style(styled.scope, theme)
            if not style:
                continue
            text.stylize(
                style, char_offset(source, styled.start), char_offset(source, styled.end)
            )
        return text

    def update_settings(self, settings: ScopeConfiguration) -> bool:
        """Swap configurations; returns ``False`` when nothing changed."""

        if settings == self.highlighter.settings:
            return False
        self.highlighter.update_settings(settings)
        self.hooks.update_status(f"settings::{len(settings)} scopes")
        self._log_state("settings ->", scopes=len(settings))
        return True

    def set_tracking(self, tracking: ScopeTracking | str) -> ScopeTracking:
        resolved = ScopeTracking.parse(tracking)
        if resolved is not self.highlighter.tracking:
            self.highlighter.set_tracking(resolved)
            self.hooks.update_status(f"nesting::{resolved.value}")
            self._log_state("tracking ->", tracking=resolved.value)
        return resolved

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot = self._state_metadata()
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix]
        for key, value in snapshot.items():
            parts.append(f"{key}={value!r}")
        self.hooks.log(" ".join(parts))

    def _state_metadata(self) -> Dict[str, object]:
        return {
            "line": self.highlighter.current_line(),
            "tracking": self.highlighter.tracking.value,
        }


__all__ = ["TextualHighlightAdapter", "TextualUIHooks", "char_offset"]
