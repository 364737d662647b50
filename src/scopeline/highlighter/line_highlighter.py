"""Per-line highlighter bridging a scope-event parser and a line renderer."""

from __future__ import annotations

from typing import Iterator, Optional

from scopeline.parsing.protocol import InjectionResolver, ParseFailure, Parser
from scopeline.runtime.telemetry import record_event, span
from scopeline.scopes.configuration import ScopeConfiguration
from scopeline.scopes.models import StyledSpan

from .resolution import ScopeTracking, resolve_spans


class LineHighlighter:
    """Turns one line of text at a time into styled byte-range spans.

    Each call parses the line on its own; nothing is carried between lines
    and nothing is cached. Parse failures never escape: a line the parser
    rejects simply comes back without spans.
    """

    def __init__(
        self,
        settings: ScopeConfiguration,
        *,
        parser: Optional[Parser] = None,
        tracking: ScopeTracking | str | None = None,
        injections: Optional[InjectionResolver] = None,
        logger_name: str | None = None,
    ) -> None:
        if parser is None:
            from scopeline.parsing.treesitter import TreeSitterParser

            parser = TreeSitterParser()
        self._settings = settings
        self._parser = parser
        self._tracking = (
            ScopeTracking.from_env() if tracking is None else ScopeTracking.parse(tracking)
        )
        self._injections = injections
        self._logger_name = logger_name
        self._line = 0

    @property
    def settings(self) -> ScopeConfiguration:
        return self._settings

    @property
    def tracking(self) -> ScopeTracking:
        return self._tracking

    def set_tracking(self, tracking: ScopeTracking | str) -> None:
        self._tracking = ScopeTracking.parse(tracking)

    def update_settings(self, settings: ScopeConfiguration) -> None:
        if settings is self._settings:
            return
        with span(
            "highlighter::update_settings",
            logger_name=self._logger_name,
            component="highlighter",
            metadata={"line": self._line, "scope_count": len(settings)},
        ):
            self._settings = settings

    def change_line(self, line: int) -> None:
        if line < 0:
            raise ValueError("line cannot be negative")
        self._line = line

    def current_line(self) -> int:
        return self._line

    def highlight_line(self, line: str | bytes) -> Iterator[StyledSpan]:
        source = line.encode("utf-8") if isinstance(line, str) else bytes(line)
        settings = self._settings
        try:
            events = self._parser.run(settings, source, self._injections)
        except ParseFailure as exc:
            record_event(
                "highlight.parse_failed",
                level="debug",
                data={"line": self._line, "reason": str(exc)},
                logger_name=self._logger_name,
            )
            return iter(())
        return resolve_spans(events, length=len(source), tracking=self._tracking)


__all__ = ["LineHighlighter"]
