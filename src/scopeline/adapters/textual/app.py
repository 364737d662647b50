"""Executable Textual app that shows a file through the line highlighter."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Optional, Sequence

try:  # pragma: no cover - imported only when demo is run
    from rich.text import Text
    from textual.app import App, ComposeResult
    from textual.containers import VerticalScroll
    from textual.widgets import Footer, Header, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use scopeline.adapters.textual.app"
    ) from exc

from scopeline.highlighter import LineHighlighter, ScopeTracking
from scopeline.parsing.treesitter import TreeSitterGrammar
from scopeline.runtime.telemetry import env_int, env_setting
from scopeline.scopes.configuration import ScopeConfiguration

from .controller import TextualHighlightAdapter, TextualUIHooks


def load_sample() -> str:
    return resources.files(__package__).joinpath("sample.rs").read_text("utf-8")


def create_default_highlighter(
    tracking: ScopeTracking | str | None = None,
) -> LineHighlighter:
    """Build a Rust highlighter with the standard scope names."""

    settings = ScopeConfiguration.standard(TreeSitterGrammar.rust())
    return LineHighlighter(
        settings,
        tracking=tracking,
        injections=lambda language: settings if language == "rust" else None,
    )


@dataclass
class UIState:
    status_text: str = ""
    line_count: int = 0


class HighlightViewerApp(App[None]):
    """Minimal Textual UI painting highlighted lines."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#code-area {
		height: 1fr;
		border: round $accent;
		padding: 0 1;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
        ("t", "toggle_tracking", "Nesting"),
    ]

    def __init__(
        self,
        *,
        source: str,
        tracking: ScopeTracking | str | None = None,
        first_line: int = 0,
    ) -> None:
        super().__init__()
        self._state = UIState()
        self._lines = source.splitlines()
        self._first_line = first_line
        self._tracking = tracking
        self.adapter: TextualHighlightAdapter | None = None
        self._code_widget: Static | None = None
        self._status_widget: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with VerticalScroll(id="code-area"):
            self._code_widget = Static("", id="code-view")
            yield self._code_widget
        self._status_widget = Static("", id="status-line")
        yield self._status_widget
        yield Footer()

    def on_mount(self) -> None:
        hooks = TextualUIHooks(
            update_lines=self._update_lines,
            update_status=self._update_status,
        )
        self.adapter = TextualHighlightAdapter(
            create_default_highlighter(self._tracking), hooks
        )
        self._render_lines()
        self._update_status(f"nesting::{self.adapter.highlighter.tracking.value}")

    def watch_theme(self, _theme: str) -> None:
        if self.adapter:
            self._render_lines()

    def action_toggle_tracking(self) -> None:
        if not self.adapter:
            return
        current = self.adapter.highlighter.tracking
        following = (
            ScopeTracking.SINGLE_SLOT
            if current is ScopeTracking.STACK
            else ScopeTracking.STACK
        )
        self.adapter.set_tracking(following)
        self._render_lines()

    def _render_lines(self) -> None:
        if not self.adapter:
            return
        visible = self._lines[self._first_line :]
        self.adapter.render(visible, self.current_theme, first_line=self._first_line)

    def _update_lines(self, lines: Sequence[Text]) -> None:
        self._state.line_count = len(lines)
        if self._code_widget:
            self._code_widget.update(Text("\n").join(lines))

    def _update_status(self, status: str) -> None:
        self._state.status_text = status
        if self._status_widget:
            self._status_widget.update(status)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Show a Rust file through the scopeline highlighter."
    )
    parser.add_argument(
        "--file",
        type=Path,
        default=None,
        help="Rust source to display (default: bundled sample)",
    )
    parser.add_argument(
        "--tracking",
        choices=[member.value for member in ScopeTracking],
        default=env_setting("SCOPE_TRACKING"),
        help="Nesting strategy (default: $SCOPELINE_SCOPE_TRACKING or stack)",
    )
    parser.add_argument(
        "--first-line",
        type=int,
        default=env_int("FIRST_LINE", 0),
        help="First line of the file to show (default: 0)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    source = args.file.read_text("utf-8") if args.file else load_sample()
    app = HighlightViewerApp(
        source=source,
        tracking=args.tracking,
        first_line=max(args.first_line, 0),
    )
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
