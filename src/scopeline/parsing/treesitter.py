"""Tree-sitter backed parser producing nested highlight events per line.

Captures from the highlights query are mapped to scope ids through the
configuration bindings, ordered outermost first, and replayed as a
well-nested ``ScopeStart``/``Source``/``ScopeEnd`` stream. Injected
languages are highlighted with the configuration the host resolver returns
and spliced in as captures nested inside the host captures.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterator, List, Optional, Sequence

from tree_sitter import Language, Node, Query, QueryCursor
from tree_sitter import Parser as TreeSitterBackend

from scopeline.runtime.telemetry import env_int
from scopeline.scopes.models import HighlightEvent, ScopeEnd, ScopeId, ScopeStart, Source

from .protocol import InjectionResolver, ParseFailure

if TYPE_CHECKING:
    from scopeline.scopes.configuration import ScopeConfiguration

DEFAULT_INJECTION_DEPTH = env_int("INJECTION_DEPTH", 4)

INJECTION_CONTENT = "injection.content"
INJECTION_LANGUAGE = "injection.language"


@dataclass(frozen=True, slots=True)
class CompiledGrammar:
    """Tree-sitter language and queries, ready to run."""

    name: str
    language: Language
    highlights: Query
    injections: Optional[Query]
    capture_names: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class TreeSitterGrammar:
    """Uncompiled tree-sitter rules: a language plus its query sources."""

    language: Any
    name: str
    highlights_query: str
    injections_query: str = ""

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("grammar name cannot be empty")

    @classmethod
    def rust(cls) -> "TreeSitterGrammar":
        import tree_sitter_rust

        return cls(
            language=tree_sitter_rust.language(),
            name="rust",
            highlights_query=tree_sitter_rust.HIGHLIGHTS_QUERY,
            injections_query=getattr(tree_sitter_rust, "INJECTIONS_QUERY", ""),
        )

    def compile(self) -> CompiledGrammar:
        language = (
            self.language
            if isinstance(self.language, Language)
            else Language(self.language)
        )
        highlights = Query(language, self.highlights_query)
        injections = (
            Query(language, self.injections_query)
            if self.injections_query.strip()
            else None
        )
        capture_names = tuple(
            highlights.capture_name(index) for index in range(highlights.capture_count)
        )
        return CompiledGrammar(
            name=self.name,
            language=language,
            highlights=highlights,
            injections=injections,
            capture_names=capture_names,
        )


@dataclass(frozen=True, slots=True)
class Capture:
    """A capture already resolved to an absolute byte range and scope."""

    start: int
    end: int
    scope: ScopeId
    pattern: int
    layer: int = 0

    @property
    def sort_key(self) -> tuple[int, int, int, int]:
        return (self.start, -self.end, self.layer, self.pattern)


class TreeSitterParser:
    """Parser implementation backed by one reusable tree-sitter parser.

    A single instance is not safe to share across threads; give every
    highlighter its own.
    """

    def __init__(self, *, injection_depth: int = DEFAULT_INJECTION_DEPTH) -> None:
        if injection_depth < 0:
            raise ValueError("injection_depth cannot be negative")
        self._backend = TreeSitterBackend()
        self._injection_depth = injection_depth

    def run(
        self,
        configuration: "ScopeConfiguration",
        source: bytes,
        injections: Optional[InjectionResolver] = None,
    ) -> Iterator[HighlightEvent]:
        grammar = configuration.rules
        if not isinstance(grammar, CompiledGrammar):
            raise ParseFailure(
                f"TreeSitterParser cannot run {type(grammar).__name__} rules",
                source=source,
            )
        captures = self.collect_captures(
            configuration, source, injections=injections
        )
        return nest_captures(captures, len(source))

    def collect_captures(
        self,
        configuration: "ScopeConfiguration",
        source: bytes,
        *,
        injections: Optional[InjectionResolver] = None,
        offset: int = 0,
        layer: int = 0,
    ) -> List[Capture]:
        grammar: CompiledGrammar = configuration.rules  # type: ignore[assignment]
        root = self._parse(grammar, source)
        captures: List[Capture] = []
        for pattern, nodes_by_name in QueryCursor(grammar.highlights).matches(root):
            for name, nodes in nodes_by_name.items():
                scope = configuration.scope_for_capture(name)
                if scope is None:
                    continue
                for node in nodes:
                    captures.append(
                        Capture(
                            start=node.start_byte + offset,
                            end=node.end_byte + offset,
                            scope=scope,
                            pattern=pattern,
                            layer=layer,
                        )
                    )

        if (
            injections is not None
            and grammar.injections is not None
            and layer < self._injection_depth
        ):
            captures.extend(
                self._collect_injected(
                    grammar, root, source, injections, offset=offset, layer=layer
                )
            )
        return captures

    def _collect_injected(
        self,
        grammar: CompiledGrammar,
        root: Node,
        source: bytes,
        injections: InjectionResolver,
        *,
        offset: int,
        layer: int,
    ) -> List[Capture]:
        assert grammar.injections is not None
        query = grammar.injections
        injected: List[Capture] = []
        for pattern, nodes_by_name in QueryCursor(query).matches(root):
            language = _injection_language(query, pattern, nodes_by_name)
            if not language:
                continue
            target = injections(language)
            if target is None or not isinstance(target.rules, CompiledGrammar):
                continue
            for node in nodes_by_name.get(INJECTION_CONTENT, ()):
                injected.extend(
                    self.collect_captures(
                        target,
                        source[node.start_byte : node.end_byte],
                        injections=injections,
                        offset=offset + node.start_byte,
                        layer=layer + 1,
                    )
                )
        return injected

    def _parse(self, grammar: CompiledGrammar, source: bytes) -> Node:
        try:
            self._backend.language = grammar.language
            tree = self._backend.parse(source)
        except (ValueError, TypeError, RuntimeError) as exc:
            raise ParseFailure(
                f"tree-sitter could not parse the line as {grammar.name}: {exc}",
                source=source,
            ) from exc
        if tree is None:
            raise ParseFailure(
                f"tree-sitter returned no tree for {grammar.name}", source=source
            )
        return tree.root_node


def _injection_language(
    query: Query, pattern: int, nodes_by_name: dict[str, list[Node]]
) -> Optional[str]:
    for node in nodes_by_name.get(INJECTION_LANGUAGE, ()):
        text = node.text
        if text:
            return text.decode("utf-8", errors="replace")
    value = query.pattern_settings(pattern).get(INJECTION_LANGUAGE)
    return str(value) if value else None


def nest_captures(captures: Sequence[Capture], length: int) -> Iterator[HighlightEvent]:
    """Replay captures as a well-nested event stream covering ``[0, length)``.

    Captures sharing a range keep the first pattern; captures that straddle
    the end of an enclosing capture are dropped.
    """

    open_ends: List[int] = []
    taken: set[tuple[int, int]] = set()
    position = 0

    for capture in sorted(captures, key=lambda item: item.sort_key):
        start = max(capture.start, 0)
        end = min(capture.end, length)
        if start >= end or (start, end) in taken or start < position:
            continue

        while open_ends and open_ends[-1] <= start:
            closing = open_ends.pop()
            if position < closing:
                yield Source(position, closing)
                position = closing
            yield ScopeEnd()

        if open_ends and end > open_ends[-1]:
            continue

        if position < start:
            yield Source(position, start)
            position = start
        taken.add((start, end))
        open_ends.append(end)
        yield ScopeStart(capture.scope)

    while open_ends:
        closing = open_ends.pop()
        if position < closing:
            yield Source(position, closing)
            position = closing
        yield ScopeEnd()

    if position < length:
        yield Source(position, length)


__all__ = [
    "Capture",
    "CompiledGrammar",
    "DEFAULT_INJECTION_DEPTH",
    "TreeSitterGrammar",
    "TreeSitterParser",
    "nest_captures",
]
