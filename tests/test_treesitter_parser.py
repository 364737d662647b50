from __future__ import annotations

import pytest
import tree_sitter_rust

from scopeline.highlighter import LineHighlighter
from scopeline.parsing import ParseFailure
from scopeline.parsing.treesitter import (
    Capture,
    CompiledGrammar,
    TreeSitterGrammar,
    TreeSitterParser,
    nest_captures,
)
from scopeline.scopes import (
    ConfigurationError,
    ScopeConfiguration,
    ScopeEnd,
    ScopeStart,
    Source,
    StyledSpan,
)


@pytest.fixture(scope="module")
def rust_configuration() -> ScopeConfiguration:
    return ScopeConfiguration.standard(TreeSitterGrammar.rust())


def spans_for(configuration: ScopeConfiguration, line: str) -> list[StyledSpan]:
    highlighter = LineHighlighter(configuration, parser=TreeSitterParser())
    return list(highlighter.highlight_line(line))


def test_rust_grammar_compiles_and_binds_standard_names(
    rust_configuration: ScopeConfiguration,
) -> None:
    assert isinstance(rust_configuration.rules, CompiledGrammar)
    assert rust_configuration.rules.name == "rust"
    assert rust_configuration.scope_for_capture("string") == rust_configuration.scope_id(
        "string"
    )
    assert rust_configuration.scope_for_capture("comment") == rust_configuration.scope_id(
        "comment"
    )


def test_rust_line_highlighting(rust_configuration: ScopeConfiguration) -> None:
    line = 'let greeting = "hi"; // note'
    source = line.encode()

    spans = spans_for(rust_configuration, line)

    keyword = rust_configuration.scope_id("keyword")
    string = rust_configuration.scope_id("string")
    comment = rust_configuration.scope_id("comment")
    assert any(span.scope == keyword and span.slice(source) == b"let" for span in spans)
    assert any(span.scope == string and b"hi" in span.slice(source) for span in spans)
    assert any(
        span.scope == comment and span.slice(source).startswith(b"//") for span in spans
    )
    for previous, current in zip(spans, spans[1:]):
        assert previous.end <= current.start
    assert all(0 <= span.start < span.end <= len(source) for span in spans)


def test_incomplete_line_still_highlights(rust_configuration: ScopeConfiguration) -> None:
    line = 'fn broken("open'

    spans = spans_for(rust_configuration, line)

    assert all(span.end <= len(line.encode()) for span in spans)
    assert spans == spans_for(rust_configuration, line)


def test_empty_line_has_no_spans(rust_configuration: ScopeConfiguration) -> None:
    assert spans_for(rust_configuration, "") == []


def test_invalid_highlights_query_is_a_configuration_error() -> None:
    grammar = TreeSitterGrammar(
        language=tree_sitter_rust.language(),
        name="rust",
        highlights_query="(definitely_not_a_rust_node) @comment",
    )

    with pytest.raises(ConfigurationError):
        ScopeConfiguration.build(grammar, ("comment",))


def test_grammar_requires_a_name() -> None:
    with pytest.raises(ValueError):
        TreeSitterGrammar(language=None, name="", highlights_query="")


def test_foreign_rules_are_a_parse_failure() -> None:
    class PlainRules:
        capture_names = ("comment",)

        def compile(self) -> "PlainRules":
            return self

    configuration = ScopeConfiguration.build(PlainRules(), ("comment",))

    with pytest.raises(ParseFailure):
        TreeSitterParser().run(configuration, b"// x")
    assert spans_for(configuration, "// x") == []


def test_injection_resolver_receives_macro_language(
    rust_configuration: ScopeConfiguration,
) -> None:
    if rust_configuration.rules.injections is None:  # type: ignore[union-attr]
        pytest.skip("grammar ships no injections query")
    requested: list[str] = []

    def resolver(language: str) -> ScopeConfiguration | None:
        requested.append(language)
        return rust_configuration if language == "rust" else None

    line = 'println!("{}", value);'
    highlighter = LineHighlighter(
        rust_configuration, parser=TreeSitterParser(), injections=resolver
    )

    spans = list(highlighter.highlight_line(line))

    assert "rust" in requested
    for previous, current in zip(spans, spans[1:]):
        assert previous.end <= current.start


def test_injection_depth_cannot_be_negative() -> None:
    with pytest.raises(ValueError):
        TreeSitterParser(injection_depth=-1)


def test_nest_captures_orders_outer_before_inner() -> None:
    captures = [
        Capture(start=4, end=6, scope=2, pattern=1),
        Capture(start=0, end=10, scope=1, pattern=0),
    ]

    events = list(nest_captures(captures, 12))

    assert events == [
        ScopeStart(1),
        Source(0, 4),
        ScopeStart(2),
        Source(4, 6),
        ScopeEnd(),
        Source(6, 10),
        ScopeEnd(),
        Source(10, 12),
    ]


def test_nest_captures_keeps_first_pattern_for_same_range() -> None:
    captures = [
        Capture(start=0, end=3, scope=7, pattern=5),
        Capture(start=0, end=3, scope=4, pattern=2),
    ]

    events = list(nest_captures(captures, 3))

    assert events == [ScopeStart(4), Source(0, 3), ScopeEnd()]


def test_nest_captures_drops_straddling_captures() -> None:
    captures = [
        Capture(start=0, end=5, scope=1, pattern=0),
        Capture(start=3, end=8, scope=2, pattern=1),
        Capture(start=5, end=8, scope=3, pattern=2),
    ]

    events = list(nest_captures(captures, 8))

    assert events == [
        ScopeStart(1),
        Source(0, 5),
        ScopeEnd(),
        ScopeStart(3),
        Source(5, 8),
        ScopeEnd(),
    ]


def test_nest_captures_clamps_and_skips_empty_ranges() -> None:
    captures = [
        Capture(start=2, end=2, scope=1, pattern=0),
        Capture(start=1, end=40, scope=2, pattern=1),
    ]

    events = list(nest_captures(captures, 4))

    assert events == [Source(0, 1), ScopeStart(2), Source(1, 4), ScopeEnd()]
