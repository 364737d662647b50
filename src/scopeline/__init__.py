"""Turn nested syntax-scope events into flat, per-line styled spans."""

from scopeline.highlighter import LineHighlighter, ScopeTracking
from scopeline.parsing import ParseFailure, Parser
from scopeline.scopes import (
    STANDARD_SCOPE_NAMES,
    ConfigurationError,
    ScopeConfiguration,
    ScopeEnd,
    ScopeStart,
    Source,
    StyledSpan,
)

__all__ = [
    "STANDARD_SCOPE_NAMES",
    "ConfigurationError",
    "LineHighlighter",
    "ParseFailure",
    "Parser",
    "ScopeConfiguration",
    "ScopeEnd",
    "ScopeStart",
    "ScopeTracking",
    "Source",
    "StyledSpan",
]

__version__ = "0.1.0"
