"""Scope configuration and the event/span value types."""

from .configuration import (
    STANDARD_SCOPE_NAMES,
    CompiledRules,
    ConfigurationError,
    RuleSource,
    ScopeConfiguration,
    match_capture,
)
from .models import (
    EVENT_TYPES,
    HighlightEvent,
    ScopeEnd,
    ScopeId,
    ScopeStart,
    Source,
    StyledSpan,
)

__all__ = [
    "STANDARD_SCOPE_NAMES",
    "CompiledRules",
    "ConfigurationError",
    "RuleSource",
    "ScopeConfiguration",
    "match_capture",
    "EVENT_TYPES",
    "HighlightEvent",
    "ScopeEnd",
    "ScopeId",
    "ScopeStart",
    "Source",
    "StyledSpan",
]
