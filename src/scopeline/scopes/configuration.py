"""Compiled, immutable scope configuration shared between highlighters."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Protocol, Sequence

from scopeline.runtime.telemetry import span

from .models import ScopeId

# Canonical names from the tree-sitter-highlight README. The position of a
# name is its scope id, so this order must never change.
STANDARD_SCOPE_NAMES: tuple[str, ...] = (
    "attribute",
    "comment",
    "constant",
    "constant.builtin",
    "constructor",
    "embedded",
    "function",
    "function.builtin",
    "keyword",
    "module",
    "number",
    "operator",
    "property",
    "property.builtin",
    "punctuation",
    "punctuation.bracket",
    "punctuation.delimiter",
    "punctuation.special",
    "string",
    "string.special",
    "tag",
    "type",
    "type.builtin",
    "variable",
    "variable.builtin",
    "variable.parameter",
)


class CompiledRules(Protocol):
    """Parser-ready rule set produced by ``RuleSource.compile``."""

    @property
    def capture_names(self) -> Sequence[str]:
        """Every capture name the rules can attach to a byte range."""
        ...


class RuleSource(Protocol):
    """Uncompiled scope-recognition rules handed to ``ScopeConfiguration.build``."""

    def compile(self) -> CompiledRules:
        """Compile the rules, raising if the parser rejects them."""
        ...


class ConfigurationError(ValueError):
    """Raised when scope names or grammar rules cannot form a configuration."""

    def __init__(self, message: str, *, scope_names: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.scope_names = tuple(scope_names)


def _validate_names(names: Iterable[object]) -> tuple[str, ...]:
    normalized: list[str] = []
    seen: set[str] = set()
    for name in names:
        if not isinstance(name, str):
            raise ConfigurationError(
                f"Scope names must be strings, got {type(name).__name__}",
                scope_names=normalized,
            )
        if not name.strip():
            raise ConfigurationError(
                "Scope names cannot be empty", scope_names=normalized
            )
        if name in seen:
            raise ConfigurationError(
                f"Scope name '{name}' is listed twice", scope_names=normalized
            )
        seen.add(name)
        normalized.append(name)
    return tuple(normalized)


def match_capture(capture: str, scope_names: Sequence[str]) -> Optional[ScopeId]:
    """Return the id of the recognized name that best matches ``capture``.

    A recognized name matches when each of its dot-separated parts occurs
    among the capture's parts; the match with the most parts wins and ties
    go to the earliest name.
    """

    capture_parts = capture.split(".")
    best: Optional[ScopeId] = None
    best_length = 0
    for index, name in enumerate(scope_names):
        parts = name.split(".")
        if all(part in capture_parts for part in parts) and len(parts) > best_length:
            best = index
            best_length = len(parts)
    return best


@dataclass(frozen=True, slots=True, eq=False)
class ScopeConfiguration:
    """Compiled rules plus the ordered names whose positions are scope ids.

    Instances never change after ``build`` and may be shared freely across
    highlighters and threads. Equality is identity: two configurations built
    from identical rules are still different configurations.
    """

    rules: CompiledRules
    scope_names: tuple[str, ...]
    bindings: Mapping[str, ScopeId]

    @classmethod
    def build(
        cls,
        raw_config: RuleSource,
        recognized_names: Iterable[str],
        *,
        logger_name: str | None = None,
    ) -> "ScopeConfiguration":
        names = _validate_names(recognized_names)
        with span(
            "scopes::build_configuration",
            logger_name=logger_name,
            component="scopes",
            metadata={"scope_count": len(names)},
        ) as handle:
            try:
                rules = raw_config.compile()
            except ConfigurationError:
                raise
            except Exception as exc:
                handle.add_metadata("rejected", type(exc).__name__)
                raise ConfigurationError(
                    f"Rules rejected by the parser: {exc}", scope_names=names
                ) from exc

            bindings: dict[str, ScopeId] = {}
            for capture in rules.capture_names:
                scope = match_capture(capture, names)
                if scope is not None:
                    bindings[capture] = scope
            handle.add_metadata("bound_captures", len(bindings))
            return cls(
                rules=rules,
                scope_names=names,
                bindings=MappingProxyType(bindings),
            )

    @classmethod
    def standard(
        cls, raw_config: RuleSource, *, logger_name: str | None = None
    ) -> "ScopeConfiguration":
        return cls.build(raw_config, STANDARD_SCOPE_NAMES, logger_name=logger_name)

    def __len__(self) -> int:
        return len(self.scope_names)

    def scope_id(self, name: str) -> ScopeId:
        try:
            return self.scope_names.index(name)
        except ValueError as exc:
            raise KeyError(f"Scope '{name}' is not recognized") from exc

    def scope_name(self, scope: ScopeId) -> str:
        if not 0 <= scope < len(self.scope_names):
            raise KeyError(f"Scope id {scope} is out of range")
        return self.scope_names[scope]

    def scope_for_capture(self, capture: str) -> Optional[ScopeId]:
        return self.bindings.get(capture)

    def __repr__(self) -> str:
        return (
            f"ScopeConfiguration(scopes={len(self.scope_names)}, "
            f"bindings={len(self.bindings)}, id=0x{id(self):x})"
        )


__all__ = [
    "STANDARD_SCOPE_NAMES",
    "CompiledRules",
    "ConfigurationError",
    "RuleSource",
    "ScopeConfiguration",
    "match_capture",
]
