"""Core error types with rich context.

A small set of error types, each carrying an error code, a context dict
and an actionable fix hint.
"""

from __future__ import annotations

from typing import Any


class TSAlignError(Exception):
    """Base exception with rich context.

    Attributes:
        error_code: Unique error code string for programmatic handling
        message: Human-readable error message
        context: Additional context data for debugging
        fix_hint: Actionable hint for resolving the error
    """

    error_code: str = "E_UNKNOWN"
    fix_hint: str = ""

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        fix_hint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}
        if fix_hint is not None:
            self.fix_hint = fix_hint

    def __str__(self) -> str:
        parts = [f"[{self.error_code}] {self.message}"]
        if self.context:
            parts.append(f"(context: {self.context})")
        if self.fix_hint:
            parts.append(f"[hint: {self.fix_hint}]")
        return " ".join(parts)

    def to_agent_dict(self) -> dict[str, Any]:
        """Return a structured dict suitable for callers that log or display errors."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "fix_hint": self.fix_hint,
            "context": self.context,
        }


class EInvalidInput(TSAlignError):
    """Alignment request is structurally invalid."""

    error_code = "E_INVALID_INPUT"
    fix_hint = "Pass at least one series or a reference series, with unique keys"


class ESourceUnavailable(TSAlignError):
    """A series could not be acquired from its source."""

    error_code = "E_SOURCE_UNAVAILABLE"
    fix_hint = "The series is skipped for this round; check network access and the series id"


class ESourceParse(TSAlignError):
    """A source returned a payload that could not be parsed."""

    error_code = "E_SOURCE_PARSE"
    fix_hint = "Check that the URL or slug points at an existing event"


class ENoData(TSAlignError):
    """Merged table is empty after filtering."""

    error_code = "E_NO_DATA"
    fix_hint = "Widen the time range or the tolerance window, or select other series"


ERROR_REGISTRY: dict[str, type[TSAlignError]] = {
    "E_INVALID_INPUT": EInvalidInput,
    "E_SOURCE_UNAVAILABLE": ESourceUnavailable,
    "E_SOURCE_PARSE": ESourceParse,
    "E_NO_DATA": ENoData,
}


def get_error_class(error_code: str) -> type[TSAlignError]:
    """Get error class by code."""
    return ERROR_REGISTRY.get(error_code, TSAlignError)
