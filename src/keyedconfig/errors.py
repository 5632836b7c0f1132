"""Error hierarchy for keyedconfig."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

__all__ = [
    "KeyedConfigError",
    "ConversionError",
    "PathSyntaxError",
    "ErrorCodes",
]


class KeyedConfigError(Exception):
    """Base error for all keyedconfig errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details: dict[str, Any] = details or {}
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc).isoformat()

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ConversionError(KeyedConfigError):
    """Raised when a value cannot be converted to or from a Config."""

    def __init__(
        self,
        message: str,
        *,
        target: str | None = None,
        actual: str | None = None,
        path: list[str | int] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            code="CONVERSION_ERROR",
            message=message,
            details={"target": target, "actual": actual, "path": list(path or [])},
            **kwargs,
        )

    @property
    def target(self) -> str | None:
        """Name of the type that was being produced."""
        return self.details["target"]

    @property
    def actual(self) -> str | None:
        """Kind of the value that was found, if known."""
        return self.details["actual"]

    @property
    def path(self) -> list[str | int]:
        """Path components leading to the failing value."""
        return self.details["path"]

    def prefix_path(self, *components: str | int) -> ConversionError:
        """Prepend path components as the error propagates outward."""
        self.details["path"][:0] = components
        return self

    def __str__(self) -> str:
        if self.path:
            return f"[{self.code}] {self.message} (at {self.path!r})"
        return super().__str__()


class PathSyntaxError(KeyedConfigError):
    """Raised when a dotted path string is malformed."""

    def __init__(self, dotted: str, reason: str, **kwargs: Any) -> None:
        super().__init__(
            code="PATH_SYNTAX_ERROR",
            message=f"Invalid path '{dotted}': {reason}",
            details={"dotted": dotted, "reason": reason},
            **kwargs,
        )

    @property
    def dotted(self) -> str:
        """The path string that failed to parse."""
        return self.details["dotted"]


class ErrorCodes:
    """All keyedconfig error codes as constants.

    Example:
        if error.code == ErrorCodes.CONVERSION_ERROR:
            handle_bad_shape()
    """

    CONVERSION_ERROR = "CONVERSION_ERROR"
    PATH_SYNTAX_ERROR = "PATH_SYNTAX_ERROR"

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("ErrorCodes is immutable")
