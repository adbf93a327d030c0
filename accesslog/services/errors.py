"""Error types raised by the analytics services and record stores."""

from __future__ import annotations


class AccessLogError(RuntimeError):
    """Base class for access log analytics failures."""


class InputValidationError(AccessLogError):
    """Raised when caller-supplied input is missing or malformed."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class NotFoundError(AccessLogError):
    """Raised when a lookup matches zero records."""


class StoreFailure(AccessLogError):
    """Raised when the underlying record store call fails."""


__all__ = [
    "AccessLogError",
    "InputValidationError",
    "NotFoundError",
    "StoreFailure",
]
