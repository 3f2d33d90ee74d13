"""Error types raised by the KeyEnv client.

Every failure derives from :class:`KeyEnvError`, so callers can either branch on
the concrete subclass (``except NotFoundError``) or inspect ``status``,
``code`` and ``details`` generically.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

__all__ = [
    "KeyEnvError",
    "AuthenticationError",
    "NotFoundError",
    "ValidationError",
    "RateLimitError",
    "KeyEnvConnectionError",
    "KeyEnvTimeoutError",
    "error_for_status",
]


class KeyEnvError(Exception):
    """Base error for KeyEnv API and transport failures."""

    def __init__(
        self,
        message: str,
        status: int = 0,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        if self.status > 0:
            return f"KeyEnvError({self.status}): {self.message}"
        return f"KeyEnvError: {self.message}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, status={self.status}, code={self.code!r})"


class AuthenticationError(KeyEnvError):
    """Raised when the token is missing, invalid or revoked (401)."""


class NotFoundError(KeyEnvError):
    """Raised when a project, environment or secret does not exist (404)."""


class ValidationError(KeyEnvError):
    """Raised when the API rejects the request payload (422)."""


class RateLimitError(KeyEnvError):
    """Raised when the API rate limit has been exceeded (429)."""


class KeyEnvConnectionError(KeyEnvError):
    """Raised when the API host cannot be resolved or reached."""


class KeyEnvTimeoutError(KeyEnvError):
    """Raised when no response arrives within the configured timeout."""


_STATUS_ERRORS = {
    401: AuthenticationError,
    404: NotFoundError,
    422: ValidationError,
    429: RateLimitError,
}


def error_for_status(status: int) -> type:
    """Return the error class for a non-2xx HTTP status."""
    return _STATUS_ERRORS.get(status, KeyEnvError)
