"""Errors raised by the notification services.

The HTTP layer maps each class to a status code; see
``app.interfaces.api.errors``.
"""

from __future__ import annotations


class NotificationError(Exception):
    """Base class for expected, client-facing failures."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(NotificationError, ValueError):
    """Input does not satisfy the notification schema."""


class UnauthorizedError(NotificationError):
    """The caller has no valid session."""


class NotFoundError(NotificationError, LookupError):
    """The requested notification, member or subscription does not exist."""


class PushConfigurationError(RuntimeError):
    """VAPID credentials are missing so Web Push cannot be used."""


__all__ = [
    "NotFoundError",
    "NotificationError",
    "PushConfigurationError",
    "UnauthorizedError",
    "ValidationError",
]
