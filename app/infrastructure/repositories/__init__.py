"""Repository implementations for infrastructure layer."""

from .notification_preference_repository import NotificationPreferenceRepository
from .notification_repository import NotificationRepository

__all__ = [
    "NotificationPreferenceRepository",
    "NotificationRepository",
]
