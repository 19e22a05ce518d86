"""Domain entities exposed by the application."""

from .notification import (
    DeliveryState,
    DeliveryStatus,
    Notification,
    NotificationChannel,
    NotificationPriority,
    NotificationType,
    RelatedEntity,
)
from .notification_preferences import DigestFrequency, NotificationPreferences
from .push_subscription import PushSubscription, PushSubscriptionKeys

__all__ = [
    "DeliveryState",
    "DeliveryStatus",
    "DigestFrequency",
    "Notification",
    "NotificationChannel",
    "NotificationPreferences",
    "NotificationPriority",
    "NotificationType",
    "PushSubscription",
    "PushSubscriptionKeys",
    "RelatedEntity",
]
