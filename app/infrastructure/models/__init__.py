"""ORM models used by the application infrastructure."""

from .notification import NotificationDeliveryModel, NotificationModel
from .notification_preference import NotificationPreferenceModel

__all__ = [
    "NotificationDeliveryModel",
    "NotificationModel",
    "NotificationPreferenceModel",
]
