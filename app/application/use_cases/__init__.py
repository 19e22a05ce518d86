"""Aggregate application use cases."""

from .notifications import create_notification, get_user_notifications, mark_as_read

__all__ = [
    "create_notification",
    "get_user_notifications",
    "mark_as_read",
]
