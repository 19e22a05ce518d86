"""Use cases for creating, querying and updating notifications."""

from .create_notification import apply_channel_preferences, create_notification
from .delete_notification import (
    delete_all_notifications,
    delete_notification,
    delete_notifications,
)
from .events import notify_announcement_published, notify_comment_added
from .get_notification import get_notification
from .get_unread_count import get_unread_count
from .get_user_notifications import get_user_notifications
from .group_notifications import group_notifications
from .mark_as_read import mark_all_as_read, mark_as_read
from .preferences import (
    get_notification_preferences,
    preferences_to_dict,
    update_notification_preferences,
)
from .push_subscriptions import (
    get_vapid_public_key,
    subscribe_to_push,
    unsubscribe_from_push,
)

__all__ = [
    "apply_channel_preferences",
    "create_notification",
    "delete_all_notifications",
    "delete_notification",
    "delete_notifications",
    "get_notification",
    "get_notification_preferences",
    "get_unread_count",
    "get_user_notifications",
    "get_vapid_public_key",
    "group_notifications",
    "mark_all_as_read",
    "mark_as_read",
    "notify_announcement_published",
    "notify_comment_added",
    "preferences_to_dict",
    "subscribe_to_push",
    "unsubscribe_from_push",
    "update_notification_preferences",
]
