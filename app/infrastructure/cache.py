"""Redis backed fast-path cache for notifications.

The cache mirrors recently created notifications, keeps a per-member index
ordered by creation time and an approximate unread counter. It is an
accelerator only: callers fall back to the database whenever a key is
missing or Redis is unavailable.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable

import redis

from app.domain.entities import Notification, PushSubscription
from app.infrastructure.notifications.payloads import (
    deserialize_notification,
    serialize_notification,
)
from app.utils import to_epoch_millis

logger = logging.getLogger(__name__)

NOTIFICATION_KEY = "notification:"
NOTIFICATION_COUNT_KEY = "notification:count:"
USER_NOTIFICATIONS_KEY = "user:notifications:"
USER_PREFERENCES_KEY = "user:preferences:"
PUSH_SUBSCRIPTIONS_KEY = "push:subscriptions:"

DEFAULT_TTL_SECONDS = 86_400


def create_redis_client(url: str) -> redis.Redis:
    """Return a Redis client that hands back ``str`` values."""

    return redis.Redis.from_url(url, decode_responses=True)


class NotificationCache:
    """Key layout and operations of the notification cache."""

    def __init__(self, client: redis.Redis, *, ttl_seconds: int = DEFAULT_TTL_SECONDS) -> None:
        self._client = client
        self._ttl = ttl_seconds

    # Notifications -----------------------------------------------------

    def cache_notification(self, notification: Notification) -> None:
        """Store ``notification`` and register it in the recipient's index."""

        if notification.id is None:
            raise ValueError("Only persisted notifications can be cached")

        recipient = notification.recipient
        index_key = f"{USER_NOTIFICATIONS_KEY}{recipient}"
        count_key = f"{NOTIFICATION_COUNT_KEY}{recipient}"
        score = to_epoch_millis(notification.created_at) if notification.created_at else 0
        # A missing counter is recomputed from the database on the next read,
        # incrementing it here would start it from zero.
        counter_exists = bool(self._client.exists(count_key))

        pipe = self._client.pipeline()
        pipe.setex(
            self._notification_key(notification.id),
            self._ttl,
            json.dumps(serialize_notification(notification)),
        )
        pipe.zadd(index_key, {notification.id: score})
        pipe.expire(index_key, self._ttl)
        if not notification.is_read and counter_exists:
            pipe.incr(count_key)
        pipe.execute()

    def get_notification(self, notification_id: str) -> Notification | None:
        raw = self._client.get(self._notification_key(notification_id))
        if not raw:
            return None
        return deserialize_notification(json.loads(raw))

    def get_user_notification_ids(self, user_id: str, page: int = 1, limit: int = 20) -> list[str]:
        """Return one page of notification ids, newest first."""

        start = (max(page, 1) - 1) * limit
        end = start + limit - 1
        return list(self._client.zrevrange(f"{USER_NOTIFICATIONS_KEY}{user_id}", start, end))

    # Unread counter ----------------------------------------------------

    def get_unread_count(self, user_id: str) -> int | None:
        raw = self._client.get(f"{NOTIFICATION_COUNT_KEY}{user_id}")
        if raw is None:
            return None
        return int(raw)

    def set_unread_count(self, user_id: str, count: int) -> None:
        self._client.set(f"{NOTIFICATION_COUNT_KEY}{user_id}", max(count, 0), ex=self._ttl)

    def mark_as_read(
        self,
        user_id: str,
        notification_ids: Iterable[str],
        *,
        read_at: Any,
        transitioned: int,
    ) -> None:
        """Flag cached copies as read and decrement the unread counter.

        ``transitioned`` is the number of records the database actually moved
        from unread to read, so repeated calls do not drive the counter down.
        """

        pipe = self._client.pipeline()
        for notification_id in notification_ids:
            key = self._notification_key(notification_id)
            raw = self._client.get(key)
            if not raw:
                continue
            data = json.loads(raw)
            if data.get("recipient") != user_id or data.get("is_read"):
                continue
            data["is_read"] = True
            data["read_at"] = read_at.isoformat() if read_at else None
            pipe.set(key, json.dumps(data), keepttl=True)
        pipe.execute()

        if transitioned <= 0:
            return
        count_key = f"{NOTIFICATION_COUNT_KEY}{user_id}"
        if not self._client.exists(count_key):
            return
        remaining = self._client.decrby(count_key, transitioned)
        if remaining < 0:
            logger.warning(
                "Unread counter for %s drifted below zero (%s); dropping it", user_id, remaining
            )
            self._client.delete(count_key)

    def clear_user_notifications(self, user_id: str) -> None:
        """Drop every cached copy, the index and the counter of ``user_id``."""

        index_key = f"{USER_NOTIFICATIONS_KEY}{user_id}"
        notification_ids = self._client.zrange(index_key, 0, -1)

        pipe = self._client.pipeline()
        for notification_id in notification_ids:
            pipe.delete(self._notification_key(notification_id))
        pipe.delete(index_key)
        pipe.delete(f"{NOTIFICATION_COUNT_KEY}{user_id}")
        pipe.execute()

    # Preferences -------------------------------------------------------

    def get_preferences(self, user_id: str) -> dict[str, Any] | None:
        raw = self._client.get(f"{USER_PREFERENCES_KEY}{user_id}")
        return json.loads(raw) if raw else None

    def set_preferences(self, user_id: str, preferences: dict[str, Any]) -> None:
        self._client.set(
            f"{USER_PREFERENCES_KEY}{user_id}", json.dumps(preferences), ex=self._ttl
        )

    # Push subscriptions ------------------------------------------------

    def get_push_subscriptions(self, user_id: str) -> list[PushSubscription]:
        raw = self._client.get(f"{PUSH_SUBSCRIPTIONS_KEY}{user_id}")
        if not raw:
            return []
        return [PushSubscription.from_dict(item) for item in json.loads(raw)]

    def set_push_subscriptions(self, user_id: str, subscriptions: list[PushSubscription]) -> None:
        key = f"{PUSH_SUBSCRIPTIONS_KEY}{user_id}"
        if not subscriptions:
            self._client.delete(key)
            return
        self._client.set(key, json.dumps([subscription.to_dict() for subscription in subscriptions]))

    @staticmethod
    def _notification_key(notification_id: str) -> str:
        return f"{NOTIFICATION_KEY}{notification_id}"


__all__ = [
    "DEFAULT_TTL_SECONDS",
    "NotificationCache",
    "create_redis_client",
]
