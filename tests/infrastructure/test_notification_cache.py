"""Tests for the Redis backed notification cache."""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone

from app.domain.entities import (
    Notification,
    NotificationChannel,
    NotificationType,
    PushSubscription,
    PushSubscriptionKeys,
)
from app.infrastructure.cache import NotificationCache


def _notification(notification_id: str, recipient: str = "member-1", minutes: int = 0) -> Notification:
    return Notification(
        id=notification_id,
        type=NotificationType.TASK,
        recipient=recipient,
        title=f"Task {notification_id}",
        content="Review the pull request",
        channels=[NotificationChannel.IN_APP],
        created_at=datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc) + timedelta(minutes=minutes),
    )


def test_cached_notification_round_trips(cache: NotificationCache, fake_redis) -> None:
    notification = _notification("n1")
    notification.metadata = {"source": "github"}

    cache.cache_notification(notification)

    cached = cache.get_notification("n1")
    assert cached is not None
    assert cached.title == "Task n1"
    assert cached.channels == [NotificationChannel.IN_APP]
    assert cached.metadata == {"source": "github"}
    assert cached.created_at == notification.created_at
    assert fake_redis.ttls["notification:n1"] == 3600


def test_index_is_newest_first_and_paginated(cache: NotificationCache) -> None:
    for index in range(5):
        cache.cache_notification(_notification(f"n{index}", minutes=index))

    assert cache.get_user_notification_ids("member-1", page=1, limit=2) == ["n4", "n3"]
    assert cache.get_user_notification_ids("member-1", page=3, limit=2) == ["n0"]
    assert cache.get_user_notification_ids("member-2") == []


def test_counter_is_only_incremented_once_initialised(cache: NotificationCache) -> None:
    cache.cache_notification(_notification("n1"))
    assert cache.get_unread_count("member-1") is None

    cache.set_unread_count("member-1", 1)
    cache.cache_notification(_notification("n2"))

    assert cache.get_unread_count("member-1") == 2


def test_mark_as_read_keeps_ttl_and_decrements_by_transitioned(
    cache: NotificationCache, fake_redis
) -> None:
    cache.cache_notification(_notification("n1"))
    cache.cache_notification(_notification("n2"))
    cache.set_unread_count("member-1", 2)
    read_at = datetime(2025, 3, 2, tzinfo=timezone.utc)

    cache.mark_as_read("member-1", ["n1"], read_at=read_at, transitioned=1)

    stored = json.loads(fake_redis.get("notification:n1"))
    assert stored["is_read"] is True
    assert stored["read_at"] == read_at.isoformat()
    assert fake_redis.ttls["notification:n1"] == 3600
    assert cache.get_unread_count("member-1") == 1

    cache.mark_as_read("member-1", ["n1"], read_at=read_at, transitioned=0)
    assert cache.get_unread_count("member-1") == 1


def test_mark_as_read_ignores_other_members_copies(cache: NotificationCache) -> None:
    cache.cache_notification(_notification("foreign", recipient="member-2"))

    cache.mark_as_read(
        "member-1", ["foreign"], read_at=datetime.now(timezone.utc), transitioned=0
    )

    assert cache.get_notification("foreign").is_read is False


def test_negative_counter_is_dropped(cache: NotificationCache) -> None:
    cache.set_unread_count("member-1", 1)

    cache.mark_as_read("member-1", [], read_at=None, transitioned=3)

    assert cache.get_unread_count("member-1") is None


def test_clear_user_notifications_removes_copies_index_and_counter(
    cache: NotificationCache,
) -> None:
    cache.cache_notification(_notification("n1"))
    cache.cache_notification(_notification("other", recipient="member-2"))
    cache.set_unread_count("member-1", 1)

    cache.clear_user_notifications("member-1")

    assert cache.get_notification("n1") is None
    assert cache.get_user_notification_ids("member-1") == []
    assert cache.get_unread_count("member-1") is None
    assert cache.get_notification("other") is not None


def test_push_subscriptions_are_stored_without_ttl(cache: NotificationCache, fake_redis) -> None:
    subscription = PushSubscription(
        endpoint="https://push.example.com/a",
        keys=PushSubscriptionKeys(p256dh="p256", auth="secret"),
    )

    cache.set_push_subscriptions("member-1", [subscription])

    assert cache.get_push_subscriptions("member-1") == [subscription]
    assert "push:subscriptions:member-1" not in fake_redis.ttls

    cache.set_push_subscriptions("member-1", [])
    assert cache.get_push_subscriptions("member-1") == []
