"""Use case returning a page of a member's notifications."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from app.domain.entities import Notification
from app.infrastructure.cache import NotificationCache
from app.infrastructure.repositories import NotificationRepository
from app.utils import ensure_app_timezone, now_in_app_timezone

from .cache_guard import best_effort
from .validators import ensure_member_id, ensure_pagination, ensure_priority, ensure_type


def get_user_notifications(
    session: Session,
    cache: NotificationCache | None,
    user_id: str,
    *,
    page: int = 1,
    limit: int = 20,
    type: Any = None,
    priority: Any = None,
    is_read: bool | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
) -> list[Notification]:
    """Return ``user_id``'s notifications, newest first.

    Unfiltered requests are served from the cached index when it has entries
    for the page; ids whose cached copy is gone are skipped. Filtered
    requests, empty cache pages and cache errors go to the database.
    """

    user_id = ensure_member_id(user_id, "member")
    page, limit = ensure_pagination(page, limit)
    type = ensure_type(type) if type is not None else None
    priority = ensure_priority(priority) if priority is not None else None

    has_filters = any(
        value is not None for value in (type, priority, is_read, start_date, end_date)
    )
    if cache is not None and not has_filters:
        cached = _read_cached_page(cache, user_id, page, limit)
        if cached:
            return cached

    return list(
        NotificationRepository(session).list_for_recipient(
            user_id,
            page=page,
            limit=limit,
            type=type,
            priority=priority,
            is_read=is_read,
            start_date=start_date,
            end_date=end_date,
        )
    )


def _read_cached_page(
    cache: NotificationCache, user_id: str, page: int, limit: int
) -> list[Notification]:
    notifications: list[Notification] = []
    with best_effort("reading the notification index"):
        ids = cache.get_user_notification_ids(user_id, page, limit)
        now = now_in_app_timezone()
        for notification_id in ids:
            notification = cache.get_notification(notification_id)
            if notification is None or notification.recipient != user_id:
                continue
            expires_at = ensure_app_timezone(notification.expires_at)
            if expires_at is not None and expires_at <= now:
                continue
            notifications.append(notification)
        return notifications
    # A partial page is discarded so the database answers instead.
    return []


__all__ = ["get_user_notifications"]
