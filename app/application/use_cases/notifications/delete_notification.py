"""Use cases for deleting notifications."""

from __future__ import annotations

from typing import Any, Iterable

from sqlalchemy.orm import Session

from app.domain.exceptions import NotFoundError
from app.infrastructure.cache import NotificationCache
from app.infrastructure.repositories import NotificationRepository

from .cache_guard import best_effort
from .validators import ensure_member_id, ensure_notification_ids


def delete_notification(
    session: Session, cache: NotificationCache | None, user_id: str, notification_id: str
) -> None:
    """Delete one of ``user_id``'s notifications."""

    delete_notifications(session, cache, user_id, [notification_id])


def delete_notifications(
    session: Session,
    cache: NotificationCache | None,
    user_id: str,
    notification_ids: Iterable[Any],
) -> int:
    """Delete several notifications owned by ``user_id``.

    Nothing is deleted when one of the ids is unknown or belongs to someone
    else.
    """

    user_id = ensure_member_id(user_id, "member")
    ids = ensure_notification_ids(notification_ids)
    repository = NotificationRepository(session)

    for notification_id in ids:
        notification = repository.get(notification_id)
        if notification is None or notification.recipient != user_id:
            raise NotFoundError("Notification not found")

    deleted = 0
    for notification_id in ids:
        if repository.delete_for_recipient(notification_id, recipient=user_id):
            deleted += 1

    _invalidate(cache, user_id)
    return deleted


def delete_all_notifications(
    session: Session, cache: NotificationCache | None, user_id: str
) -> int:
    """Delete every notification of ``user_id``."""

    user_id = ensure_member_id(user_id, "member")
    deleted = NotificationRepository(session).delete_all_for_recipient(recipient=user_id)
    _invalidate(cache, user_id)
    return deleted


def _invalidate(cache: NotificationCache | None, user_id: str) -> None:
    if cache is None:
        return
    with best_effort("invalidating cached notifications"):
        cache.clear_user_notifications(user_id)


__all__ = ["delete_all_notifications", "delete_notification", "delete_notifications"]
