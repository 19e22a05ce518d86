"""Use cases for marking notifications as read."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from sqlalchemy.orm import Session

from app.infrastructure.cache import NotificationCache
from app.infrastructure.repositories import NotificationRepository
from app.utils import now_in_app_timezone

from .cache_guard import best_effort
from .validators import ensure_member_id, ensure_notification_ids

logger = logging.getLogger(__name__)


def mark_as_read(
    session: Session,
    cache: NotificationCache | None,
    user_id: str,
    notification_ids: Iterable[Any],
) -> int:
    """Mark ``user_id``'s notifications as read and return how many changed.

    Ids that belong to other members or are already read are ignored.
    """

    user_id = ensure_member_id(user_id, "member")
    ids = ensure_notification_ids(notification_ids)

    transitioned = NotificationRepository(session).mark_as_read(ids, recipient=user_id)
    logger.debug("Marked %s of %s notifications as read for %s", transitioned, len(ids), user_id)

    if cache is not None:
        with best_effort("marking cached notifications as read"):
            cache.mark_as_read(
                user_id, ids, read_at=now_in_app_timezone(), transitioned=transitioned
            )
    return transitioned


def mark_all_as_read(session: Session, cache: NotificationCache | None, user_id: str) -> int:
    """Mark every unread notification of ``user_id`` as read."""

    user_id = ensure_member_id(user_id, "member")
    updated = NotificationRepository(session).mark_all_as_read(recipient=user_id)

    if cache is not None:
        with best_effort("invalidating cached notifications"):
            cache.clear_user_notifications(user_id)
    return updated


__all__ = ["mark_all_as_read", "mark_as_read"]
