"""Use case returning the unread notification counter of a member."""

from __future__ import annotations

from sqlalchemy.orm import Session

from app.infrastructure.cache import NotificationCache
from app.infrastructure.repositories import NotificationRepository

from .cache_guard import best_effort
from .validators import ensure_member_id


def get_unread_count(session: Session, cache: NotificationCache | None, user_id: str) -> int:
    """Return the cached counter, recounting from the database when it is missing."""

    user_id = ensure_member_id(user_id, "member")
    if cache is not None:
        cached = None
        with best_effort("reading the unread counter"):
            cached = cache.get_unread_count(user_id)
        if cached is not None and cached >= 0:
            return cached

    count = NotificationRepository(session).count_unread(user_id)
    if cache is not None:
        with best_effort("storing the unread counter"):
            cache.set_unread_count(user_id, count)
    return count


__all__ = ["get_unread_count"]
