"""Use cases for reading and updating member notification preferences."""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from app.domain.entities import DigestFrequency, NotificationPreferences
from app.domain.exceptions import ValidationError
from app.infrastructure.cache import NotificationCache
from app.infrastructure.repositories import NotificationPreferenceRepository

from .cache_guard import best_effort
from .validators import coerce_enum, ensure_member_id


def preferences_to_dict(preferences: NotificationPreferences) -> dict[str, Any]:
    return {
        "email": preferences.email,
        "push": preferences.push,
        "digest": preferences.digest.value,
    }


def _from_dict(user_id: str, data: dict[str, Any]) -> NotificationPreferences:
    return NotificationPreferences(
        user_id=user_id,
        email=bool(data.get("email", True)),
        push=bool(data.get("push", True)),
        digest=coerce_enum(DigestFrequency, data.get("digest", DigestFrequency.DAILY.value), "digest"),
    )


def get_notification_preferences(
    session: Session, cache: NotificationCache | None, user_id: str
) -> NotificationPreferences:
    """Return the stored preferences of ``user_id`` or the defaults."""

    user_id = ensure_member_id(user_id, "member")
    if cache is not None:
        cached = None
        with best_effort("reading preferences"):
            cached = cache.get_preferences(user_id)
        if cached is not None:
            return _from_dict(user_id, cached)

    preferences = NotificationPreferenceRepository(session).get(user_id)
    if preferences is None:
        preferences = NotificationPreferences(user_id=user_id)
    if cache is not None:
        with best_effort("caching preferences"):
            cache.set_preferences(user_id, preferences_to_dict(preferences))
    return preferences


def update_notification_preferences(
    session: Session,
    cache: NotificationCache | None,
    user_id: str,
    *,
    email: Any = None,
    push: Any = None,
    digest: Any = None,
) -> NotificationPreferences:
    """Apply the provided fields; omitted fields keep their current value."""

    user_id = ensure_member_id(user_id, "member")
    repository = NotificationPreferenceRepository(session)
    preferences = repository.get(user_id) or NotificationPreferences(user_id=user_id)

    if email is not None:
        if not isinstance(email, bool):
            raise ValidationError("email must be a boolean")
        preferences.email = email
    if push is not None:
        if not isinstance(push, bool):
            raise ValidationError("push must be a boolean")
        preferences.push = push
    if digest is not None:
        preferences.digest = coerce_enum(DigestFrequency, digest, "digest")

    saved = repository.upsert(preferences)
    if cache is not None:
        with best_effort("caching preferences"):
            cache.set_preferences(user_id, preferences_to_dict(saved))
    return saved


__all__ = [
    "get_notification_preferences",
    "preferences_to_dict",
    "update_notification_preferences",
]
