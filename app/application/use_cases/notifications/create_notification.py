"""Use case for creating notifications and handing them to delivery."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Iterable

from fastapi import BackgroundTasks
from sqlalchemy.orm import Session

from app.domain.entities import (
    Notification,
    NotificationChannel,
    NotificationPreferences,
    NotificationPriority,
)
from app.domain.exceptions import ValidationError
from app.infrastructure.cache import NotificationCache
from app.infrastructure.notifications import DispatchScheduler
from app.infrastructure.repositories import NotificationRepository
from app.utils import ensure_app_timezone, now_in_app_timezone

from .cache_guard import best_effort
from .preferences import get_notification_preferences
from .validators import (
    ensure_channels,
    ensure_content,
    ensure_member_id,
    ensure_priority,
    ensure_related_entities,
    ensure_title,
    ensure_type,
)

logger = logging.getLogger(__name__)


def apply_channel_preferences(
    channels: list[NotificationChannel], preferences: NotificationPreferences
) -> list[NotificationChannel]:
    """Drop the opt-in channels the recipient disabled.

    When nothing is left the notification still reaches the in-app inbox.
    """

    allowed = [
        channel
        for channel in channels
        if not (channel is NotificationChannel.EMAIL and not preferences.email)
        and not (channel is NotificationChannel.PUSH and not preferences.push)
    ]
    return allowed or [NotificationChannel.IN_APP]


def create_notification(
    session: Session,
    cache: NotificationCache | None,
    *,
    type: Any,
    recipient: str,
    title: str,
    content: str,
    channels: Iterable[Any],
    priority: Any = NotificationPriority.MEDIUM,
    sender: str | None = None,
    action_url: str | None = None,
    group_id: str | None = None,
    group_count: int = 1,
    related_entities: Iterable[Any] | None = None,
    expires_at: datetime | None = None,
    metadata: dict[str, Any] | None = None,
    scheduler: DispatchScheduler | None = None,
    background_tasks: BackgroundTasks | None = None,
) -> Notification:
    """Validate, persist and mirror a notification, then schedule its delivery.

    The caller only depends on the database write: cache and delivery
    failures are logged and never reported back.
    """

    recipient = ensure_member_id(recipient)
    requested_channels = ensure_channels(channels)
    if group_count < 1:
        raise ValidationError("Group count must be at least 1")
    expires_at = ensure_app_timezone(expires_at)
    if expires_at is not None and expires_at <= now_in_app_timezone():
        raise ValidationError("Expiration must be in the future")

    preferences = get_notification_preferences(session, cache, recipient)
    notification = Notification(
        id=None,
        type=ensure_type(type),
        recipient=recipient,
        title=ensure_title(title),
        content=ensure_content(content),
        channels=apply_channel_preferences(requested_channels, preferences),
        priority=ensure_priority(priority),
        sender=sender,
        action_url=action_url,
        group_id=group_id,
        group_count=group_count,
        related_entities=ensure_related_entities(related_entities),
        expires_at=expires_at,
        metadata=dict(metadata or {}),
        created_at=now_in_app_timezone(),
    )

    saved = NotificationRepository(session).create(notification)
    logger.info(
        "Created %s notification %s for %s over %s",
        saved.type.value,
        saved.id,
        saved.recipient,
        ", ".join(channel.value for channel in saved.channels),
    )

    if cache is not None:
        with best_effort("caching a new notification"):
            cache.cache_notification(saved)

    if scheduler is not None:
        scheduler.schedule(saved, background_tasks)
    return saved


__all__ = ["apply_channel_preferences", "create_notification"]
