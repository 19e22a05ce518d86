"""Helpers used by other services to emit domain notifications."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from fastapi import BackgroundTasks
from sqlalchemy.orm import Session

from app.domain.entities import (
    Notification,
    NotificationChannel,
    NotificationPriority,
    NotificationType,
    RelatedEntity,
)
from app.infrastructure.cache import NotificationCache
from app.infrastructure.notifications import DispatchScheduler

from .create_notification import create_notification
from .validators import TITLE_MAX_LENGTH

EXCERPT_LENGTH = 200


def _excerpt(text: str, length: int = EXCERPT_LENGTH) -> str:
    if len(text) <= length:
        return text
    return f"{text[:length]}..."


def _title(prefix: str, subject: str) -> str:
    return f"{prefix}{subject}"[:TITLE_MAX_LENGTH]


def notify_announcement_published(
    session: Session,
    cache: NotificationCache | None,
    *,
    announcement_id: str,
    title: str,
    content: str,
    recipients: Iterable[str],
    priority: Any = NotificationPriority.MEDIUM,
    author_id: str | None = None,
    scheduler: DispatchScheduler | None = None,
    background_tasks: BackgroundTasks | None = None,
) -> list[Notification]:
    """Notify each target member that an announcement was published."""

    created: list[Notification] = []
    for recipient in dict.fromkeys(recipient for recipient in recipients if recipient):
        created.append(
            create_notification(
                session,
                cache,
                type=NotificationType.ANNOUNCEMENT,
                priority=priority,
                recipient=recipient,
                sender=author_id,
                title=_title("New Announcement: ", title),
                content=_excerpt(content),
                channels=[NotificationChannel.IN_APP, NotificationChannel.EMAIL],
                action_url=f"/announcements/{announcement_id}",
                related_entities=[RelatedEntity(type="Announcement", id=str(announcement_id))],
                scheduler=scheduler,
                background_tasks=background_tasks,
            )
        )
    return created


def notify_comment_added(
    session: Session,
    cache: NotificationCache | None,
    *,
    announcement_id: str,
    announcement_title: str,
    announcement_author_id: str,
    comment_id: str,
    comment_content: str,
    commenter_id: str | None = None,
    mentioned_member_ids: Iterable[str] = (),
    scheduler: DispatchScheduler | None = None,
    background_tasks: BackgroundTasks | None = None,
) -> list[Notification]:
    """Tell the announcement author, and any mentioned member, about a new comment."""

    recipients = dict.fromkeys([announcement_author_id, *mentioned_member_ids])
    created: list[Notification] = []
    for recipient in recipients:
        if not recipient:
            continue
        created.append(
            create_notification(
                session,
                cache,
                type=NotificationType.COMMENT,
                priority=NotificationPriority.MEDIUM,
                recipient=recipient,
                sender=commenter_id,
                title=_title("New comment on announcement: ", announcement_title),
                content=_excerpt(comment_content),
                channels=[NotificationChannel.IN_APP],
                action_url=f"/announcements/{announcement_id}#comment-{comment_id}",
                related_entities=[RelatedEntity(type="Announcement", id=str(announcement_id))],
                scheduler=scheduler,
                background_tasks=background_tasks,
            )
        )
    return created


__all__ = ["notify_announcement_published", "notify_comment_added"]
