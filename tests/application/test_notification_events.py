"""Tests for the helpers other services call to emit notifications."""

from __future__ import annotations

from app.application.use_cases.notifications import (
    notify_announcement_published,
    notify_comment_added,
)
from app.domain.entities import (
    DeliveryState,
    NotificationChannel,
    NotificationType,
    RelatedEntity,
)
from app.infrastructure import database
from app.infrastructure.notifications import DeliveryDispatcher, DispatchScheduler
from app.infrastructure.notifications.dispatcher import deliver_in_app, stub_handler
from app.infrastructure.repositories import NotificationRepository


def test_announcement_reaches_each_member_once(session, cache) -> None:
    created = notify_announcement_published(
        session,
        cache,
        announcement_id="a-1",
        title="Final pitches",
        content="x" * 250,
        recipients=["member-1", "member-2", "member-1", ""],
        priority="HIGH",
        author_id="organizer",
    )

    assert [n.recipient for n in created] == ["member-1", "member-2"]
    first = created[0]
    assert first.type is NotificationType.ANNOUNCEMENT
    assert first.title == "New Announcement: Final pitches"
    assert first.content == "x" * 200 + "..."
    assert first.channels == [NotificationChannel.IN_APP, NotificationChannel.EMAIL]
    assert first.action_url == "/announcements/a-1"
    assert first.related_entities == [RelatedEntity(type="Announcement", id="a-1")]
    assert first.sender == "organizer"


def test_comment_notifies_the_author_in_app(session, cache) -> None:
    scheduler = DispatchScheduler(
        DeliveryDispatcher(
            database.SessionLocal,
            {
                NotificationChannel.IN_APP: deliver_in_app,
                NotificationChannel.EMAIL: stub_handler(NotificationChannel.EMAIL, DeliveryState.SENT),
            },
        )
    )

    created = notify_comment_added(
        session,
        cache,
        announcement_id="a-1",
        announcement_title="Final pitches",
        announcement_author_id="organizer",
        comment_id="c-9",
        comment_content="Can we get two extra minutes?",
        commenter_id="member-3",
        scheduler=scheduler,
    )

    assert len(created) == 1
    notification = created[0]
    assert notification.recipient == "organizer"
    assert notification.type is NotificationType.COMMENT
    assert notification.channels == [NotificationChannel.IN_APP]
    assert notification.action_url == "/announcements/a-1#comment-c-9"
    assert notification.title == "New comment on announcement: Final pitches"

    session.expire_all()
    stored = NotificationRepository(session).get(notification.id)
    assert stored.delivery_for(NotificationChannel.IN_APP).status is DeliveryState.SENT


def test_comment_also_notifies_mentioned_members(session, cache) -> None:
    created = notify_comment_added(
        session,
        cache,
        announcement_id="a-1",
        announcement_title="Final pitches",
        announcement_author_id="organizer",
        comment_id="c-10",
        comment_content="@member-5 please confirm",
        mentioned_member_ids=["member-5", "organizer"],
    )

    assert [n.recipient for n in created] == ["organizer", "member-5"]
