"""Tests for the durable notification store."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from app.domain.entities import (
    DeliveryState,
    Notification,
    NotificationChannel,
    NotificationPriority,
    NotificationType,
    RelatedEntity,
)
from app.infrastructure.repositories import NotificationRepository


def _create(repository: NotificationRepository, **overrides) -> Notification:
    values = {
        "id": None,
        "type": NotificationType.MENTION,
        "recipient": "member-1",
        "title": "You were mentioned",
        "content": "@member-1 can you take a look?",
        "channels": [NotificationChannel.IN_APP, NotificationChannel.EMAIL],
    }
    values.update(overrides)
    return repository.create(Notification(**values))


def test_create_adds_one_pending_entry_per_channel(session) -> None:
    repository = NotificationRepository(session)

    created = _create(
        repository,
        related_entities=[RelatedEntity(type="Project", id="p-1")],
        metadata={"thread": "42"},
    )

    assert created.id
    assert created.is_read is False
    assert [entry.channel for entry in created.delivery_status] == [
        NotificationChannel.IN_APP,
        NotificationChannel.EMAIL,
    ]
    assert all(entry.status is DeliveryState.PENDING for entry in created.delivery_status)
    assert created.related_entities == [RelatedEntity(type="Project", id="p-1")]
    assert created.metadata == {"thread": "42"}


def test_list_filters_and_orders_newest_first(session) -> None:
    repository = NotificationRepository(session)
    base = datetime(2025, 3, 1, tzinfo=timezone.utc)
    old = _create(repository, created_at=base)
    urgent = _create(
        repository,
        created_at=base + timedelta(hours=1),
        priority=NotificationPriority.URGENT,
        type=NotificationType.SYSTEM,
    )
    _create(repository, recipient="member-2", created_at=base + timedelta(hours=2))

    assert [n.id for n in repository.list_for_recipient("member-1")] == [urgent.id, old.id]
    assert [n.id for n in repository.list_for_recipient("member-1", limit=1, page=2)] == [old.id]
    assert [
        n.id for n in repository.list_for_recipient("member-1", priority=NotificationPriority.URGENT)
    ] == [urgent.id]
    assert [
        n.id for n in repository.list_for_recipient("member-1", type=NotificationType.MENTION)
    ] == [old.id]
    assert [
        n.id
        for n in repository.list_for_recipient("member-1", start_date=base + timedelta(minutes=30))
    ] == [urgent.id]


def test_expired_notifications_are_hidden_and_purged(session) -> None:
    repository = NotificationRepository(session)
    now = datetime.now(timezone.utc)
    expired = _create(repository, expires_at=now - timedelta(minutes=1))
    alive = _create(repository, expires_at=now + timedelta(days=1))

    assert [n.id for n in repository.list_for_recipient("member-1")] == [alive.id]
    assert repository.get_for_recipient(expired.id, "member-1") is None
    assert repository.count_unread("member-1") == 1

    assert repository.purge_expired(now) == 1
    assert repository.get(expired.id) is None
    assert repository.get(alive.id) is not None


def test_mark_as_read_returns_transitioned_count(session) -> None:
    repository = NotificationRepository(session)
    first = _create(repository)
    second = _create(repository)
    foreign = _create(repository, recipient="member-2")

    assert repository.mark_as_read([first.id, foreign.id], recipient="member-1") == 1
    assert repository.mark_as_read([first.id], recipient="member-1") == 0
    assert repository.mark_all_as_read(recipient="member-1") == 1

    session.expire_all()
    assert repository.get(second.id).is_read is True
    assert repository.get(first.id).read_at is not None
    assert repository.get(foreign.id).is_read is False


def test_delete_only_touches_the_owner(session) -> None:
    repository = NotificationRepository(session)
    mine = _create(repository)
    _create(repository)
    foreign = _create(repository, recipient="member-2")

    assert repository.delete_for_recipient(foreign.id, recipient="member-1") is False
    assert repository.delete_for_recipient(mine.id, recipient="member-1") is True
    assert repository.delete_all_for_recipient(recipient="member-1") == 1
    assert repository.get(foreign.id) is not None
