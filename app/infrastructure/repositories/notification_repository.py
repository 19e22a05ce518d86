"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Iterable
from uuid import uuid4

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.domain.entities import (
    DeliveryState,
    DeliveryStatus,
    Notification,
    NotificationChannel,
    NotificationPriority,
    NotificationType,
    RelatedEntity,
)
from app.infrastructure.models import NotificationDeliveryModel, NotificationModel
from app.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_naive_datetime,
)


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, notification_id: str) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        if model is None:
            return None
        return self._to_entity(model)

    def get_for_recipient(self, notification_id: str, recipient: str) -> Notification | None:
        model = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.id == notification_id)
            .filter(NotificationModel.recipient == recipient)
            .filter(self._not_expired())
            .one_or_none()
        )
        if model is None:
            return None
        return self._to_entity(model)

    def list_for_recipient(
        self,
        recipient: str,
        *,
        page: int = 1,
        limit: int = 20,
        type: NotificationType | None = None,
        priority: NotificationPriority | None = None,
        is_read: bool | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> Sequence[Notification]:
        query = self.session.query(NotificationModel)
        query = query.filter(NotificationModel.recipient == recipient)
        query = query.filter(self._not_expired())
        if type is not None:
            query = query.filter(NotificationModel.type == type.value)
        if priority is not None:
            query = query.filter(NotificationModel.priority == priority.value)
        if is_read is not None:
            query = query.filter(NotificationModel.is_read.is_(is_read))
        if start_date is not None:
            query = query.filter(
                NotificationModel.created_at >= ensure_app_naive_datetime(start_date)
            )
        if end_date is not None:
            query = query.filter(
                NotificationModel.created_at <= ensure_app_naive_datetime(end_date)
            )
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        query = query.offset((max(page, 1) - 1) * limit).limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def count_unread(self, recipient: str) -> int:
        return (
            self.session.query(NotificationModel)
            .filter(NotificationModel.recipient == recipient)
            .filter(NotificationModel.is_read.is_(False))
            .filter(self._not_expired())
            .count()
        )

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel(id=notification.id or uuid4().hex)
        self._apply_entity_to_model(model, notification)
        model.deliveries = [
            NotificationDeliveryModel(
                channel=channel.value,
                position=position,
                status=DeliveryState.PENDING.value,
            )
            for position, channel in enumerate(notification.channels)
        ]
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def update_delivery_status(
        self,
        notification_id: str,
        channel: NotificationChannel,
        status: DeliveryState,
        *,
        sent_at: datetime | None = None,
        error: str | None = None,
    ) -> bool:
        """Move the ``channel`` entry out of ``pending``.

        The update matches a single delivery row and only while it is still
        pending, so terminal states are never overwritten.
        """

        values: dict[object, object] = {NotificationDeliveryModel.status: status.value}
        if sent_at is not None:
            values[NotificationDeliveryModel.sent_at] = ensure_app_naive_datetime(sent_at)
        if error is not None:
            values[NotificationDeliveryModel.error] = error
        updated = (
            self.session.query(NotificationDeliveryModel)
            .filter(NotificationDeliveryModel.notification_id == notification_id)
            .filter(NotificationDeliveryModel.channel == channel.value)
            .filter(NotificationDeliveryModel.status == DeliveryState.PENDING.value)
            .update(values, synchronize_session=False)
        )
        self.session.commit()
        return updated > 0

    def mark_as_read(self, notification_ids: Iterable[str], *, recipient: str) -> int:
        """Mark the unread notifications of ``recipient`` as read.

        Returns how many records actually went from unread to read; ids owned
        by other members or already read are ignored.
        """

        ids = list(dict.fromkeys(nid for nid in notification_ids if nid))
        if not ids:
            return 0
        now = now_in_app_naive_datetime()
        updated = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.id.in_(ids),
                NotificationModel.recipient == recipient,
                NotificationModel.is_read.is_(False),
            )
            .update(
                {
                    NotificationModel.is_read: True,
                    NotificationModel.read_at: now,
                    NotificationModel.updated_at: now,
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        return updated

    def mark_all_as_read(self, *, recipient: str) -> int:
        now = now_in_app_naive_datetime()
        updated = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.recipient == recipient,
                NotificationModel.is_read.is_(False),
            )
            .update(
                {
                    NotificationModel.is_read: True,
                    NotificationModel.read_at: now,
                    NotificationModel.updated_at: now,
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        return updated

    def delete_for_recipient(self, notification_id: str, *, recipient: str) -> bool:
        model = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.id == notification_id)
            .filter(NotificationModel.recipient == recipient)
            .one_or_none()
        )
        if model is None:
            return False
        self.session.delete(model)
        self.session.commit()
        return True

    def delete_all_for_recipient(self, *, recipient: str) -> int:
        ids = [
            row.id
            for row in self.session.query(NotificationModel.id).filter(
                NotificationModel.recipient == recipient
            )
        ]
        return self._delete_ids(ids)

    def purge_expired(self, now: datetime) -> int:
        """Delete notifications whose ``expires_at`` is at or before ``now``."""

        cutoff = ensure_app_naive_datetime(now)
        ids = [
            row.id
            for row in self.session.query(NotificationModel.id).filter(
                NotificationModel.expires_at.is_not(None),
                NotificationModel.expires_at <= cutoff,
            )
        ]
        return self._delete_ids(ids)

    def _delete_ids(self, ids: list[str]) -> int:
        if not ids:
            return 0
        self.session.query(NotificationDeliveryModel).filter(
            NotificationDeliveryModel.notification_id.in_(ids)
        ).delete(synchronize_session=False)
        deleted = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.id.in_(ids))
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return deleted

    @staticmethod
    def _not_expired():
        now = now_in_app_naive_datetime()
        return or_(
            NotificationModel.expires_at.is_(None),
            NotificationModel.expires_at > now,
        )

    @staticmethod
    def _apply_entity_to_model(model: NotificationModel, notification: Notification) -> None:
        now = now_in_app_naive_datetime()
        model.type = notification.type.value
        model.priority = notification.priority.value
        model.recipient = notification.recipient
        model.sender = notification.sender
        model.title = notification.title
        model.content = notification.content
        model.channels = [channel.value for channel in notification.channels]
        model.is_read = notification.is_read
        model.read_at = ensure_app_naive_datetime(notification.read_at)
        model.action_url = notification.action_url
        model.group_id = notification.group_id
        model.group_count = notification.group_count
        model.related_entities = [
            {"type": entity.type, "id": entity.id}
            for entity in notification.related_entities
        ]
        model.extra = dict(notification.metadata or {})
        model.expires_at = ensure_app_naive_datetime(notification.expires_at)
        model.created_at = ensure_app_naive_datetime(notification.created_at) or now
        model.updated_at = now

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            type=NotificationType(model.type),
            priority=NotificationPriority(model.priority),
            recipient=model.recipient,
            sender=model.sender,
            title=model.title,
            content=model.content,
            channels=[NotificationChannel(value) for value in model.channels or []],
            is_read=bool(model.is_read),
            read_at=ensure_app_timezone(model.read_at),
            action_url=model.action_url,
            group_id=model.group_id,
            group_count=model.group_count or 1,
            related_entities=[
                RelatedEntity(type=str(item["type"]), id=str(item["id"]))
                for item in model.related_entities or []
            ],
            delivery_status=[
                DeliveryStatus(
                    channel=NotificationChannel(delivery.channel),
                    status=DeliveryState(delivery.status),
                    sent_at=ensure_app_timezone(delivery.sent_at),
                    error=delivery.error,
                )
                for delivery in model.deliveries
            ],
            expires_at=ensure_app_timezone(model.expires_at),
            metadata=dict(model.extra or {}),
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
        )


__all__ = ["NotificationRepository"]
