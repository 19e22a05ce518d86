"""Serialization helpers shared by the cache and the push channel."""

from __future__ import annotations

from typing import Any

from app.domain.entities import (
    DeliveryState,
    DeliveryStatus,
    Notification,
    NotificationChannel,
    NotificationPriority,
    NotificationType,
    RelatedEntity,
)
from app.utils import parse_iso_datetime

PUSH_ICON = "/icons/notification.png"
PUSH_BADGE = "/icons/badge.png"


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return a JSON-serializable representation of ``notification``."""

    return {
        "id": notification.id,
        "type": notification.type.value,
        "priority": notification.priority.value,
        "recipient": notification.recipient,
        "sender": notification.sender,
        "title": notification.title,
        "content": notification.content,
        "channels": [channel.value for channel in notification.channels],
        "is_read": notification.is_read,
        "read_at": _iso_or_none(notification.read_at),
        "action_url": notification.action_url,
        "group_id": notification.group_id,
        "group_count": notification.group_count,
        "related_entities": [
            {"type": entity.type, "id": entity.id}
            for entity in notification.related_entities
        ],
        "delivery_status": [
            {
                "channel": entry.channel.value,
                "status": entry.status.value,
                "sent_at": _iso_or_none(entry.sent_at),
                "error": entry.error,
            }
            for entry in notification.delivery_status
        ],
        "expires_at": _iso_or_none(notification.expires_at),
        "metadata": notification.metadata or {},
        "created_at": _iso_or_none(notification.created_at),
        "updated_at": _iso_or_none(notification.updated_at),
    }


def deserialize_notification(data: dict[str, Any]) -> Notification:
    """Rebuild a :class:`Notification` from :func:`serialize_notification` output."""

    return Notification(
        id=data["id"],
        type=NotificationType(data["type"]),
        priority=NotificationPriority(data.get("priority", NotificationPriority.MEDIUM.value)),
        recipient=data["recipient"],
        sender=data.get("sender"),
        title=data["title"],
        content=data["content"],
        channels=[NotificationChannel(value) for value in data.get("channels", [])],
        is_read=bool(data.get("is_read", False)),
        read_at=parse_iso_datetime(data.get("read_at")),
        action_url=data.get("action_url"),
        group_id=data.get("group_id"),
        group_count=int(data.get("group_count") or 1),
        related_entities=[
            RelatedEntity(type=item["type"], id=item["id"])
            for item in data.get("related_entities", [])
        ],
        delivery_status=[
            DeliveryStatus(
                channel=NotificationChannel(item["channel"]),
                status=DeliveryState(item["status"]),
                sent_at=parse_iso_datetime(item.get("sent_at")),
                error=item.get("error"),
            )
            for item in data.get("delivery_status", [])
        ],
        expires_at=parse_iso_datetime(data.get("expires_at")),
        metadata=data.get("metadata") or {},
        created_at=parse_iso_datetime(data.get("created_at")),
        updated_at=parse_iso_datetime(data.get("updated_at")),
    )


def build_push_payload(notification: Notification) -> dict[str, Any]:
    """Return the message shown by the service worker for ``notification``."""

    return {
        "title": notification.title,
        "body": notification.content,
        "icon": PUSH_ICON,
        "badge": PUSH_BADGE,
        "data": {
            "url": notification.action_url,
            "notificationId": notification.id,
        },
        "actions": [
            {"action": "view", "title": "View"},
            {"action": "dismiss", "title": "Dismiss"},
        ],
    }


def _iso_or_none(value) -> str | None:
    return value.isoformat() if value else None


__all__ = [
    "PUSH_BADGE",
    "PUSH_ICON",
    "build_push_payload",
    "deserialize_notification",
    "serialize_notification",
]
