"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.domain.entities import Notification, NotificationPreferences


class CamelModel(BaseModel):
    """Base model exchanging camelCase JSON with the web client."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RelatedEntitySchema(CamelModel):
    type: str
    id: str


class DeliveryStatusRead(CamelModel):
    channel: str
    status: str
    sent_at: datetime | None = None
    error: str | None = None


class NotificationRead(CamelModel):
    """Representation of a notification delivered to the client."""

    id: str
    type: str
    priority: str
    recipient: str
    sender: str | None = None
    title: str
    content: str
    channels: list[str]
    is_read: bool
    read_at: datetime | None = None
    action_url: str | None = None
    group_id: str | None = None
    group_count: int = 1
    related_entities: list[RelatedEntitySchema] = Field(default_factory=list)
    delivery_status: list[DeliveryStatusRead] = Field(default_factory=list)
    expires_at: datetime | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_entity(cls, notification: Notification) -> "NotificationRead":
        return cls(
            id=notification.id or "",
            type=notification.type.value,
            priority=notification.priority.value,
            recipient=notification.recipient,
            sender=notification.sender,
            title=notification.title,
            content=notification.content,
            channels=[channel.value for channel in notification.channels],
            is_read=notification.is_read,
            read_at=notification.read_at,
            action_url=notification.action_url,
            group_id=notification.group_id,
            group_count=notification.group_count,
            related_entities=[
                RelatedEntitySchema(type=entity.type, id=entity.id)
                for entity in notification.related_entities
            ],
            delivery_status=[
                DeliveryStatusRead(
                    channel=entry.channel.value,
                    status=entry.status.value,
                    sent_at=entry.sent_at,
                    error=entry.error,
                )
                for entry in notification.delivery_status
            ],
            expires_at=notification.expires_at,
            metadata=notification.metadata or {},
            created_at=notification.created_at,
            updated_at=notification.updated_at,
        )


class NotificationCreate(CamelModel):
    """Payload used to create a notification for another member.

    Enum fields accept either the lower-case value or the upper-case name.
    """

    recipient: str
    type: str
    title: str
    content: str
    channels: list[str] = Field(..., min_length=1)
    priority: str = "medium"
    action_url: str | None = None
    group_id: str | None = None
    group_count: int = 1
    related_entities: list[RelatedEntitySchema] = Field(default_factory=list)
    expires_at: datetime | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class NotificationIdsRequest(CamelModel):
    """Payload carrying a batch of notification identifiers."""

    notification_ids: list[str | int] = Field(..., min_length=1)


class UnreadCountRead(CamelModel):
    count: int


class SuccessResponse(CamelModel):
    success: bool = True


class NotificationPreferencesRead(CamelModel):
    email: bool
    push: bool
    digest: str

    @classmethod
    def from_entity(cls, preferences: NotificationPreferences) -> "NotificationPreferencesRead":
        return cls(
            email=preferences.email,
            push=preferences.push,
            digest=preferences.digest.value,
        )


class NotificationPreferencesUpdate(CamelModel):
    email: bool | None = None
    push: bool | None = None
    digest: str | None = None


class PushSubscriptionKeysSchema(CamelModel):
    p256dh: str
    auth: str


class PushSubscriptionCreate(CamelModel):
    """``PushSubscription.toJSON()`` output sent by the browser."""

    endpoint: str
    keys: PushSubscriptionKeysSchema
    expiration_time: int | None = None


class PushUnsubscribeRequest(CamelModel):
    endpoint: str


class VapidPublicKeyRead(CamelModel):
    vapid_public_key: str


__all__ = [
    "DeliveryStatusRead",
    "NotificationCreate",
    "NotificationIdsRequest",
    "NotificationPreferencesRead",
    "NotificationPreferencesUpdate",
    "NotificationRead",
    "PushSubscriptionCreate",
    "PushUnsubscribeRequest",
    "RelatedEntitySchema",
    "SuccessResponse",
    "UnreadCountRead",
    "VapidPublicKeyRead",
]
