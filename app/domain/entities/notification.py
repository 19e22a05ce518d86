"""Domain entities describing notifications and their delivery state."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class NotificationType(str, Enum):
    ANNOUNCEMENT = "announcement"
    EVENT = "event"
    TASK = "task"
    MENTION = "mention"
    COMMENT = "comment"
    TEAM = "team"
    PROJECT = "project"
    MILESTONE = "milestone"
    SYSTEM = "system"


class NotificationPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class NotificationChannel(str, Enum):
    IN_APP = "in-app"
    EMAIL = "email"
    PUSH = "push"
    SLACK = "slack"


class DeliveryState(str, Enum):
    """Per-channel delivery state. ``SENT`` and ``FAILED`` are terminal."""

    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"


@dataclass
class DeliveryStatus:
    """Outcome of delivering a notification over a single channel."""

    channel: NotificationChannel
    status: DeliveryState = DeliveryState.PENDING
    sent_at: datetime | None = None
    error: str | None = None


@dataclass(frozen=True)
class RelatedEntity:
    """Back-reference to the object a notification talks about."""

    type: str
    id: str


@dataclass
class Notification:
    """Message addressed to a single recipient over one or more channels."""

    id: str | None
    type: NotificationType
    recipient: str
    title: str
    content: str
    channels: list[NotificationChannel]
    priority: NotificationPriority = NotificationPriority.MEDIUM
    sender: str | None = None
    is_read: bool = False
    read_at: datetime | None = None
    action_url: str | None = None
    group_id: str | None = None
    group_count: int = 1
    related_entities: list[RelatedEntity] = field(default_factory=list)
    delivery_status: list[DeliveryStatus] = field(default_factory=list)
    expires_at: datetime | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def delivery_for(self, channel: NotificationChannel) -> DeliveryStatus | None:
        """Return the delivery entry recorded for ``channel`` if any."""

        for entry in self.delivery_status:
            if entry.channel == channel:
                return entry
        return None


__all__ = [
    "DeliveryState",
    "DeliveryStatus",
    "Notification",
    "NotificationChannel",
    "NotificationPriority",
    "NotificationType",
    "RelatedEntity",
]
