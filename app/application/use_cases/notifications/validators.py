"""Validation helpers shared by the notification use cases."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import Any, TypeVar

from app.domain.entities import (
    NotificationChannel,
    NotificationPriority,
    NotificationType,
    RelatedEntity,
)
from app.domain.exceptions import ValidationError

TITLE_MAX_LENGTH = 200
MAX_PAGE_SIZE = 100

E = TypeVar("E", bound=Enum)


def coerce_enum(enum_cls: type[E], value: Any, field_name: str) -> E:
    """Accept an enum member, its value (``"in-app"``) or its name (``"IN_APP"``)."""

    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        candidate = value.strip()
        try:
            return enum_cls(candidate.lower())
        except ValueError:
            pass
        try:
            return enum_cls[candidate.upper().replace("-", "_")]
        except KeyError:
            pass
    raise ValidationError(f"Invalid {field_name}: {value!r}")


def ensure_type(value: Any) -> NotificationType:
    return coerce_enum(NotificationType, value, "notification type")


def ensure_priority(value: Any) -> NotificationPriority:
    return coerce_enum(NotificationPriority, value, "priority")


def ensure_channels(values: Iterable[Any] | None) -> list[NotificationChannel]:
    """Return the requested channels without duplicates, keeping their order."""

    if not values:
        raise ValidationError("At least one delivery channel is required")
    channels = [coerce_enum(NotificationChannel, value, "channel") for value in values]
    return list(dict.fromkeys(channels))


def ensure_title(title: str | None) -> str:
    normalized = (title or "").strip()
    if not normalized:
        raise ValidationError("Title is required")
    if len(normalized) > TITLE_MAX_LENGTH:
        raise ValidationError(f"Title must be at most {TITLE_MAX_LENGTH} characters")
    return normalized


def ensure_content(content: str | None) -> str:
    if content is None or not content.strip():
        raise ValidationError("Content is required")
    return content


def ensure_member_id(value: str | None, field_name: str = "recipient") -> str:
    normalized = (value or "").strip()
    if not normalized:
        raise ValidationError(f"A {field_name} is required")
    return normalized


def ensure_related_entities(values: Iterable[Any] | None) -> list[RelatedEntity]:
    entities: list[RelatedEntity] = []
    for value in values or []:
        if isinstance(value, RelatedEntity):
            entities.append(value)
            continue
        if not isinstance(value, dict) or not value.get("type") or not value.get("id"):
            raise ValidationError("Related entities need both a type and an id")
        entities.append(RelatedEntity(type=str(value["type"]), id=str(value["id"])))
    return entities


def ensure_notification_ids(values: Iterable[Any] | None) -> list[str]:
    """Return the given ids as strings without duplicates."""

    if values is None or isinstance(values, (str, bytes)):
        raise ValidationError("Notification IDs array is required")
    ids = [str(value).strip() for value in values if value is not None and str(value).strip()]
    if not ids:
        raise ValidationError("Notification IDs array is required")
    return list(dict.fromkeys(ids))


def ensure_pagination(page: int, limit: int) -> tuple[int, int]:
    if page < 1:
        raise ValidationError("Page must be greater than or equal to 1")
    if limit < 1 or limit > MAX_PAGE_SIZE:
        raise ValidationError(f"Limit must be between 1 and {MAX_PAGE_SIZE}")
    return page, limit


__all__ = [
    "MAX_PAGE_SIZE",
    "TITLE_MAX_LENGTH",
    "coerce_enum",
    "ensure_channels",
    "ensure_content",
    "ensure_member_id",
    "ensure_notification_ids",
    "ensure_pagination",
    "ensure_priority",
    "ensure_related_entities",
    "ensure_title",
    "ensure_type",
]
