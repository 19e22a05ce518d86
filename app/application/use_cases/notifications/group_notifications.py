"""Client-side grouping of notifications."""

from __future__ import annotations

from collections.abc import Iterable

from app.domain.entities import Notification

DEFAULT_GROUP = "default"


def group_key(notification: Notification, *, by_type: bool = False, by_priority: bool = False) -> str:
    if by_type:
        return notification.type.value
    if by_priority:
        return notification.priority.value
    return notification.group_id or DEFAULT_GROUP


def group_notifications(
    notifications: Iterable[Notification],
    *,
    by_type: bool = False,
    by_priority: bool = False,
) -> dict[str, list[Notification]]:
    """Bucket ``notifications`` keeping their order inside each group.

    ``by_type`` wins over ``by_priority``; without either the explicit
    ``group_id`` is used and ungrouped items land in ``"default"``.
    """

    groups: dict[str, list[Notification]] = {}
    for notification in notifications:
        key = group_key(notification, by_type=by_type, by_priority=by_priority)
        groups.setdefault(key, []).append(notification)
    return groups


__all__ = ["DEFAULT_GROUP", "group_key", "group_notifications"]
