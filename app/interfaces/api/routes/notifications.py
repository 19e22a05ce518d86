"""Endpoints for notifications, preferences and push subscriptions."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from app.application.use_cases.notifications import (
    create_notification as create_notification_uc,
    delete_all_notifications as delete_all_notifications_uc,
    delete_notifications as delete_notifications_uc,
    get_notification as get_notification_uc,
    get_notification_preferences as get_notification_preferences_uc,
    get_unread_count as get_unread_count_uc,
    get_user_notifications as get_user_notifications_uc,
    get_vapid_public_key as get_vapid_public_key_uc,
    group_notifications as group_notifications_uc,
    mark_all_as_read as mark_all_as_read_uc,
    mark_as_read as mark_as_read_uc,
    subscribe_to_push as subscribe_to_push_uc,
    unsubscribe_from_push as unsubscribe_from_push_uc,
    update_notification_preferences as update_notification_preferences_uc,
)
from app.infrastructure.cache import NotificationCache
from app.infrastructure.database import get_db
from app.infrastructure.notifications import DispatchScheduler, PushDeliveryChannel
from app.interfaces.api.dependencies import (
    get_current_member_id,
    get_dispatch_scheduler,
    get_notification_cache,
    get_push_channel,
)
from app.interfaces.api.schemas import (
    NotificationCreate,
    NotificationIdsRequest,
    NotificationPreferencesRead,
    NotificationPreferencesUpdate,
    NotificationRead,
    PushSubscriptionCreate,
    PushUnsubscribeRequest,
    SuccessResponse,
    UnreadCountRead,
    VapidPublicKeyRead,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationRead])
def list_notifications(
    type: str | None = Query(default=None),
    priority: str | None = Query(default=None),
    is_read: bool | None = Query(default=None, alias="isRead"),
    start_date: datetime | None = Query(default=None, alias="startDate"),
    end_date: datetime | None = Query(default=None, alias="endDate"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    db: Session = Depends(get_db),
    cache: NotificationCache | None = Depends(get_notification_cache),
    member_id: str = Depends(get_current_member_id),
) -> list[NotificationRead]:
    """Return a page of the authenticated member's notifications, newest first."""

    notifications = get_user_notifications_uc(
        db,
        cache,
        member_id,
        page=page,
        limit=limit,
        type=type,
        priority=priority,
        is_read=is_read,
        start_date=start_date,
        end_date=end_date,
    )
    return [NotificationRead.from_entity(notification) for notification in notifications]


@router.post("", response_model=NotificationRead, status_code=status.HTTP_201_CREATED)
def create_notification(
    payload: NotificationCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    cache: NotificationCache | None = Depends(get_notification_cache),
    scheduler: DispatchScheduler | None = Depends(get_dispatch_scheduler),
    member_id: str = Depends(get_current_member_id),
) -> NotificationRead:
    """Create a notification sent by the authenticated member.

    Delivery runs after the response is returned.
    """

    notification = create_notification_uc(
        db,
        cache,
        type=payload.type,
        recipient=payload.recipient,
        title=payload.title,
        content=payload.content,
        channels=payload.channels,
        priority=payload.priority,
        sender=member_id,
        action_url=payload.action_url,
        group_id=payload.group_id,
        group_count=payload.group_count,
        related_entities=[entity.model_dump() for entity in payload.related_entities],
        expires_at=payload.expires_at,
        metadata=payload.metadata,
        scheduler=scheduler,
        background_tasks=background_tasks,
    )
    return NotificationRead.from_entity(notification)


@router.put("", response_model=SuccessResponse)
def mark_notifications_as_read(
    payload: NotificationIdsRequest,
    db: Session = Depends(get_db),
    cache: NotificationCache | None = Depends(get_notification_cache),
    member_id: str = Depends(get_current_member_id),
) -> SuccessResponse:
    mark_as_read_uc(db, cache, member_id, payload.notification_ids)
    return SuccessResponse()


@router.delete("", response_model=SuccessResponse)
def delete_notifications(
    payload: NotificationIdsRequest,
    db: Session = Depends(get_db),
    cache: NotificationCache | None = Depends(get_notification_cache),
    member_id: str = Depends(get_current_member_id),
) -> SuccessResponse:
    delete_notifications_uc(db, cache, member_id, payload.notification_ids)
    return SuccessResponse()


@router.put("/read-all", response_model=SuccessResponse)
def mark_all_notifications_as_read(
    db: Session = Depends(get_db),
    cache: NotificationCache | None = Depends(get_notification_cache),
    member_id: str = Depends(get_current_member_id),
) -> SuccessResponse:
    mark_all_as_read_uc(db, cache, member_id)
    return SuccessResponse()


@router.delete("/all", response_model=SuccessResponse)
def delete_all_notifications(
    db: Session = Depends(get_db),
    cache: NotificationCache | None = Depends(get_notification_cache),
    member_id: str = Depends(get_current_member_id),
) -> SuccessResponse:
    delete_all_notifications_uc(db, cache, member_id)
    return SuccessResponse()


@router.get("/unread-count", response_model=UnreadCountRead)
def read_unread_count(
    db: Session = Depends(get_db),
    cache: NotificationCache | None = Depends(get_notification_cache),
    member_id: str = Depends(get_current_member_id),
) -> UnreadCountRead:
    return UnreadCountRead(count=get_unread_count_uc(db, cache, member_id))


@router.get("/groups", response_model=dict[str, list[NotificationRead]])
def list_notification_groups(
    by_type: bool = Query(default=False, alias="byType"),
    by_priority: bool = Query(default=False, alias="byPriority"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    db: Session = Depends(get_db),
    cache: NotificationCache | None = Depends(get_notification_cache),
    member_id: str = Depends(get_current_member_id),
) -> dict[str, list[NotificationRead]]:
    """Return one page of notifications bucketed by type, priority or group id."""

    notifications = get_user_notifications_uc(db, cache, member_id, page=page, limit=limit)
    groups = group_notifications_uc(notifications, by_type=by_type, by_priority=by_priority)
    return {
        key: [NotificationRead.from_entity(notification) for notification in items]
        for key, items in groups.items()
    }


@router.get("/preferences", response_model=NotificationPreferencesRead)
def read_preferences(
    db: Session = Depends(get_db),
    cache: NotificationCache | None = Depends(get_notification_cache),
    member_id: str = Depends(get_current_member_id),
) -> NotificationPreferencesRead:
    preferences = get_notification_preferences_uc(db, cache, member_id)
    return NotificationPreferencesRead.from_entity(preferences)


@router.put("/preferences", response_model=NotificationPreferencesRead)
def update_preferences(
    payload: NotificationPreferencesUpdate,
    db: Session = Depends(get_db),
    cache: NotificationCache | None = Depends(get_notification_cache),
    member_id: str = Depends(get_current_member_id),
) -> NotificationPreferencesRead:
    preferences = update_notification_preferences_uc(
        db,
        cache,
        member_id,
        email=payload.email,
        push=payload.push,
        digest=payload.digest,
    )
    return NotificationPreferencesRead.from_entity(preferences)


@router.post("/push", response_model=SuccessResponse)
def subscribe_push(
    payload: PushSubscriptionCreate,
    push_channel: PushDeliveryChannel = Depends(get_push_channel),
    member_id: str = Depends(get_current_member_id),
) -> SuccessResponse:
    subscribe_to_push_uc(push_channel, member_id, payload.model_dump(include={"endpoint", "keys"}))
    return SuccessResponse()


@router.get("/push", response_model=VapidPublicKeyRead)
def read_vapid_public_key(
    push_channel: PushDeliveryChannel = Depends(get_push_channel),
    member_id: str = Depends(get_current_member_id),
) -> VapidPublicKeyRead:
    return VapidPublicKeyRead(vapid_public_key=get_vapid_public_key_uc(push_channel))


@router.delete("/push", response_model=SuccessResponse)
def unsubscribe_push(
    payload: PushUnsubscribeRequest,
    push_channel: PushDeliveryChannel = Depends(get_push_channel),
    member_id: str = Depends(get_current_member_id),
) -> SuccessResponse:
    unsubscribe_from_push_uc(push_channel, member_id, payload.endpoint)
    return SuccessResponse()


@router.get("/{notification_id}", response_model=NotificationRead)
def read_notification(
    notification_id: str,
    db: Session = Depends(get_db),
    member_id: str = Depends(get_current_member_id),
) -> NotificationRead:
    """Return one notification including its per-channel delivery status."""

    return NotificationRead.from_entity(get_notification_uc(db, member_id, notification_id))
