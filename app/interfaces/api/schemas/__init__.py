from .notification import (
    DeliveryStatusRead,
    NotificationCreate,
    NotificationIdsRequest,
    NotificationPreferencesRead,
    NotificationPreferencesUpdate,
    NotificationRead,
    PushSubscriptionCreate,
    PushUnsubscribeRequest,
    RelatedEntitySchema,
    SuccessResponse,
    UnreadCountRead,
    VapidPublicKeyRead,
)

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
