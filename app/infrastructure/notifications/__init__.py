"""Notification delivery helpers for the infrastructure layer."""

from .dispatcher import (
    DeliveryDispatcher,
    DeliveryOutcome,
    build_dispatcher,
)
from .payloads import build_push_payload, deserialize_notification, serialize_notification
from .publisher import DispatchScheduler
from .push import PushDeliveryChannel, generate_vapid_keys

__all__ = [
    "DeliveryDispatcher",
    "DeliveryOutcome",
    "DispatchScheduler",
    "PushDeliveryChannel",
    "build_dispatcher",
    "build_push_payload",
    "deserialize_notification",
    "generate_vapid_keys",
    "serialize_notification",
]
