"""Use cases managing browser push subscriptions."""

from __future__ import annotations

from typing import Any

from app.domain.entities import PushSubscription, PushSubscriptionKeys
from app.domain.exceptions import ValidationError
from app.infrastructure.notifications import PushDeliveryChannel

from .validators import ensure_member_id


def subscribe_to_push(
    push_channel: PushDeliveryChannel, user_id: str, subscription: dict[str, Any]
) -> PushSubscription:
    """Register the ``PushSubscription`` JSON produced by the browser."""

    user_id = ensure_member_id(user_id, "member")
    if not isinstance(subscription, dict):
        raise ValidationError("Invalid push subscription")
    endpoint = subscription.get("endpoint")
    keys = subscription.get("keys") or {}
    if not isinstance(endpoint, str) or not endpoint.strip():
        raise ValidationError("Push subscription endpoint is required")
    if not isinstance(keys, dict) or not keys.get("p256dh") or not keys.get("auth"):
        raise ValidationError("Push subscription keys p256dh and auth are required")

    entity = PushSubscription(
        endpoint=endpoint.strip(),
        keys=PushSubscriptionKeys(p256dh=str(keys["p256dh"]), auth=str(keys["auth"])),
    )
    push_channel.save(user_id, entity)
    return entity


def unsubscribe_from_push(push_channel: PushDeliveryChannel, user_id: str, endpoint: str | None) -> None:
    user_id = ensure_member_id(user_id, "member")
    if not endpoint or not endpoint.strip():
        raise ValidationError("Push subscription endpoint is required")
    push_channel.delete(user_id, endpoint.strip())


def get_vapid_public_key(push_channel: PushDeliveryChannel) -> str:
    return push_channel.get_public_key()


__all__ = ["get_vapid_public_key", "subscribe_to_push", "unsubscribe_from_push"]
