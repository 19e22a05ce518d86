"""Web Push delivery over the subscriptions stored in the notification cache."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Callable, Iterable

from cryptography.hazmat.primitives import serialization
from py_vapid import Vapid01
from py_vapid.utils import b64urlencode
from pywebpush import WebPushException, webpush

from app.config import Settings
from app.domain.entities import Notification, PushSubscription
from app.domain.exceptions import PushConfigurationError

from .payloads import build_push_payload

if TYPE_CHECKING:
    from app.infrastructure.cache import NotificationCache

logger = logging.getLogger(__name__)

GONE_STATUS_CODES = (404, 410)
PUSH_TTL_SECONDS = 86_400

WebPushSender = Callable[..., Any]


class PushDeliveryChannel:
    """Send notifications to every browser subscription of a member."""

    def __init__(
        self,
        cache: NotificationCache,
        *,
        vapid_public_key: str | None,
        vapid_private_key: str | None,
        vapid_subject: str,
        sender: WebPushSender = webpush,
    ) -> None:
        self._cache = cache
        self._public_key = vapid_public_key
        self._private_key = vapid_private_key
        self._subject = vapid_subject
        self._sender = sender

    @classmethod
    def from_settings(
        cls, settings: Settings, cache: NotificationCache, *, sender: WebPushSender = webpush
    ) -> "PushDeliveryChannel":
        return cls(
            cache,
            vapid_public_key=settings.vapid_public_key,
            vapid_private_key=settings.vapid_private_key,
            vapid_subject=settings.vapid_subject,
            sender=sender,
        )

    @property
    def configured(self) -> bool:
        return bool(self._public_key and self._private_key)

    def get_public_key(self) -> str:
        if not self._public_key:
            raise PushConfigurationError("Push notifications are not configured")
        return self._public_key

    def save(self, user_id: str, subscription: PushSubscription) -> None:
        """Register ``subscription`` for ``user_id``; a known endpoint is left as stored."""

        subscriptions = self._cache.get_push_subscriptions(user_id)
        if any(existing.endpoint == subscription.endpoint for existing in subscriptions):
            return
        subscriptions.append(subscription)
        self._cache.set_push_subscriptions(user_id, subscriptions)

    def delete(self, user_id: str, endpoint: str) -> None:
        """Remove the subscription registered under ``endpoint`` if present."""

        subscriptions = self._cache.get_push_subscriptions(user_id)
        remaining = [item for item in subscriptions if item.endpoint != endpoint]
        if len(remaining) != len(subscriptions):
            self._cache.set_push_subscriptions(user_id, remaining)

    def send_to_user(self, user_id: str, notification: Notification) -> int:
        """Push ``notification`` to each subscription of ``user_id``.

        Returns the number of subscriptions that accepted the message. Gone
        subscriptions are removed, other provider errors are logged and do
        not stop the remaining sends.
        """

        if not self.configured:
            raise PushConfigurationError("VAPID keys are required to send push notifications")

        subscriptions = self._cache.get_push_subscriptions(user_id)
        if not subscriptions:
            return 0

        data = json.dumps(build_push_payload(notification))
        delivered = 0
        for subscription in subscriptions:
            try:
                self._sender(
                    subscription_info=subscription.to_dict(),
                    data=data,
                    vapid_private_key=self._private_key,
                    vapid_claims={"sub": self._subject},
                    ttl=PUSH_TTL_SECONDS,
                )
            except WebPushException as exc:
                status_code = getattr(exc.response, "status_code", None)
                if status_code in GONE_STATUS_CODES:
                    logger.warning(
                        "Removing expired push subscription for %s (%s)", user_id, status_code
                    )
                    self.delete(user_id, subscription.endpoint)
                else:
                    logger.error("Push delivery to %s failed: %s", user_id, exc)
                continue
            except Exception:
                logger.exception("Push delivery to %s failed", user_id)
                continue
            delivered += 1
        return delivered

    def broadcast(self, user_ids: Iterable[str], notification: Notification) -> None:
        """Send ``notification`` to several members; one failure does not stop the rest."""

        for user_id in dict.fromkeys(user_ids):
            try:
                self.send_to_user(user_id, notification)
            except Exception:
                logger.exception("Push broadcast to %s failed", user_id)


def generate_vapid_keys() -> dict[str, str]:
    """Create a new VAPID key pair encoded the way browsers and pywebpush expect."""

    vapid = Vapid01()
    vapid.generate_keys()
    public_key = vapid.public_key.public_bytes(
        encoding=serialization.Encoding.X962,
        format=serialization.PublicFormat.UncompressedPoint,
    )
    private_value = vapid.private_key.private_numbers().private_value.to_bytes(32, "big")
    return {
        "public_key": b64urlencode(public_key),
        "private_key": b64urlencode(private_value),
    }


__all__ = ["PushDeliveryChannel", "generate_vapid_keys"]
