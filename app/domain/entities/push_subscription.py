"""Domain entity representing a browser push subscription."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class PushSubscriptionKeys:
    p256dh: str
    auth: str


@dataclass(frozen=True)
class PushSubscription:
    """Endpoint registered by a browser through the Push API.

    Subscriptions are identified by ``endpoint`` within a user's set.
    """

    endpoint: str
    keys: PushSubscriptionKeys

    def to_dict(self) -> dict[str, Any]:
        """Return the ``subscription_info`` mapping expected by Web Push."""

        return {
            "endpoint": self.endpoint,
            "keys": {"p256dh": self.keys.p256dh, "auth": self.keys.auth},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PushSubscription":
        keys = data.get("keys") or {}
        return cls(
            endpoint=str(data["endpoint"]),
            keys=PushSubscriptionKeys(
                p256dh=str(keys.get("p256dh", "")),
                auth=str(keys.get("auth", "")),
            ),
        )


__all__ = ["PushSubscription", "PushSubscriptionKeys"]
