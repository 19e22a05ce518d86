"""Domain entity for per-member notification preferences."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DigestFrequency(str, Enum):
    NONE = "NONE"
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"


@dataclass
class NotificationPreferences:
    """Channels a member accepts besides the in-app inbox."""

    user_id: str
    email: bool = True
    push: bool = True
    digest: DigestFrequency = DigestFrequency.DAILY


__all__ = ["DigestFrequency", "NotificationPreferences"]
