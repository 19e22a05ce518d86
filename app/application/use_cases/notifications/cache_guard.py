"""Best-effort access to the notification cache."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


@contextmanager
def best_effort(action: str) -> Iterator[None]:
    """Log and swallow Redis failures; the database stays the source of truth."""

    try:
        yield
    except RedisError as exc:
        logger.warning("Notification cache unavailable while %s: %s", action, exc)


__all__ = ["best_effort"]
