"""In-process stand-ins for Redis and the Web Push transport."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pywebpush import WebPushException
from redis.exceptions import ConnectionError as RedisConnectionError


class FakeRedis:
    """Implements the subset of the Redis client used by the notification cache."""

    def __init__(self) -> None:
        self.values: dict[str, str] = {}
        self.sorted_sets: dict[str, dict[str, float]] = {}
        self.ttls: dict[str, int] = {}

    def ping(self) -> bool:
        return True

    def close(self) -> None:
        pass

    def pipeline(self) -> "FakePipeline":
        return FakePipeline(self)

    def get(self, name: str) -> str | None:
        return self.values.get(name)

    def set(self, name: str, value: Any, ex: int | None = None, keepttl: bool = False) -> bool:
        self.values[name] = str(value)
        if ex is not None:
            self.ttls[name] = ex
        elif not keepttl:
            self.ttls.pop(name, None)
        return True

    def setex(self, name: str, time: int, value: Any) -> bool:
        return self.set(name, value, ex=time)

    def exists(self, *names: str) -> int:
        return sum(1 for name in names if name in self.values or name in self.sorted_sets)

    def delete(self, *names: str) -> int:
        removed = 0
        for name in names:
            if self.values.pop(name, None) is not None:
                removed += 1
            if self.sorted_sets.pop(name, None) is not None:
                removed += 1
            self.ttls.pop(name, None)
        return removed

    def expire(self, name: str, time: int) -> bool:
        if not self.exists(name):
            return False
        self.ttls[name] = time
        return True

    def incr(self, name: str, amount: int = 1) -> int:
        value = int(self.values.get(name, 0)) + amount
        self.values[name] = str(value)
        return value

    def decrby(self, name: str, amount: int = 1) -> int:
        return self.incr(name, -amount)

    def zadd(self, name: str, mapping: dict[str, float]) -> int:
        members = self.sorted_sets.setdefault(name, {})
        added = sum(1 for member in mapping if member not in members)
        members.update(mapping)
        return added

    def zrange(self, name: str, start: int, end: int) -> list[str]:
        ordered = sorted(self.sorted_sets.get(name, {}).items(), key=lambda item: (item[1], item[0]))
        return self._slice([member for member, _ in ordered], start, end)

    def zrevrange(self, name: str, start: int, end: int) -> list[str]:
        ordered = sorted(
            self.sorted_sets.get(name, {}).items(),
            key=lambda item: (item[1], item[0]),
            reverse=True,
        )
        return self._slice([member for member, _ in ordered], start, end)

    @staticmethod
    def _slice(members: list[str], start: int, end: int) -> list[str]:
        stop = None if end == -1 else end + 1
        return members[start:stop]


class FakePipeline:
    """Buffers commands and applies them on ``execute``."""

    def __init__(self, client: FakeRedis) -> None:
        self._client = client
        self._commands: list[tuple[str, tuple, dict]] = []

    def __getattr__(self, name: str):
        if not hasattr(self._client, name):
            raise AttributeError(name)

        def queue(*args, **kwargs):
            self._commands.append((name, args, kwargs))
            return self

        return queue

    def execute(self) -> list[Any]:
        results = [getattr(self._client, name)(*args, **kwargs) for name, args, kwargs in self._commands]
        self._commands.clear()
        return results


class UnavailableRedis:
    """Redis client whose every command fails as if the server were down."""

    def __getattr__(self, name: str):
        def fail(*args, **kwargs):
            raise RedisConnectionError("Connection refused")

        return fail


class FlakyRedis(FakeRedis):
    """FakeRedis whose reads of ``failing_keys`` raise a connection error."""

    def __init__(self) -> None:
        super().__init__()
        self.failing_keys: set[str] = set()

    def get(self, name: str) -> str | None:
        if name in self.failing_keys:
            raise RedisConnectionError("Connection reset by peer")
        return super().get(name)


@dataclass
class FakeResponse:
    status_code: int
    text: str = ""


class FakeWebPush:
    """Records ``webpush`` calls.

    ``statuses`` maps endpoints to error replies, ``errors`` maps endpoints to
    exceptions raised before any reply.
    """

    def __init__(self, statuses: dict[str, int] | None = None) -> None:
        self.statuses = dict(statuses or {})
        self.errors: dict[str, Exception] = {}
        self.calls: list[dict[str, Any]] = []

    def __call__(self, **kwargs: Any) -> FakeResponse:
        self.calls.append(kwargs)
        endpoint = kwargs["subscription_info"]["endpoint"]
        if endpoint in self.errors:
            raise self.errors[endpoint]
        status = self.statuses.get(endpoint)
        if status is not None:
            raise WebPushException(f"Push failed: {status}", response=FakeResponse(status))
        return FakeResponse(201)

    @property
    def endpoints(self) -> list[str]:
        return [call["subscription_info"]["endpoint"] for call in self.calls]
