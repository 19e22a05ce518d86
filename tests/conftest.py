"""Shared fixtures; the environment is prepared before the app is imported."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

import pytest

TEST_DB_PATH = Path(tempfile.gettempdir()) / f"gaiathon-notifications-{os.getpid()}.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["VAPID_PUBLIC_KEY"] = "test-vapid-public-key"
os.environ["VAPID_PRIVATE_KEY"] = "test-vapid-private-key"
os.environ["VAPID_SUBJECT"] = "mailto:tests@gaiathon.org"
os.environ["STUB_CHANNEL_OUTCOME"] = "sent"
os.environ["APP_TIMEZONE"] = "UTC"

from fakes import FakeRedis, FakeWebPush  # noqa: E402

from app.infrastructure import database  # noqa: E402
from app.infrastructure.cache import NotificationCache  # noqa: E402
from app.infrastructure.notifications import PushDeliveryChannel  # noqa: E402
from app.infrastructure.security import create_access_token  # noqa: E402


@pytest.fixture(autouse=True)
def clean_database():
    """Recreate every table so each test starts from an empty database."""

    database.Base.metadata.drop_all(bind=database.engine, checkfirst=True)
    database.initialize_database()
    yield


@pytest.fixture(scope="session", autouse=True)
def remove_database_file():
    yield
    database.engine.dispose()
    if TEST_DB_PATH.exists():
        TEST_DB_PATH.unlink()


@pytest.fixture()
def session():
    db = database.SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture()
def cache(fake_redis: FakeRedis) -> NotificationCache:
    return NotificationCache(fake_redis, ttl_seconds=3600)


@pytest.fixture()
def push_sender() -> FakeWebPush:
    return FakeWebPush()


@pytest.fixture()
def push_channel(cache: NotificationCache, push_sender: FakeWebPush) -> PushDeliveryChannel:
    return PushDeliveryChannel(
        cache,
        vapid_public_key="test-vapid-public-key",
        vapid_private_key="test-vapid-private-key",
        vapid_subject="mailto:tests@gaiathon.org",
        sender=push_sender,
    )


@pytest.fixture()
def auth_headers():
    """Return a factory producing ``Authorization`` headers for a member id."""

    def _headers(member_id: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(member_id)}"}

    return _headers
