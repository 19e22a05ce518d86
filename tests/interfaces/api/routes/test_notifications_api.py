"""Integration tests for the notification API endpoints."""

from __future__ import annotations

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient


@pytest.fixture()
def client(fake_redis, push_sender):
    """Return a test client whose Redis and Web Push transport are in-process fakes."""

    from main import create_app

    app = create_app(redis_client=fake_redis, push_sender=push_sender)
    with TestClient(app) as test_client:
        yield test_client


def _create(client: TestClient, headers: dict[str, str], **overrides) -> dict:
    payload = {
        "recipient": "member-1",
        "type": "ANNOUNCEMENT",
        "title": "Welcome to GAIAthon",
        "content": "Check-in opens at 9:00",
        "channels": ["IN_APP"],
    }
    payload.update(overrides)
    response = client.post("/notifications", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_requests_without_a_valid_token_are_rejected(client: TestClient) -> None:
    response = client.get("/notifications")
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}

    response = client.get("/notifications", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_create_list_and_read_flow(client: TestClient, auth_headers) -> None:
    sender = auth_headers("organizer")
    member = auth_headers("member-1")

    created = _create(client, sender, channels=["IN_APP", "EMAIL"], actionUrl="/announcements/1")
    assert created["sender"] == "organizer"
    assert created["isRead"] is False
    assert created["actionUrl"] == "/announcements/1"

    detail = client.get(f"/notifications/{created['id']}", headers=member)
    assert detail.status_code == 200
    statuses = {entry["channel"]: entry["status"] for entry in detail.json()["deliveryStatus"]}
    assert statuses == {"in-app": "sent", "email": "sent"}

    listing = client.get("/notifications", headers=member)
    assert [item["id"] for item in listing.json()] == [created["id"]]
    assert client.get("/notifications/unread-count", headers=member).json() == {"count": 1}

    response = client.put(
        "/notifications", json={"notificationIds": [created["id"]]}, headers=member
    )
    assert response.json() == {"success": True}
    assert client.get("/notifications/unread-count", headers=member).json() == {"count": 0}

    unread = client.get("/notifications", params={"isRead": "false"}, headers=member)
    assert unread.json() == []


def test_other_members_cannot_see_or_delete(client: TestClient, auth_headers) -> None:
    created = _create(client, auth_headers("organizer"))
    outsider = auth_headers("member-2")

    assert client.get(f"/notifications/{created['id']}", headers=outsider).status_code == 404
    response = client.request(
        "DELETE", "/notifications", json={"notificationIds": [created["id"]]}, headers=outsider
    )
    assert response.status_code == 404
    assert response.json() == {"error": "Notification not found"}


def test_delete_removes_from_listing(client: TestClient, auth_headers) -> None:
    sender = auth_headers("organizer")
    member = auth_headers("member-1")
    kept = _create(client, sender)
    removed = _create(client, sender)

    response = client.request(
        "DELETE", "/notifications", json={"notificationIds": [removed["id"]]}, headers=member
    )
    assert response.status_code == 200

    ids = [item["id"] for item in client.get("/notifications", headers=member).json()]
    assert ids == [kept["id"]]

    assert client.delete("/notifications/all", headers=member).json() == {"success": True}
    assert client.get("/notifications", headers=member).json() == []


def test_invalid_payloads_return_400(client: TestClient, auth_headers) -> None:
    headers = auth_headers("organizer")

    response = client.post(
        "/notifications",
        json={"recipient": "member-1", "type": "UNKNOWN", "title": "t", "content": "c", "channels": ["IN_APP"]},
        headers=headers,
    )
    assert response.status_code == 400
    assert "error" in response.json()

    response = client.put("/notifications", json={"notificationIds": []}, headers=headers)
    assert response.status_code == 400

    response = client.get("/notifications", params={"limit": 500}, headers=headers)
    assert response.status_code == 400


def test_read_all_and_groups(client: TestClient, auth_headers) -> None:
    sender = auth_headers("organizer")
    member = auth_headers("member-1")
    _create(client, sender, type="TASK", priority="HIGH")
    _create(client, sender, type="EVENT")

    groups = client.get("/notifications/groups", params={"byType": "true"}, headers=member).json()
    assert set(groups) == {"task", "event"}

    assert client.put("/notifications/read-all", headers=member).json() == {"success": True}
    assert client.get("/notifications/unread-count", headers=member).json() == {"count": 0}


def test_preferences_round_trip(client: TestClient, auth_headers) -> None:
    member = auth_headers("member-1")

    assert client.get("/notifications/preferences", headers=member).json() == {
        "email": True,
        "push": True,
        "digest": "DAILY",
    }

    response = client.put(
        "/notifications/preferences", json={"push": False, "digest": "weekly"}, headers=member
    )
    assert response.json() == {"email": True, "push": False, "digest": "WEEKLY"}

    created = _create(client, auth_headers("organizer"), channels=["PUSH"])
    assert created["channels"] == ["in-app"]


def test_push_subscription_endpoints(client: TestClient, auth_headers, push_sender) -> None:
    member = auth_headers("member-1")
    subscription = {
        "endpoint": "https://push.example.com/member-1",
        "expirationTime": None,
        "keys": {"p256dh": "p256", "auth": "secret"},
    }

    assert client.get("/notifications/push", headers=member).json() == {
        "vapidPublicKey": "test-vapid-public-key"
    }
    assert client.post("/notifications/push", json=subscription, headers=member).json() == {
        "success": True
    }
    assert client.post("/notifications/push", json=subscription, headers=member).status_code == 200

    _create(client, auth_headers("organizer"), channels=["PUSH"])
    assert push_sender.endpoints == ["https://push.example.com/member-1"]

    response = client.request(
        "DELETE", "/notifications/push", json={"endpoint": subscription["endpoint"]}, headers=member
    )
    assert response.json() == {"success": True}
    response = client.request(
        "DELETE", "/notifications/push", json={"endpoint": subscription["endpoint"]}, headers=member
    )
    assert response.status_code == 200


def test_health_reports_cache(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok", "cache": "ok"}
