import uuid
from datetime import timedelta

from cashnib.db import models
from cashnib.db.models.base import now_utc


def _create(client, headers, **overrides):
    payload = {"title": "Hello", "message": "World"}
    payload.update(overrides)
    r = client.post("/notifications/", json=payload, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


def test_notifications_require_auth(client):
    assert client.get("/notifications/").status_code == 401
    assert client.get("/notifications/unread-count").status_code == 401


def test_create_and_list_notifications(client, auth_headers):
    headers = auth_headers()
    first = _create(client, headers, title="First", metadata={"k": "v"}, priority="high")
    assert first["type"] == "general"
    assert first["is_read"] is False
    assert first["metadata"] == {"k": "v"}
    assert first["expires_at"] is not None
    _create(client, headers, title="Second")

    r = client.get("/notifications/", headers=headers)
    body = r.json()
    assert [n["title"] for n in body["notifications"]] == ["Second", "First"]
    assert body["unread_count"] == 2
    assert body["total_count"] == 2

    r = client.get("/notifications/?limit=1", headers=headers)
    assert len(r.json()["notifications"]) == 1
    assert r.json()["total_count"] == 2
    assert client.get("/notifications/?limit=0", headers=headers).status_code == 422


def test_create_notification_validation(client, auth_headers):
    headers = auth_headers()
    assert client.post("/notifications/", json={"title": "", "message": "x"}, headers=headers).status_code == 422
    assert client.post(
        "/notifications/", json={"title": "x", "message": "y", "type": "spam"}, headers=headers
    ).status_code == 422


def test_mark_read_and_unread_count(client, auth_headers):
    headers = auth_headers()
    note = _create(client, headers)
    _create(client, headers)
    assert client.get("/notifications/unread-count", headers=headers).json() == {"unread_count": 2}

    assert client.post(f"/notifications/{note['id']}/read", headers=headers).status_code == 204
    # Marking twice is harmless
    assert client.post(f"/notifications/{note['id']}/read", headers=headers).status_code == 204
    assert client.get("/notifications/unread-count", headers=headers).json() == {"unread_count": 1}

    unread = client.get("/notifications/?unread_only=true", headers=headers).json()
    assert len(unread["notifications"]) == 1
    assert unread["notifications"][0]["id"] != note["id"]

    read = next(n for n in client.get("/notifications/", headers=headers).json()["notifications"]
                if n["id"] == note["id"])
    assert read["is_read"] is True
    assert read["read_at"] is not None


def test_mark_read_other_users_notification_is_404(client, auth_headers):
    owner = auth_headers()
    note = _create(client, owner)
    assert client.post(f"/notifications/{note['id']}/read", headers=auth_headers()).status_code == 404
    assert client.post(f"/notifications/{uuid.uuid4()}/read", headers=owner).status_code == 404


def test_mark_all_read(client, auth_headers):
    headers = auth_headers()
    other = auth_headers()
    for _ in range(3):
        _create(client, headers)
    _create(client, other)

    r = client.post("/notifications/read-all", headers=headers)
    assert r.json() == {"updated": 3}
    assert client.get("/notifications/unread-count", headers=headers).json()["unread_count"] == 0
    assert client.get("/notifications/unread-count", headers=other).json()["unread_count"] == 1
    assert client.post("/notifications/read-all", headers=headers).json() == {"updated": 0}


def test_expired_notifications_hidden_and_cleaned_up(client, auth_headers, db_session, monkeypatch):
    headers = auth_headers()
    fresh = _create(client, headers, title="Fresh")
    stale = _create(client, headers, title="Stale")

    row = db_session.get(models.Notification, uuid.UUID(stale["id"]))
    row.expires_at = now_utc() - timedelta(days=1)
    db_session.commit()

    body = client.get("/notifications/", headers=headers).json()
    assert [n["id"] for n in body["notifications"]] == [fresh["id"]]
    assert body["unread_count"] == 1
    assert body["total_count"] == 1

    admin_email = f"admin_{uuid.uuid4().hex[:6]}@example.com"
    monkeypatch.setenv("ADMIN_EMAILS", admin_email)
    r = client.delete("/notifications/cleanup/expired", headers=auth_headers(admin_email))
    assert r.status_code == 200
    assert r.json() == {"deleted": 1}

    db_session.expire_all()
    assert db_session.query(models.Notification).count() == 1
