import uuid

from cashnib.api.auth import extract_bearer_token, resolve_identity_from_headers
from cashnib.db import models
from cashnib.utils.runtime import DEV_USER_EMAIL


def test_extract_bearer_token():
    assert extract_bearer_token("Bearer abc.def") == "abc.def"
    assert extract_bearer_token("bearer   xyz ") == "xyz"
    assert extract_bearer_token("Basic abc") is None
    assert extract_bearer_token("Bearer ") is None
    assert extract_bearer_token(None) is None


def test_resolve_identity_prefers_auth_request_headers():
    name, email = resolve_identity_from_headers(
        x_auth_request_user="alice",
        x_auth_request_email=" Alice@Example.com ",
        x_forwarded_user="bob",
        x_forwarded_email="bob@example.com",
    )
    assert name == "alice"
    assert email == "alice@example.com"


def test_unauthenticated_request_rejected(client):
    r = client.get("/auth/profile")
    assert r.status_code == 401
    assert r.json()["detail"] == "Authentication required"


def test_invalid_bearer_token_rejected(client):
    r = client.get("/auth/profile", headers={"Authorization": "Bearer garbage"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid or expired token"


def test_expired_bearer_token_rejected(client, auth_headers):
    r = client.get("/auth/profile", headers=auth_headers(expires_in=-3600))
    assert r.status_code == 401


def test_bearer_token_without_email_rejected(client, auth_headers):
    r = client.get("/auth/profile", headers=auth_headers(email=""))
    assert r.status_code == 401


def test_bearer_token_provisions_user_once(client, auth_headers, db_session):
    subject = f"uid-{uuid.uuid4().hex[:8]}"
    headers = auth_headers("Grace@Example.com", subject=subject, name="Grace Hopper")
    first = client.get("/auth/profile", headers=headers)
    second = client.get("/auth/profile", headers=headers)
    assert first.status_code == 200
    body = first.json()
    assert body["email"] == "grace@example.com"
    assert body["display_name"] == "Grace Hopper"
    assert body["email_verified"] is True
    assert body["auth_provider"] == "secret"
    assert second.json()["id"] == body["id"]

    user = db_session.query(models.User).filter(models.User.email == "grace@example.com").one()
    assert user.external_subject == subject


def test_proxy_headers_then_token_share_account(client, auth_headers, proxy_headers):
    email = f"shared_{uuid.uuid4().hex[:6]}@example.com"
    via_proxy = client.get("/auth/profile", headers=proxy_headers(email))
    via_token = client.get("/auth/profile", headers=auth_headers(email))
    assert via_proxy.status_code == 200
    assert via_token.status_code == 200
    assert via_proxy.json()["id"] == via_token.json()["id"]
    assert via_token.json()["auth_provider"] == "oauth2-proxy"


def test_admin_emails_grant_superadmin(client, auth_headers, monkeypatch):
    monkeypatch.setenv("ADMIN_EMAILS", "boss@example.com, other@example.com")
    r = client.get("/auth/profile", headers=auth_headers("boss@example.com"))
    assert r.json()["is_superadmin"] is True
    r = client.get("/auth/profile", headers=auth_headers("worker@example.com"))
    assert r.json()["is_superadmin"] is False


def test_dev_mode_uses_development_user(client, monkeypatch):
    monkeypatch.setenv("DEV_MODE", "true")
    monkeypatch.setenv("APP_BASE_URL", "http://localhost:8000")
    r = client.get("/auth/profile")
    assert r.status_code == 200
    assert r.json()["email"] == DEV_USER_EMAIL


def test_superadmin_route_forbidden_for_regular_user(client, auth_headers):
    r = client.delete("/notifications/cleanup/expired", headers=auth_headers())
    assert r.status_code == 403
    assert r.json()["detail"] == "Forbidden"
