import uuid
from datetime import date, datetime, timedelta, timezone


def test_health_endpoint(client):
    r = client.get("/health")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "OK"
    assert body["uptime"] >= 0
    assert "timestamp" in body
    assert "environment" in body


def test_build_info(client, monkeypatch):
    monkeypatch.setenv("BUILD_SHA", "abc123")
    monkeypatch.setenv("VERSION", "1.2.3")
    monkeypatch.delenv("IMAGE_TAG", raising=False)
    body = client.get("/build-info").json()
    assert body["build_sha"] == "abc123"
    assert body["version"] == "1.2.3"
    assert body["image_tag"] is None
    assert body["service_name"] == "cashnib-service"
    assert {f["key"] for f in body["features"]} >= {"budget_alerts_enabled", "transaction_import_enabled"}


def test_audit_log_records_mutations(client, auth_headers):
    headers = auth_headers()
    r = client.post(
        "/transactions/",
        json={"amount": 5, "category": "Other", "date": date.today().isoformat()},
        headers=headers,
    )
    tx_id = r.json()["id"]
    client.delete(f"/transactions/{tx_id}", headers=headers)

    logs = client.get("/audits/", headers=headers).json()
    actions = [entry["action_type"] for entry in logs]
    assert actions == ["transaction_delete", "transaction_create"]
    assert all(entry["target_id"] == tx_id for entry in logs)
    assert all(entry["status"] == "success" for entry in logs)

    filtered = client.get("/audits/?action_type=transaction_create", headers=headers).json()
    assert len(filtered) == 1


def test_audit_logs_of_other_users_need_superadmin(client, auth_headers, monkeypatch):
    alice_headers = auth_headers()
    alice = client.get("/auth/profile", headers=alice_headers).json()
    client.post("/auth/logout", headers=alice_headers)

    r = client.get(f"/audits/?user_id={alice['id']}", headers=auth_headers())
    assert r.status_code == 403

    admin_email = f"admin_{uuid.uuid4().hex[:6]}@example.com"
    monkeypatch.setenv("ADMIN_EMAILS", admin_email)
    r = client.get(f"/audits/?user_id={alice['id']}", headers=auth_headers(admin_email))
    assert r.status_code == 200
    assert [entry["action_type"] for entry in r.json()] == ["logout"]


def test_audit_log_filters_by_target_status_and_time(client, auth_headers):
    headers = auth_headers()
    today = date.today().isoformat()
    first = client.post("/transactions/", json={"amount": 5, "category": "Other", "date": today}, headers=headers).json()
    second = client.post("/transactions/", json={"amount": 7, "category": "Other", "date": today}, headers=headers).json()
    client.put(f"/transactions/{first['id']}", json={"amount": 6}, headers=headers)

    history = client.get(
        "/audits/", params={"target_type": "transaction", "target_id": first["id"]}, headers=headers
    ).json()
    assert [entry["action_type"] for entry in history] == ["transaction_update", "transaction_create"]
    assert all(entry["target_id"] != second["id"] for entry in history)

    assert client.get("/audits/", params={"status": "failure"}, headers=headers).json() == []
    assert client.get("/audits/", params={"status": "bogus"}, headers=headers).status_code == 422
    future = (datetime.now(timezone.utc) + timedelta(days=1)).isoformat()
    assert client.get("/audits/", params={"since": future}, headers=headers).json() == []
