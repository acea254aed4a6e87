from cashnib.db import models


def test_settings_default_created_lazily(client, auth_headers, db_session):
    headers = auth_headers()
    assert db_session.query(models.UserSettings).count() == 0
    r = client.get("/settings/", headers=headers)
    assert r.status_code == 200
    body = r.json()
    assert body["currency"] == "USD"
    assert body["theme"] == "light"
    assert body["notifications"]["budget_alerts"] is True
    assert body["notifications"]["market_news"] is False
    assert body["security"]["auto_lock_timeout"] == 5
    db_session.expire_all()
    assert db_session.query(models.UserSettings).count() == 1


def test_update_settings_merges_sections(client, auth_headers):
    headers = auth_headers()
    r = client.put(
        "/settings/",
        json={"theme": "dark", "notifications": {"market_news": True}},
        headers=headers,
    )
    assert r.status_code == 200
    body = r.json()
    assert body["theme"] == "dark"
    assert body["notifications"]["market_news"] is True
    assert body["notifications"]["budget_alerts"] is True

    r = client.put("/settings/", json={"notifications": {"budget_alerts": False}}, headers=headers)
    notifications = r.json()["notifications"]
    assert notifications == {
        "budget_alerts": False,
        "goal_milestones": True,
        "transaction_anomalies": True,
        "investment_updates": True,
        "market_news": True,
    }
    assert client.get("/settings/", headers=headers).json()["theme"] == "dark"


def test_update_settings_validation(client, auth_headers):
    headers = auth_headers()
    assert client.put("/settings/", json={"theme": "neon"}, headers=headers).status_code == 422
    assert client.put("/settings/", json={"currency": "DOLLARS"}, headers=headers).status_code == 422
    assert client.put(
        "/settings/", json={"security": {"auto_lock_timeout": 0}}, headers=headers
    ).status_code == 422


def test_reset_settings(client, auth_headers):
    headers = auth_headers()
    client.put("/settings/", json={"currency": "EUR", "privacy": {"data_sharing": True}}, headers=headers)
    r = client.post("/settings/reset", headers=headers)
    assert r.status_code == 200
    assert r.json()["currency"] == "USD"
    assert r.json()["privacy"]["data_sharing"] is False


def test_settings_are_per_user(client, auth_headers):
    alice = auth_headers()
    bob = auth_headers()
    client.put("/settings/", json={"language": "fr"}, headers=alice)
    assert client.get("/settings/", headers=bob).json()["language"] == "en"
