import csv
import io
import json
import uuid
from datetime import date, timedelta

from cashnib.services.transaction_service import DEFAULT_CATEGORIES


def _tx(client, headers, **overrides):
    payload = {
        "amount": 10.0,
        "category": "Food & Dining",
        "date": date.today().isoformat(),
        "type": "expense",
    }
    payload.update(overrides)
    r = client.post("/transactions/", json=payload, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


def test_create_and_get_transaction(client, auth_headers):
    headers = auth_headers()
    created = _tx(
        client,
        headers,
        amount=42.5,
        description="Dinner",
        tags=["friends"],
        location={"latitude": 1.5, "longitude": 2.5, "address": "Main St"},
    )
    assert created["is_manual"] is True
    assert created["is_income"] is False
    assert created["location"]["address"] == "Main St"

    r = client.get(f"/transactions/{created['id']}", headers=headers)
    assert r.status_code == 200
    assert r.json()["amount"] == 42.5
    assert r.json()["tags"] == ["friends"]


def test_create_transaction_validation(client, auth_headers):
    headers = auth_headers()
    today = date.today().isoformat()
    bad = [
        {"amount": 0, "category": "Food", "date": today},
        {"amount": -3, "category": "Food", "date": today},
        {"amount": 5, "category": "", "date": today},
        {"amount": 5, "category": "Food", "date": today, "type": "refund"},
        {"amount": 5, "category": "Food"},
    ]
    for payload in bad:
        assert client.post("/transactions/", json=payload, headers=headers).status_code == 422


def test_transactions_are_scoped_to_owner(client, auth_headers):
    owner = auth_headers()
    intruder = auth_headers()
    created = _tx(client, owner)
    tx_id = created["id"]

    assert client.get(f"/transactions/{tx_id}", headers=intruder).status_code == 404
    assert client.put(f"/transactions/{tx_id}", json={"amount": 1}, headers=intruder).status_code == 404
    assert client.delete(f"/transactions/{tx_id}", headers=intruder).status_code == 404
    assert client.get("/transactions/", headers=intruder).json()["pagination"]["total"] == 0


def test_update_and_delete_transaction(client, auth_headers):
    headers = auth_headers()
    created = _tx(client, headers)
    r = client.put(
        f"/transactions/{created['id']}",
        json={"amount": 99.99, "type": "income", "category": "Income"},
        headers=headers,
    )
    assert r.status_code == 200
    assert r.json()["amount"] == 99.99
    assert r.json()["is_income"] is True

    assert client.delete(f"/transactions/{created['id']}", headers=headers).status_code == 204
    assert client.get(f"/transactions/{created['id']}", headers=headers).status_code == 404
    assert client.delete(f"/transactions/{uuid.uuid4()}", headers=headers).status_code == 404


def test_list_filters_sorting_and_pagination(client, auth_headers):
    headers = auth_headers()
    base = date.today() - timedelta(days=30)
    for i in range(5):
        _tx(
            client,
            headers,
            amount=10 * (i + 1),
            date=(base + timedelta(days=i)).isoformat(),
            description=f"Coffee shop {i}",
            category="Food & Dining",
        )
    _tx(client, headers, amount=1000, type="income", category="Income", description="Salary",
        date=base.isoformat())

    r = client.get("/transactions/?limit=2&page=1", headers=headers)
    body = r.json()
    assert body["pagination"] == {
        "page": 1, "limit": 2, "total": 6, "total_pages": 3, "has_next": True, "has_prev": False,
    }
    # Default sort is date descending
    assert body["transactions"][0]["amount"] == 50

    r = client.get("/transactions/?limit=2&page=3", headers=headers)
    assert r.json()["pagination"]["has_next"] is False
    assert r.json()["pagination"]["has_prev"] is True

    r = client.get("/transactions/?type=income", headers=headers)
    assert [t["description"] for t in r.json()["transactions"]] == ["Salary"]

    r = client.get("/transactions/?min_amount=20&max_amount=40&sort_by=amount&sort_order=asc", headers=headers)
    assert [t["amount"] for t in r.json()["transactions"]] == [20, 30, 40]

    r = client.get("/transactions/?search=COFFEE%20SHOP%203", headers=headers)
    assert [t["amount"] for t in r.json()["transactions"]] == [40]

    start = (base + timedelta(days=1)).isoformat()
    end = (base + timedelta(days=2)).isoformat()
    r = client.get(f"/transactions/?start_date={start}&end_date={end}", headers=headers)
    assert sorted(t["amount"] for t in r.json()["transactions"]) == [20, 30]

    r = client.get("/transactions/?category=Income", headers=headers)
    assert r.json()["pagination"]["total"] == 1


def test_list_rejects_bad_query_params(client, auth_headers):
    headers = auth_headers()
    assert client.get("/transactions/?limit=500", headers=headers).status_code == 422
    assert client.get("/transactions/?sort_by=description", headers=headers).status_code == 422
    assert client.get("/transactions/?start_date=yesterday", headers=headers).status_code == 422


def test_categories_include_defaults_and_custom(client, auth_headers):
    headers = auth_headers()
    _tx(client, headers, category="Pets")
    _tx(client, headers, category="Shopping")
    r = client.get("/transactions/categories/list", headers=headers)
    categories = r.json()["categories"]
    assert categories[: len(DEFAULT_CATEGORIES)] == DEFAULT_CATEGORIES
    assert categories[len(DEFAULT_CATEGORIES):] == ["Pets"]


def test_categorize_endpoint(client, auth_headers):
    headers = auth_headers()
    r = client.post("/transactions/categorize", json={"description": "UBER *TRIP", "amount": 12}, headers=headers)
    assert r.json() == {"category": "Transportation"}
    r = client.post("/transactions/categorize", json={"description": "mystery", "amount": 1}, headers=headers)
    assert r.json() == {"category": "Other"}


def test_stats_summary(client, auth_headers):
    headers = auth_headers()
    today = date.today().isoformat()
    _tx(client, headers, amount=100, type="income", category="Income", date=today)
    _tx(client, headers, amount=30, date=today)
    _tx(client, headers, amount=20, date=today)

    r = client.get("/transactions/stats/summary?period=month", headers=headers)
    assert r.status_code == 200
    body = r.json()
    assert body["total_income"] == 100
    assert body["total_expenses"] == 50
    assert body["net_income"] == 50
    assert body["transaction_count"] == 3
    assert body["average_transaction"] == 50

    assert client.get("/transactions/stats/summary?period=decade", headers=headers).status_code == 422


def test_recent_transactions(client, auth_headers):
    headers = auth_headers()
    for days_ago in (5, 1, 3):
        _tx(client, headers, date=(date.today() - timedelta(days=days_ago)).isoformat(), amount=days_ago)
    r = client.get("/transactions/recent/list?limit=2", headers=headers)
    assert [t["amount"] for t in r.json()] == [1, 3]


def test_export_csv_and_json(client, auth_headers):
    headers = auth_headers()
    _tx(client, headers, amount=12.34, description="Lunch", tags=["work", "team"])
    _tx(client, headers, amount=5, category="Transportation", description="Bus")

    r = client.post("/transactions/export", json={"format": "csv"}, headers=headers)
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/csv")
    assert "attachment; filename=" in r.headers["content-disposition"]
    rows = list(csv.DictReader(io.StringIO(r.text)))
    assert len(rows) == 2
    lunch = next(row for row in rows if row["description"] == "Lunch")
    assert lunch["tags"] == "work;team"
    assert lunch["amount"] == "12.34"

    r = client.post(
        "/transactions/export",
        json={"format": "json", "categories": ["Transportation"]},
        headers=headers,
    )
    assert r.headers["content-type"].startswith("application/json")
    data = json.loads(r.text)
    assert data["count"] == 1
    assert data["transactions"][0]["description"] == "Bus"

    assert client.post("/transactions/export", json={"format": "pdf"}, headers=headers).status_code == 422


def test_import_counts_imported_failed_and_duplicates(client, auth_headers):
    headers = auth_headers()
    today = date.today().isoformat()
    _tx(client, headers, amount=15, description="Existing", date=today)
    rows = [
        {"amount": 15, "category": "Food & Dining", "description": "Existing", "date": today},
        {"amount": 8, "category": "Transportation", "description": "Train", "date": today},
        {"amount": -1, "category": "Food", "date": today},
        {"category": "Food", "date": today},
        {"amount": 8, "category": "Transportation", "description": "Train", "date": today},
    ]
    r = client.post("/transactions/import", json={"transactions": rows}, headers=headers)
    assert r.status_code == 200
    body = r.json()
    assert body["imported"] == 1
    assert body["failed"] == 2
    assert body["duplicates"] == 2
    assert [e["index"] for e in body["errors"]] == [2, 3]

    listed = client.get("/transactions/?search=train", headers=headers).json()["transactions"]
    assert len(listed) == 1
    assert listed[0]["is_manual"] is False


def test_import_disabled_by_feature_flag(client, auth_headers, monkeypatch):
    from cashnib.utils.feature_flags import refresh_feature_flag_cache

    monkeypatch.setenv("FEATURE_TRANSACTION_IMPORT_ENABLED", "false")
    refresh_feature_flag_cache()
    r = client.post("/transactions/import", json={"transactions": []}, headers=auth_headers())
    assert r.status_code == 403
    assert r.json()["detail"] == "Transaction import is disabled"


def test_update_rejects_null_for_required_fields(client, auth_headers):
    headers = auth_headers()
    created = _tx(client, headers, description="Lunch")
    for field in ("amount", "category", "date", "type"):
        r = client.put(f"/transactions/{created['id']}", json={field: None}, headers=headers)
        assert r.status_code == 422, field

    unchanged = client.get(f"/transactions/{created['id']}", headers=headers).json()
    assert unchanged["amount"] == 10.0
    assert unchanged["category"] == "Food & Dining"

    # optional columns may still be cleared
    r = client.put(f"/transactions/{created['id']}", json={"description": None}, headers=headers)
    assert r.status_code == 200
    assert r.json()["description"] is None
