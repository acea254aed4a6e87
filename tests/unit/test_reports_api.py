from datetime import date

from cashnib.services import report_service
from cashnib.utils.periods import add_months, month_start


def _tx(client, headers, amount, category, type="expense", on=None):
    r = client.post(
        "/transactions/",
        json={"amount": amount, "category": category, "type": type,
              "date": (on or date.today()).isoformat()},
        headers=headers,
    )
    assert r.status_code == 201, r.text


def test_summary_current_month(client, auth_headers):
    headers = auth_headers()
    _tx(client, headers, 3000, "Income", type="income")
    _tx(client, headers, 600, "Bills & Utilities")
    _tx(client, headers, 300, "Food & Dining")
    _tx(client, headers, 100, "Transportation")
    _tx(client, headers, 50, "Other", type="transfer")

    r = client.get("/reports/summary", headers=headers)
    assert r.status_code == 200
    body = r.json()
    assert body["total_income"] == 3000
    assert body["total_expenses"] == 1000
    assert body["net_income"] == 2000
    assert [c["category"] for c in body["top_categories"]] == [
        "Bills & Utilities", "Food & Dining", "Transportation",
    ]
    assert body["top_categories"][0]["percentage"] == 60


def test_summary_top_categories_limited(client, auth_headers):
    headers = auth_headers()
    for i, category in enumerate(["A", "B", "C", "D", "E", "F", "G"]):
        _tx(client, headers, 10 + i, category)
    body = client.get("/reports/summary", headers=headers).json()
    assert len(body["top_categories"]) == report_service.TOP_CATEGORY_COUNT
    assert body["top_categories"][0]["category"] == "G"


def test_summary_rejects_inverted_range(client, auth_headers):
    r = client.get(
        "/reports/summary?start_date=2026-10-10&end_date=2026-10-01", headers=auth_headers()
    )
    assert r.status_code == 422


def test_spending_trend_is_zero_filled(client, auth_headers):
    headers = auth_headers()
    this_month = month_start(date.today())
    two_months_ago = add_months(this_month, -2)
    _tx(client, headers, 40, "Food & Dining")
    _tx(client, headers, 60, "Shopping", on=two_months_ago)
    _tx(client, headers, 500, "Income", type="income")

    r = client.get("/reports/spending?months=3", headers=headers)
    assert r.status_code == 200
    body = r.json()
    assert body["start_date"] == two_months_ago.isoformat()
    trend = body["monthly_trends"]
    assert [p["month"] for p in trend] == [
        two_months_ago.strftime("%Y-%m"),
        add_months(this_month, -1).strftime("%Y-%m"),
        this_month.strftime("%Y-%m"),
    ]
    assert [p["amount"] for p in trend] == [60, 0, 40]
    assert body["average_monthly"] == round(100 / 3, 2)
    assert {c["category"] for c in body["category_breakdown"]} == {"Food & Dining", "Shopping"}

    assert client.get("/reports/spending?months=0", headers=headers).status_code == 422
    assert client.get("/reports/spending?months=25", headers=headers).status_code == 422
