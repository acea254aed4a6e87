import uuid
from datetime import date, timedelta
from unittest.mock import patch

import pytest

from cashnib.db import models, schemas
from cashnib.db.repositories import transactions as transaction_repo
from cashnib.db.repositories import users as user_repo
from cashnib.services import transaction_service
from cashnib.services.notification_service import TYPE_TRANSACTION_ANOMALY


@pytest.mark.parametrize(
    "description,expected",
    [
        ("Whole Foods grocery run", "Food & Dining"),
        ("Shell gas station", "Transportation"),
        ("Amazon order", "Shopping"),
        ("Netflix subscription", "Entertainment"),
        ("Monthly internet", "Bills & Utilities"),
        ("CVS Pharmacy", "Healthcare"),
        ("Online course", "Education"),
        ("Hilton hotel", "Travel"),
        ("ACME payroll", "Income"),
        ("", "Other"),
    ],
)
def test_categorize_keyword_rules(description, expected):
    assert transaction_service.categorize(description, 10) == expected


def _user(db):
    return user_repo.upsert_identity_user(db, email=f"svc_{uuid.uuid4().hex[:8]}@example.com")


def _expense(db, user_id, amount, on=None, category="Food & Dining"):
    return transaction_repo.create_transaction(
        db,
        user_id,
        schemas.TransactionCreate(amount=amount, category=category, date=on or date.today()),
    )


def test_anomaly_requires_enough_history(db_session):
    user = _user(db_session)
    for _ in range(4):
        _expense(db_session, user.id, 10)
    big = _expense(db_session, user.id, 500)
    assert transaction_service.check_anomaly(db_session, big) is None


def test_anomaly_flags_large_expense(db_session):
    user = _user(db_session)
    for amount in (10, 12, 8, 10, 10):
        _expense(db_session, user.id, amount)
    normal = _expense(db_session, user.id, 25)
    assert transaction_service.check_anomaly(db_session, normal) is None

    big = _expense(db_session, user.id, 200)
    note = transaction_service.check_anomaly(db_session, big)
    assert note is not None
    assert note.type == TYPE_TRANSACTION_ANOMALY
    assert note.metadata_json["transaction_id"] == str(big.id)


def test_anomaly_ignores_history_outside_lookback(db_session):
    user = _user(db_session)
    old = date.today() - timedelta(days=transaction_service.ANOMALY_LOOKBACK_DAYS + 10)
    for _ in range(6):
        _expense(db_session, user.id, 10, on=old)
    big = _expense(db_session, user.id, 500)
    assert transaction_service.check_anomaly(db_session, big) is None


def test_anomaly_respects_settings_switch(db_session):
    from cashnib.services import settings_service

    user = _user(db_session)
    settings_service.update_user_settings(
        db_session,
        user.id,
        schemas.AppSettingsUpdate(notifications={"transaction_anomalies": False}),
    )
    for _ in range(5):
        _expense(db_session, user.id, 10)
    big = _expense(db_session, user.id, 500)
    assert transaction_service.check_anomaly(db_session, big) is None
    assert db_session.query(models.Notification).count() == 0


def test_anomaly_failure_does_not_fail_transaction_create(client, auth_headers):
    headers = auth_headers()
    with patch(
        "cashnib.services.transaction_service.check_anomaly",
        side_effect=RuntimeError("boom"),
    ):
        r = client.post(
            "/transactions/",
            json={"amount": 10, "category": "Food & Dining", "date": date.today().isoformat()},
            headers=headers,
        )
    assert r.status_code == 201


def test_anomaly_notification_created_through_api(client, auth_headers):
    headers = auth_headers()
    today = date.today().isoformat()
    for _ in range(5):
        client.post("/transactions/", json={"amount": 10, "category": "Travel", "date": today}, headers=headers)
    client.post("/transactions/", json={"amount": 400, "category": "Travel", "date": today}, headers=headers)
    notes = client.get("/notifications/", headers=headers).json()["notifications"]
    assert [n["type"] for n in notes] == ["transaction_anomaly"]
