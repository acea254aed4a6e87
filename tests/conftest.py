import uuid
from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi.testclient import TestClient

from cashnib.db import models
from cashnib.db.database import engine, SessionLocal
from cashnib.services.identity_service import reset_identity_verifier_for_tests
from cashnib.services.price_service import reset_price_service_for_tests
from cashnib.utils.feature_flags import refresh_feature_flag_cache

TEST_JWT_SECRET = "cashnib-test-secret-0123456789abcdef"

_ISOLATED_ENV = (
    "IDP_AUDIENCE",
    "IDP_ISSUER",
    "IDP_PROJECT_ID",
    "IDP_JWKS_URL",
    "DEV_MODE",
    "APP_BASE_URL",
    "ALLOW_DEV_MODE",
    "ADMIN_EMAILS",
    "PRICE_PROVIDER",
    "PRICE_API_BASE",
    "PRICE_API_KEY",
    "BUDGET_ALERT_THRESHOLD",
    "INVESTMENT_ALERT_PCT",
    "FEATURE_BUDGET_ALERTS_ENABLED",
    "FEATURE_GOAL_MILESTONES_ENABLED",
    "FEATURE_TRANSACTION_ANOMALIES_ENABLED",
    "FEATURE_TRANSACTION_IMPORT_ENABLED",
)


def _reset_singletons():
    reset_identity_verifier_for_tests()
    reset_price_service_for_tests()
    refresh_feature_flag_cache()


@pytest.fixture(autouse=True)
def _test_env(monkeypatch):
    """Bearer tokens are HS256-signed with a fixed secret in every test."""
    for name in _ISOLATED_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("IDP_VERIFIER", "secret")
    monkeypatch.setenv("IDP_JWT_SECRET", TEST_JWT_SECRET)
    _reset_singletons()
    yield
    _reset_singletons()


@pytest.fixture
def db_session():
    models.Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        with engine.begin() as conn:
            for table in reversed(models.Base.metadata.sorted_tables):
                conn.execute(table.delete())


@pytest.fixture
def client(db_session):
    from cashnib.api.main import app
    return TestClient(app)


def make_token(
    email,
    subject=None,
    name=None,
    expires_in=3600,
    secret=TEST_JWT_SECRET,
    **claims,
):
    now = datetime.now(timezone.utc)
    payload = {
        "sub": subject or f"uid-{uuid.uuid4().hex[:12]}",
        "email": email,
        "email_verified": True,
        "iat": now,
        "exp": now + timedelta(seconds=expires_in),
        **claims,
    }
    if name:
        payload["name"] = name
    return jwt.encode(payload, secret, algorithm="HS256")


@pytest.fixture
def auth_headers():
    """Return a factory producing bearer headers for a (new) user."""
    def _make(email=None, **kwargs):
        if email is None:
            email = f"user_{uuid.uuid4().hex[:8]}@example.com"
        return {"Authorization": f"Bearer {make_token(email, **kwargs)}"}
    return _make


@pytest.fixture
def proxy_headers():
    def _make(email=None, user="tester"):
        email = email or f"proxy_{uuid.uuid4().hex[:8]}@example.com"
        return {"x-auth-request-user": user, "x-auth-request-email": email}
    return _make
