from datetime import datetime, timedelta, timezone

import jwt
import pytest

from cashnib.services import identity_service
from cashnib.services.identity_service import (
    IdentityConfig,
    IdentityVerifier,
    InvalidTokenError,
    verify_bearer_token,
)

SECRET = "unit-secret-0123456789abcdef-0123456789"


def _token(secret=SECRET, **overrides):
    now = datetime.now(timezone.utc)
    payload = {
        "sub": "uid-123",
        "email": "ada@example.com",
        "name": "Ada Lovelace",
        "email_verified": True,
        "iat": now,
        "exp": now + timedelta(minutes=5),
    }
    payload.update(overrides)
    payload = {k: v for k, v in payload.items() if v is not None}
    return jwt.encode(payload, secret, algorithm="HS256")


def _verifier(**kwargs):
    return IdentityVerifier(IdentityConfig(verifier="secret", secret=SECRET, **kwargs))


def test_config_jwks_defaults_from_project_id(monkeypatch):
    monkeypatch.setenv("IDP_VERIFIER", "jwks")
    monkeypatch.setenv("IDP_PROJECT_ID", "cashnib-prod")
    config = IdentityConfig.from_env()
    assert config.verifier == "jwks"
    assert config.jwks_url.startswith("https://www.googleapis.com/")
    assert config.audience == "cashnib-prod"
    assert config.issuer == "https://securetoken.google.com/cashnib-prod"
    assert config.is_enabled


def test_config_unknown_verifier_disables(monkeypatch):
    monkeypatch.setenv("IDP_VERIFIER", "kerberos")
    config = IdentityConfig.from_env()
    assert config.verifier == "disabled"
    assert config.is_enabled is False


def test_config_secret_without_value_is_disabled(monkeypatch):
    monkeypatch.setenv("IDP_VERIFIER", "secret")
    monkeypatch.delenv("IDP_JWT_SECRET", raising=False)
    assert IdentityConfig.from_env().is_enabled is False


def test_verify_valid_token_returns_claims():
    claims = _verifier().verify(_token(firebase={"sign_in_provider": "google.com"}))
    assert claims.subject == "uid-123"
    assert claims.email == "ada@example.com"
    assert claims.name == "Ada Lovelace"
    assert claims.email_verified is True
    assert claims.provider == "google.com"


def test_verify_expired_token():
    expired = _token(exp=datetime.now(timezone.utc) - timedelta(hours=1))
    with pytest.raises(InvalidTokenError, match="expired"):
        _verifier().verify(expired)


def test_verify_wrong_signature():
    with pytest.raises(InvalidTokenError):
        _verifier().verify(_token(secret="someone-else-0123456789abcdef-0123456789"))


def test_verify_garbage_token():
    with pytest.raises(InvalidTokenError):
        _verifier().verify("not-a-jwt")


def test_verify_missing_subject():
    with pytest.raises(InvalidTokenError):
        _verifier().verify(_token(sub=None))


def test_verify_checks_audience_when_configured():
    verifier = _verifier(audience="cashnib-app")
    with pytest.raises(InvalidTokenError):
        verifier.verify(_token(aud="other-app"))
    assert verifier.verify(_token(aud="cashnib-app")).subject == "uid-123"


def test_disabled_verifier_rejects_everything():
    verifier = IdentityVerifier(IdentityConfig(verifier="disabled"))
    with pytest.raises(InvalidTokenError):
        verifier.verify(_token())


def test_module_level_verifier_reads_environment(monkeypatch):
    monkeypatch.setenv("IDP_VERIFIER", "secret")
    monkeypatch.setenv("IDP_JWT_SECRET", SECRET)
    identity_service.reset_identity_verifier_for_tests()
    assert verify_bearer_token(_token()).email == "ada@example.com"
