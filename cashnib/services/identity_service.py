"""Bearer-token verification against the external identity provider.

The service never issues tokens. It validates ID tokens minted by the IdP,
either RS256 against a JWKS endpoint (Firebase secure-token by default) or
HS256 with a shared secret for self-hosted providers and local testing.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

import jwt

logger = logging.getLogger("cashnib.auth")

_FIREBASE_JWKS_URL = (
    "https://www.googleapis.com/service_accounts/v1/jwk/securetoken@system.gserviceaccount.com"
)


class InvalidTokenError(Exception):
    """Raised when a bearer token cannot be verified."""


@dataclass(frozen=True)
class IdentityClaims:
    subject: str
    email: Optional[str]
    name: Optional[str] = None
    email_verified: bool = False
    provider: Optional[str] = None


@dataclass
class IdentityConfig:
    verifier: str
    jwks_url: Optional[str] = None
    audience: Optional[str] = None
    issuer: Optional[str] = None
    secret: Optional[str] = None
    leeway: int = 30

    @classmethod
    def from_env(cls) -> "IdentityConfig":
        verifier = (os.getenv("IDP_VERIFIER") or "disabled").strip().lower()
        project_id = os.getenv("IDP_PROJECT_ID")
        leeway_raw = os.getenv("IDP_LEEWAY_SECONDS", "30")
        leeway = int(leeway_raw) if leeway_raw.isdigit() else 30

        if verifier == "jwks":
            return cls(
                verifier=verifier,
                jwks_url=os.getenv("IDP_JWKS_URL") or _FIREBASE_JWKS_URL,
                audience=os.getenv("IDP_AUDIENCE") or project_id,
                issuer=os.getenv("IDP_ISSUER") or (
                    f"https://securetoken.google.com/{project_id}" if project_id else None
                ),
                leeway=leeway,
            )
        if verifier == "secret":
            return cls(
                verifier=verifier,
                secret=os.getenv("IDP_JWT_SECRET"),
                audience=os.getenv("IDP_AUDIENCE"),
                issuer=os.getenv("IDP_ISSUER"),
                leeway=leeway,
            )
        if verifier in {"disabled", "none", "off", ""}:
            return cls(verifier="disabled")
        logger.warning("Unknown IDP_VERIFIER '%s'; bearer tokens disabled.", verifier)
        return cls(verifier="disabled")

    @property
    def is_enabled(self) -> bool:
        if self.verifier == "disabled":
            return False
        if self.verifier == "secret" and not self.secret:
            logger.warning("IDP_JWT_SECRET must be set for the secret verifier; disabling bearer tokens.")
            return False
        return True


class IdentityVerifier:
    """Decode and validate IdP tokens according to an `IdentityConfig`."""

    def __init__(self, config: Optional[IdentityConfig] = None) -> None:
        self.config = config or IdentityConfig.from_env()
        self._jwks_client: Optional[jwt.PyJWKClient] = None
        if self.config.is_enabled and self.config.verifier == "jwks":
            self._jwks_client = jwt.PyJWKClient(self.config.jwks_url, cache_keys=True)

    @property
    def is_enabled(self) -> bool:
        return self.config.is_enabled

    def _decode(self, token: str) -> Dict[str, Any]:
        options = {"require": ["sub", "exp"], "verify_aud": bool(self.config.audience)}
        kwargs: Dict[str, Any] = {
            "audience": self.config.audience,
            "issuer": self.config.issuer,
            "leeway": self.config.leeway,
            "options": options,
        }
        if self.config.verifier == "jwks":
            signing_key = self._jwks_client.get_signing_key_from_jwt(token)
            return jwt.decode(token, signing_key.key, algorithms=["RS256"], **kwargs)
        return jwt.decode(token, self.config.secret, algorithms=["HS256"], **kwargs)

    def verify(self, token: str) -> IdentityClaims:
        if not self.is_enabled:
            raise InvalidTokenError("Bearer tokens are not accepted")
        try:
            payload = self._decode(token)
        except jwt.ExpiredSignatureError as exc:
            raise InvalidTokenError("Token expired") from exc
        except (jwt.InvalidTokenError, jwt.PyJWKClientError) as exc:
            raise InvalidTokenError(str(exc)) from exc

        subject = payload.get("sub") or payload.get("user_id")
        if not subject:
            raise InvalidTokenError("Token has no subject")
        firebase = payload.get("firebase") or {}
        return IdentityClaims(
            subject=str(subject),
            email=(payload.get("email") or None),
            name=payload.get("name"),
            email_verified=bool(payload.get("email_verified", False)),
            provider=firebase.get("sign_in_provider") or payload.get("provider") or self.config.verifier,
        )


_identity_verifier: Optional[IdentityVerifier] = None


def get_identity_verifier() -> IdentityVerifier:
    global _identity_verifier
    if _identity_verifier is None:
        _identity_verifier = IdentityVerifier()
    return _identity_verifier


def reset_identity_verifier_for_tests() -> None:  # pragma: no cover - used in tests
    global _identity_verifier
    _identity_verifier = None


def verify_bearer_token(token: str) -> IdentityClaims:
    return get_identity_verifier().verify(token)
