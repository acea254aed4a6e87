"""
Authentication helpers and identity resolution.

Parses proxy headers and bearer tokens, normalizes emails, and upserts users
while supporting superadmin elevation via environment configuration.
"""
import os
from typing import Optional, Tuple
from sqlalchemy.orm import Session

from cashnib.db import models
from cashnib.db.repositories import users as user_repo


def _normalize_email(email: Optional[str]) -> Optional[str]:
    if not email:
        return None
    return email.strip().lower()


def _normalize_list_env(var_name: str) -> set:
    raw = os.getenv(var_name, "")
    values = set()
    for entry in raw.split(","):
        cleaned = entry.strip().strip('"').strip("'")
        if cleaned:
            values.add(cleaned.lower())
    return values


def _admin_emails() -> set:
    return _normalize_list_env("ADMIN_EMAILS")


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def resolve_identity_from_headers(
    x_auth_request_user: Optional[str],
    x_auth_request_email: Optional[str],
    x_forwarded_user: Optional[str],
    x_forwarded_email: Optional[str],
) -> Tuple[Optional[str], Optional[str]]:
    user = x_auth_request_user or x_forwarded_user
    email = _normalize_email(x_auth_request_email or x_forwarded_email)
    return user, email


def get_or_create_user(
    db: Session,
    email: str,
    display_name: Optional[str] = None,
    *,
    subject: Optional[str] = None,
    email_verified: bool = False,
    provider: Optional[str] = None,
) -> models.User:
    email = _normalize_email(email)
    return user_repo.upsert_identity_user(
        db,
        email=email,
        subject=subject,
        display_name=display_name,
        email_verified=email_verified,
        provider=provider,
        make_superadmin=email in _admin_emails(),
    )
