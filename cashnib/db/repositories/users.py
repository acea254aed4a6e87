"""
User repository functions.

Lookup and upsert of identity-provider users, profile updates, and account
removal together with every document the user owns.
"""
from __future__ import annotations

import uuid
from typing import Optional
from sqlalchemy.orm import Session

from cashnib.db import models, schemas


def get_user(db: Session, user_id: uuid.UUID):
    return db.query(models.User).filter(models.User.id == user_id).first()


def get_user_by_email(db: Session, email: str):
    return db.query(models.User).filter(models.User.email == email.strip().lower()).first()


def get_user_by_subject(db: Session, subject: str):
    return db.query(models.User).filter(models.User.external_subject == subject).first()


def _compose_display_name(first_name: Optional[str], last_name: Optional[str], fallback: Optional[str]) -> Optional[str]:
    parts = [p.strip() for p in (first_name, last_name) if p and p.strip()]
    return " ".join(parts) if parts else fallback


def upsert_identity_user(
    db: Session,
    *,
    email: str,
    subject: Optional[str] = None,
    display_name: Optional[str] = None,
    email_verified: bool = False,
    provider: Optional[str] = None,
    make_superadmin: bool = False,
):
    """Return the user for an authenticated identity, creating it on first sight.

    Matching is by IdP subject first, then by normalized email so that a user
    first seen through proxy headers keeps the same row once tokens arrive.
    """
    email_norm = email.strip().lower()
    user = get_user_by_subject(db, subject) if subject else None
    if user is None:
        user = get_user_by_email(db, email_norm)

    if user is None:
        user = models.User(
            email=email_norm,
            display_name=display_name or email_norm.split("@")[0],
            email_verified=bool(email_verified),
            auth_provider=provider,
            external_subject=subject,
            is_superadmin=bool(make_superadmin),
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    changed = False
    if subject and user.external_subject != subject:
        user.external_subject = subject
        changed = True
    if provider and not user.auth_provider:
        user.auth_provider = provider
        changed = True
    if email_verified and not user.email_verified:
        user.email_verified = True
        changed = True
    if not user.display_name and display_name:
        user.display_name = display_name
        changed = True
    if make_superadmin and not user.is_superadmin:
        user.is_superadmin = True
        changed = True
    if changed:
        db.commit()
        db.refresh(user)
    return user


def update_profile(db: Session, user: models.User, profile: schemas.UserProfileUpdate):
    for key, value in profile.model_dump(exclude_unset=True).items():
        setattr(user, key, value)
    user.display_name = _compose_display_name(user.first_name, user.last_name, user.display_name)
    db.commit()
    db.refresh(user)
    return user


def delete_user_account(db: Session, user_id: uuid.UUID) -> bool:
    """Delete a user and all owned documents in one transaction."""
    try:
        user = get_user(db, user_id)
        if not user:
            return False
        for model in models.USER_OWNED_MODELS:
            owner_column = model.actor_user_id if model is models.AuditLog else model.user_id
            db.query(model).filter(owner_column == user_id).delete(synchronize_session=False)
        db.delete(user)
        db.commit()
        return True
    except Exception as e:
        db.rollback()
        raise RuntimeError(f"Failed to delete account {user_id}: {str(e)}")
