"""Per-user application settings with lazily created defaults."""
from __future__ import annotations

import uuid
from typing import Any, Dict

from sqlalchemy.orm import Session

from cashnib.db import models, schemas
from cashnib.db.repositories import settings as settings_repo


def default_settings() -> Dict[str, Any]:
    return schemas.AppSettings().model_dump()


def _to_schema(row: models.UserSettings) -> schemas.AppSettings:
    # Stored sections are merged over defaults so newly added switches appear
    defaults = default_settings()
    return schemas.AppSettings(
        currency=row.currency,
        language=row.language,
        theme=row.theme,
        notifications={**defaults["notifications"], **(row.notifications or {})},
        privacy={**defaults["privacy"], **(row.privacy or {})},
        security={**defaults["security"], **(row.security or {})},
    )


def _get_or_create_row(db: Session, user_id: uuid.UUID) -> models.UserSettings:
    row = settings_repo.get_settings(db, user_id)
    if row is None:
        row = settings_repo.create_settings(db, user_id, default_settings())
    return row


def get_user_settings(db: Session, user_id: uuid.UUID) -> schemas.AppSettings:
    return _to_schema(_get_or_create_row(db, user_id))


def update_user_settings(db: Session, user_id: uuid.UUID, update: schemas.AppSettingsUpdate) -> schemas.AppSettings:
    """Apply a partial update; nested sections merge key by key."""
    row = _get_or_create_row(db, user_id)
    current = _to_schema(row).model_dump()
    changes = update.model_dump(exclude_unset=True, exclude_none=True)
    for key, value in changes.items():
        if isinstance(value, dict):
            current[key] = {**current[key], **value}
        else:
            current[key] = value
    return _to_schema(settings_repo.save_settings(db, row, current))


def reset_user_settings(db: Session, user_id: uuid.UUID) -> schemas.AppSettings:
    row = _get_or_create_row(db, user_id)
    return _to_schema(settings_repo.save_settings(db, row, default_settings()))


def notification_enabled(db: Session, user_id: uuid.UUID, switch: str) -> bool:
    """Read one `notifications.<switch>` flag without creating a settings row."""
    row = settings_repo.get_settings(db, user_id)
    defaults = default_settings()["notifications"]
    stored = (row.notifications or {}) if row is not None else {}
    return bool(stored.get(switch, defaults.get(switch, True)))
