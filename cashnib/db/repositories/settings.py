"""
User settings repository functions.

Sections are stored as whole JSON documents; updates always assign a new
dict so the ORM notices the change.
"""
from __future__ import annotations

import uuid
from typing import Any, Dict
from sqlalchemy.orm import Session

from cashnib.db import models

SECTION_FIELDS = ('notifications', 'privacy', 'security')
SCALAR_FIELDS = ('currency', 'language', 'theme')


def get_settings(db: Session, user_id: uuid.UUID):
    return db.query(models.UserSettings).filter(models.UserSettings.user_id == user_id).first()


def create_settings(db: Session, user_id: uuid.UUID, values: Dict[str, Any]):
    row = models.UserSettings(user_id=user_id, **values)
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def save_settings(db: Session, row: models.UserSettings, values: Dict[str, Any]):
    for key in SCALAR_FIELDS:
        if key in values:
            setattr(row, key, values[key])
    for key in SECTION_FIELDS:
        if key in values:
            setattr(row, key, dict(values[key]))
    db.commit()
    db.refresh(row)
    return row
