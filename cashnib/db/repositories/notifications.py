"""
Notification repository functions.

Expired notifications are hidden from reads and removed by the cleanup job.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timedelta
from typing import Any, Dict, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session

from cashnib.db import models
from cashnib.db.models.base import now_utc


def _not_expired(now: datetime):
    return or_(models.Notification.expires_at.is_(None), models.Notification.expires_at > now)


def create_notification(
    db: Session,
    user_id: uuid.UUID,
    *,
    type: str,
    title: str,
    message: str,
    priority: str = 'medium',
    action_url: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
    expires_days: Optional[int] = 30,
):
    created = now_utc()
    notification = models.Notification(
        user_id=user_id,
        type=type,
        priority=priority,
        title=title,
        message=message,
        action_url=action_url,
        metadata_json=metadata or {},
        is_read=False,
        created_at=created,
        expires_at=created + timedelta(days=expires_days) if expires_days else None,
    )
    db.add(notification)
    db.commit()
    db.refresh(notification)
    return notification


def get_notification(db: Session, user_id: uuid.UUID, notification_id: uuid.UUID):
    return (
        db.query(models.Notification)
        .filter(models.Notification.id == notification_id, models.Notification.user_id == user_id)
        .first()
    )


def get_user_notifications(db: Session, user_id: uuid.UUID, *, unread_only: bool = False, limit: int = 50):
    q = db.query(models.Notification).filter(
        models.Notification.user_id == user_id,
        _not_expired(now_utc()),
    )
    if unread_only:
        q = q.filter(models.Notification.is_read.is_(False))
    return q.order_by(models.Notification.created_at.desc()).limit(limit).all()


def get_notifications_by_type(db: Session, user_id: uuid.UUID, type: str, **metadata_match: str):
    """Notifications of one type, optionally narrowed by string metadata keys."""
    query = db.query(models.Notification).filter(
        models.Notification.user_id == user_id, models.Notification.type == type
    )
    for key, value in metadata_match.items():
        query = query.filter(models.Notification.metadata_json[key].as_string() == value)
    return query.all()


def count_unread(db: Session, user_id: uuid.UUID) -> int:
    return (
        db.query(models.Notification)
        .filter(
            models.Notification.user_id == user_id,
            models.Notification.is_read.is_(False),
            _not_expired(now_utc()),
        )
        .count()
    )


def count_total(db: Session, user_id: uuid.UUID) -> int:
    return (
        db.query(models.Notification)
        .filter(models.Notification.user_id == user_id, _not_expired(now_utc()))
        .count()
    )


def mark_as_read(db: Session, user_id: uuid.UUID, notification_id: uuid.UUID) -> bool:
    notification = get_notification(db, user_id, notification_id)
    if not notification:
        return False
    if not notification.is_read:
        notification.is_read = True
        notification.read_at = now_utc()
        db.commit()
    return True


def mark_all_as_read(db: Session, user_id: uuid.UUID) -> int:
    updated = (
        db.query(models.Notification)
        .filter(models.Notification.user_id == user_id, models.Notification.is_read.is_(False))
        .update({'is_read': True, 'read_at': now_utc()}, synchronize_session=False)
    )
    db.commit()
    return updated


def delete_expired(db: Session, now: Optional[datetime] = None) -> int:
    try:
        deleted = (
            db.query(models.Notification)
            .filter(models.Notification.expires_at.isnot(None), models.Notification.expires_at <= (now or now_utc()))
            .delete(synchronize_session=False)
        )
        db.commit()
        return deleted
    except Exception as e:
        db.rollback()
        raise RuntimeError(f"Failed to delete expired notifications: {str(e)}")
