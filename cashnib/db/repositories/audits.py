"""
Audit trail persistence.

Entries are append-only; they leave the table only with their actor's account.
"""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Session

from cashnib.db import schemas, models


def create_audit_log(db: Session, audit_log: schemas.AuditLogCreate, actor_user_id: uuid.UUID):
    db_audit_log = models.AuditLog(
        actor_user_id=actor_user_id,
        action_type=audit_log.action_type,
        status=audit_log.status,
        target_type=audit_log.target_type,
        target_id=audit_log.target_id,
        reason=audit_log.reason,
        metadata_json=audit_log.metadata,
    )
    db.add(db_audit_log)
    db.commit()
    db.refresh(db_audit_log)
    return db_audit_log


def get_audit_logs(
    db: Session,
    user_id: uuid.UUID,
    *,
    action_type: Optional[str] = None,
    status: Optional[str] = None,
    target_type: Optional[str] = None,
    target_id: Optional[uuid.UUID] = None,
    since: Optional[datetime] = None,
    skip: int = 0,
    limit: int = 100,
):
    """One actor's trail, newest first."""
    query = db.query(models.AuditLog).filter(models.AuditLog.actor_user_id == user_id)
    if action_type:
        query = query.filter(models.AuditLog.action_type == action_type)
    if status:
        query = query.filter(models.AuditLog.status == status)
    if target_type:
        query = query.filter(models.AuditLog.target_type == target_type)
    if target_id:
        query = query.filter(models.AuditLog.target_id == target_id)
    if since:
        query = query.filter(models.AuditLog.created_at >= since)
    return (
        query.order_by(models.AuditLog.created_at.desc(), models.AuditLog.id)
        .offset(skip)
        .limit(limit)
        .all()
    )
