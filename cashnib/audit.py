"""
Audit logging helpers and enums.

Centralized helper to persist normalized audit records, plus a best-effort
wrapper for routes where auditing must never fail the request.
"""
from __future__ import annotations
import logging
import uuid
from enum import Enum
from typing import Any, Optional, Dict
from sqlalchemy.orm import Session

from cashnib.db import schemas
from cashnib.db.repositories import audits as audit_repo

logger = logging.getLogger(__name__)


class AuditAction(str, Enum):
    # Account
    PROFILE_UPDATE = "profile_update"
    ACCOUNT_DELETE = "account_delete"
    LOGOUT = "logout"
    # Transactions
    TRANSACTION_CREATE = "transaction_create"
    TRANSACTION_UPDATE = "transaction_update"
    TRANSACTION_DELETE = "transaction_delete"
    TRANSACTION_IMPORT = "transaction_import"
    TRANSACTION_EXPORT = "transaction_export"
    # Budgets
    BUDGET_CREATE = "budget_create"
    BUDGET_UPDATE = "budget_update"
    BUDGET_DELETE = "budget_delete"
    # Goals
    GOAL_CREATE = "goal_create"
    GOAL_UPDATE = "goal_update"
    GOAL_DELETE = "goal_delete"
    GOAL_CONTRIBUTE = "goal_contribute"
    # Investments
    INVESTMENT_CREATE = "investment_create"
    INVESTMENT_UPDATE = "investment_update"
    INVESTMENT_DELETE = "investment_delete"
    PRICE_REFRESH = "price_refresh"
    # Notifications / settings
    NOTIFICATION_CLEANUP = "notification_cleanup"
    SETTINGS_UPDATE = "settings_update"
    SETTINGS_RESET = "settings_reset"


class AuditStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


def log(
    db: Session,
    *,
    action: AuditAction | str,
    status: AuditStatus | str = AuditStatus.SUCCESS,
    target_type: str,
    target_id: Optional[uuid.UUID] = None,
    actor_user_id: uuid.UUID,
    reason: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> schemas.AuditLog:
    """Central audit logging helper."""
    # Persist pure string values, not Enum reprs (avoid 'AuditAction.XYZ')
    action_value = action.value if isinstance(action, AuditAction) else str(action)
    status_value = status.value if isinstance(status, AuditStatus) else str(status)
    audit_log = schemas.AuditLogCreate(
        action_type=action_value,
        status=status_value,
        target_type=target_type,
        target_id=target_id,
        reason=reason,
        metadata=metadata or {},
    )
    return audit_repo.create_audit_log(db, audit_log=audit_log, actor_user_id=actor_user_id)


def log_safely(db: Session, **kwargs) -> None:
    """Write an audit record, logging instead of raising on failure."""
    try:
        log(db, **kwargs)
    except Exception as exc:
        db.rollback()
        logger.warning("Audit log write failed for %s: %s", kwargs.get("action"), exc)


__all__ = ["AuditAction", "AuditStatus", "log", "log_safely"]
