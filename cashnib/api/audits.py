"""
Audit log API endpoints.

Users read their own audit trail; superadmins may inspect any user's.
"""
from datetime import datetime
from typing import Literal, Optional, List
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from cashnib.db.database import get_db
from cashnib.db import schemas
from cashnib.db.repositories import audits as audit_repo
from cashnib.api.deps import get_current_user_context

router = APIRouter(prefix="/audits", tags=["audits"])


@router.get("/", response_model=List[schemas.AuditLog])
def list_audit_logs(
    user_id: Optional[uuid.UUID] = None,
    action_type: Optional[str] = None,
    status_filter: Optional[Literal["success", "failure"]] = Query(None, alias="status"),
    target_type: Optional[str] = None,
    target_id: Optional[uuid.UUID] = None,
    since: Optional[datetime] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, current_user = user_context

    if user_id and user_id != user.id and not current_user.get("is_superadmin"):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    target_user_id = user_id or user.id

    return audit_repo.get_audit_logs(
        db,
        target_user_id,
        action_type=action_type,
        status=status_filter,
        target_type=target_type,
        target_id=target_id,
        since=since,
        skip=skip,
        limit=limit,
    )
