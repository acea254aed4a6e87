"""
User settings API endpoints.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cashnib.db.database import get_db
from cashnib.db import schemas
from cashnib.api.deps import get_current_user_context
from cashnib.audit import AuditAction, log_safely
from cashnib.services import settings_service

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/", response_model=schemas.AppSettings)
def get_settings(
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    return settings_service.get_user_settings(db, user.id)


@router.put("/", response_model=schemas.AppSettings)
def update_settings(
    payload: schemas.AppSettingsUpdate,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    updated = settings_service.update_user_settings(db, user.id, payload)
    log_safely(
        db,
        action=AuditAction.SETTINGS_UPDATE,
        target_type="settings",
        actor_user_id=user.id,
        metadata={"sections": sorted(payload.model_fields_set)},
    )
    return updated


@router.post("/reset", response_model=schemas.AppSettings)
def reset_settings(
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    restored = settings_service.reset_user_settings(db, user.id)
    log_safely(
        db,
        action=AuditAction.SETTINGS_RESET,
        target_type="settings",
        actor_user_id=user.id,
    )
    return restored
