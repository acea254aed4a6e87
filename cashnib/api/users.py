"""
Account API endpoints: profile, account removal and logout.

Sessions belong to the identity provider; logout only records the event.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from cashnib.db.database import get_db
from cashnib.api.deps import get_current_user_context
from cashnib.db import schemas
from cashnib.db.repositories import users as user_repo
from cashnib.audit import AuditAction, AuditStatus, log_safely

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/profile", response_model=schemas.UserProfile)
def get_profile(user_context=Depends(get_current_user_context)):
    user, _ctx = user_context
    return user


@router.put("/profile", response_model=schemas.UserProfile)
def update_profile(
    payload: schemas.UserProfileUpdate,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    updated = user_repo.update_profile(db, user, payload)
    log_safely(
        db,
        action=AuditAction.PROFILE_UPDATE,
        target_type="user",
        target_id=user.id,
        actor_user_id=user.id,
        metadata={"fields": sorted(payload.model_fields_set)},
    )
    return updated


@router.delete("/account", status_code=status.HTTP_204_NO_CONTENT)
def delete_account(
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    try:
        deleted = user_repo.delete_user_account(db, user.id)
    except RuntimeError as exc:
        # The account survives a failed delete, so the attempt can still be audited
        log_safely(
            db,
            action=AuditAction.ACCOUNT_DELETE,
            status=AuditStatus.FAILURE,
            target_type="user",
            target_id=user.id,
            actor_user_id=user.id,
            reason=str(exc),
        )
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")


@router.post("/logout")
def logout(
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    log_safely(
        db,
        action=AuditAction.LOGOUT,
        target_type="user",
        target_id=user.id,
        actor_user_id=user.id,
    )
    return {"message": "Logged out successfully"}
