"""
Notification API Endpoints

In-app notifications for the current user: listing, unread counters,
read receipts, and an admin cleanup of expired entries.
"""
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from cashnib.db.database import get_db
from cashnib.db import schemas
from cashnib.api.deps import get_current_user_context, require_superadmin
from cashnib.audit import AuditAction, log_safely
from cashnib.services.notification_service import NotificationService


router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/", response_model=schemas.NotificationListResponse)
def get_notifications(
    unread_only: bool = False,
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    """
    Get notifications for the current user.

    - **unread_only**: If true, only return unread notifications
    - **limit**: Maximum number of notifications to return (default 50)
    """
    user, current_user = user_context

    service = NotificationService(db)
    notifications = service.get_user_notifications(
        user_id=user.id,
        unread_only=unread_only,
        limit=limit,
    )

    return schemas.NotificationListResponse(
        notifications=notifications,
        unread_count=service.get_unread_count(user.id),
        total_count=service.get_total_count(user.id),
    )


@router.get("/unread-count", response_model=schemas.UnreadCountResponse)
def get_unread_count(
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    return schemas.UnreadCountResponse(unread_count=NotificationService(db).get_unread_count(user.id))


@router.post("/read-all")
def mark_all_notifications_read(
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    updated = NotificationService(db).mark_all_read(user.id)
    return {"updated": updated}


@router.post("/", response_model=schemas.Notification, status_code=status.HTTP_201_CREATED)
def create_notification(
    payload: schemas.NotificationCreate,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    return NotificationService(db).create_notification(
        user.id,
        payload.type,
        title=payload.title,
        message=payload.message,
        priority=payload.priority,
        action_url=payload.action_url,
        metadata=payload.metadata,
        expires_days=payload.expires_days,
    )


@router.post("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
def mark_notification_read(
    notification_id: uuid.UUID,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    """
    Mark a specific notification as read.
    """
    user, current_user = user_context

    success = NotificationService(db).mark_notification_read(notification_id, user.id)
    if not success:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Notification not found",
        )


@router.delete("/cleanup/expired")
def cleanup_expired_notifications(
    db: Session = Depends(get_db),
    admin_context=Depends(require_superadmin),
):
    user, _ctx = admin_context
    try:
        deleted = NotificationService(db).cleanup_expired_notifications()
    except RuntimeError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
    log_safely(
        db,
        action=AuditAction.NOTIFICATION_CLEANUP,
        target_type="notification",
        actor_user_id=user.id,
        metadata={"deleted": deleted},
    )
    return {"deleted": deleted}
