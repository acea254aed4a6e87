"""
Goal API endpoints.

Contributions and amount updates announce crossed milestones and
completion through goal_milestone notifications.
"""
from typing import List, Optional
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from cashnib.db.database import get_db
from cashnib.db import schemas
from cashnib.db.repositories import goals as goal_repo
from cashnib.api.deps import get_current_user_context
from cashnib.audit import AuditAction, log_safely
from cashnib.services import goal_service

router = APIRouter(prefix="/goals", tags=["goals"])


@router.get("/", response_model=List[schemas.Goal])
def list_goals(
    status_filter: Optional[str] = Query(None, alias="status", pattern="^(active|completed|paused)$"),
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    return goal_repo.get_goals(db, user.id, status=status_filter)


@router.get("/active", response_model=List[schemas.Goal])
def list_active_goals(
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    return goal_repo.get_active_goals(db, user.id)


@router.post("/", response_model=schemas.Goal, status_code=status.HTTP_201_CREATED)
def create_goal(
    payload: schemas.GoalCreate,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    db_goal = goal_repo.create_goal(db, user.id, payload)
    log_safely(
        db,
        action=AuditAction.GOAL_CREATE,
        target_type="goal",
        target_id=db_goal.id,
        actor_user_id=user.id,
        metadata={"name": db_goal.name},
    )
    return db_goal


@router.get("/{goal_id}", response_model=schemas.Goal)
def get_goal(
    goal_id: uuid.UUID,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    db_goal = goal_repo.get_goal(db, user.id, goal_id)
    if db_goal is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Goal not found")
    return db_goal


@router.put("/{goal_id}", response_model=schemas.Goal)
def update_goal(
    goal_id: uuid.UUID,
    payload: schemas.GoalUpdate,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    existing = goal_repo.get_goal(db, user.id, goal_id)
    if existing is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Goal not found")
    previous_amount = float(existing.current_amount or 0)
    was_completed = bool(existing.is_completed)
    db_goal = goal_repo.update_goal(db, user.id, goal_id, payload)
    goal_service.announce_progress(
        db, db_goal, previous_amount, newly_completed=db_goal.is_completed and not was_completed
    )
    log_safely(
        db,
        action=AuditAction.GOAL_UPDATE,
        target_type="goal",
        target_id=goal_id,
        actor_user_id=user.id,
        metadata={"fields": sorted(payload.model_fields_set)},
    )
    return db_goal


@router.post("/{goal_id}/contribute", response_model=schemas.Goal)
def contribute_to_goal(
    goal_id: uuid.UUID,
    payload: schemas.ContributionRequest,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    db_goal, _notifications = goal_service.contribute(db, user.id, goal_id, payload.amount)
    if db_goal is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Goal not found")
    log_safely(
        db,
        action=AuditAction.GOAL_CONTRIBUTE,
        target_type="goal",
        target_id=goal_id,
        actor_user_id=user.id,
        metadata={"amount": payload.amount},
    )
    return db_goal


@router.delete("/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_goal(
    goal_id: uuid.UUID,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    try:
        deleted = goal_repo.delete_goal(db, user.id, goal_id)
    except RuntimeError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Goal not found")
    log_safely(
        db,
        action=AuditAction.GOAL_DELETE,
        target_type="goal",
        target_id=goal_id,
        actor_user_id=user.id,
    )
