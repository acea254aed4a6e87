"""
Goal repository functions.

Completion is re-evaluated on every write that touches amounts.
"""
from __future__ import annotations

import uuid
from typing import Optional
from sqlalchemy import case
from sqlalchemy.orm import Session

from cashnib.db import models, schemas

_PRIORITY_RANK = case(
    (models.Goal.priority == 'high', 0),
    (models.Goal.priority == 'medium', 1),
    (models.Goal.priority == 'low', 2),
    else_=3,
)


def create_goal(db: Session, user_id: uuid.UUID, goal: schemas.GoalCreate):
    db_goal = models.Goal(
        **goal.model_dump(),
        user_id=user_id,
        status='active',
        is_completed=False,
    )
    db_goal.sync_completion()
    db.add(db_goal)
    db.commit()
    db.refresh(db_goal)
    return db_goal


def get_goal(db: Session, user_id: uuid.UUID, goal_id: uuid.UUID):
    return (
        db.query(models.Goal)
        .filter(models.Goal.id == goal_id, models.Goal.user_id == user_id)
        .first()
    )


def get_goals(db: Session, user_id: uuid.UUID, status: Optional[str] = None):
    q = db.query(models.Goal).filter(models.Goal.user_id == user_id)
    if status:
        q = q.filter(models.Goal.status == status)
    return q.order_by(models.Goal.created_at.desc()).all()


def get_active_goals(db: Session, user_id: uuid.UUID):
    return (
        db.query(models.Goal)
        .filter(models.Goal.user_id == user_id, models.Goal.status == 'active')
        .order_by(_PRIORITY_RANK, models.Goal.created_at.desc())
        .all()
    )


def update_goal(db: Session, user_id: uuid.UUID, goal_id: uuid.UUID, goal: schemas.GoalUpdate):
    db_goal = get_goal(db, user_id, goal_id)
    if db_goal:
        for key, value in goal.model_dump(exclude_unset=True).items():
            setattr(db_goal, key, value)
        db_goal.sync_completion()
        db.commit()
        db.refresh(db_goal)
    return db_goal


def add_contribution(db: Session, user_id: uuid.UUID, goal_id: uuid.UUID, amount: float):
    """Add `amount` to the goal; returns (goal, newly_completed) or (None, False)."""
    db_goal = get_goal(db, user_id, goal_id)
    if not db_goal:
        return None, False
    db_goal.current_amount = round((db_goal.current_amount or 0) + amount, 2)
    newly_completed = db_goal.sync_completion()
    db.commit()
    db.refresh(db_goal)
    return db_goal, newly_completed


def delete_goal(db: Session, user_id: uuid.UUID, goal_id: uuid.UUID) -> bool:
    try:
        db_goal = get_goal(db, user_id, goal_id)
        if not db_goal:
            return False
        db.delete(db_goal)
        db.commit()
        return True
    except Exception as e:
        db.rollback()
        raise RuntimeError(f"Failed to delete goal {goal_id}: {str(e)}")
