"""
Budget repository functions.
"""
from __future__ import annotations

import uuid
from sqlalchemy.orm import Session

from cashnib.db import models, schemas


def create_budget(db: Session, user_id: uuid.UUID, budget: schemas.BudgetCreate):
    db_budget = models.Budget(
        **budget.model_dump(),
        user_id=user_id,
        status='active',
        is_active=True,
    )
    db.add(db_budget)
    db.commit()
    db.refresh(db_budget)
    return db_budget


def get_budget(db: Session, user_id: uuid.UUID, budget_id: uuid.UUID):
    return (
        db.query(models.Budget)
        .filter(models.Budget.id == budget_id, models.Budget.user_id == user_id)
        .first()
    )


def get_budgets(db: Session, user_id: uuid.UUID):
    return (
        db.query(models.Budget)
        .filter(models.Budget.user_id == user_id)
        .order_by(models.Budget.created_at.desc())
        .all()
    )


def get_active_budget(db: Session, user_id: uuid.UUID):
    return (
        db.query(models.Budget)
        .filter(
            models.Budget.user_id == user_id,
            models.Budget.status == 'active',
            models.Budget.is_active.is_(True),
        )
        .order_by(models.Budget.created_at.desc())
        .first()
    )


def get_active_budgets(db: Session, user_id: uuid.UUID):
    return (
        db.query(models.Budget)
        .filter(
            models.Budget.user_id == user_id,
            models.Budget.status == 'active',
            models.Budget.is_active.is_(True),
        )
        .all()
    )


def update_budget(db: Session, user_id: uuid.UUID, budget_id: uuid.UUID, budget: schemas.BudgetUpdate):
    db_budget = get_budget(db, user_id, budget_id)
    if db_budget:
        for key, value in budget.model_dump(exclude_unset=True).items():
            setattr(db_budget, key, value)
        if 'status' in budget.model_fields_set:
            db_budget.is_active = db_budget.status == 'active'
        db.commit()
        db.refresh(db_budget)
    return db_budget


def delete_budget(db: Session, user_id: uuid.UUID, budget_id: uuid.UUID) -> bool:
    try:
        db_budget = get_budget(db, user_id, budget_id)
        if not db_budget:
            return False
        db.delete(db_budget)
        db.commit()
        return True
    except Exception as e:
        db.rollback()
        raise RuntimeError(f"Failed to delete budget {budget_id}: {str(e)}")
