"""
Budget API endpoints.
"""
from typing import List
import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from cashnib.db.database import get_db
from cashnib.db import schemas
from cashnib.db.repositories import budgets as budget_repo
from cashnib.api.deps import get_current_user_context
from cashnib.audit import AuditAction, log_safely
from cashnib.services import budget_service

router = APIRouter(prefix="/budgets", tags=["budgets"])


def _get_or_404(db: Session, user_id: uuid.UUID, budget_id: uuid.UUID):
    db_budget = budget_repo.get_budget(db, user_id, budget_id)
    if db_budget is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Budget not found")
    return db_budget


@router.get("/", response_model=List[schemas.Budget])
def list_budgets(
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    return budget_repo.get_budgets(db, user.id)


@router.get("/active", response_model=schemas.Budget)
def get_active_budget(
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    db_budget = budget_repo.get_active_budget(db, user.id)
    if db_budget is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No active budget")
    return db_budget


@router.post("/", response_model=schemas.Budget, status_code=status.HTTP_201_CREATED)
def create_budget(
    payload: schemas.BudgetCreate,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    db_budget = budget_repo.create_budget(db, user.id, payload)
    log_safely(
        db,
        action=AuditAction.BUDGET_CREATE,
        target_type="budget",
        target_id=db_budget.id,
        actor_user_id=user.id,
        metadata={"name": db_budget.name},
    )
    return db_budget


@router.get("/{budget_id}", response_model=schemas.Budget)
def get_budget(
    budget_id: uuid.UUID,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    return _get_or_404(db, user.id, budget_id)


@router.get("/{budget_id}/performance", response_model=schemas.BudgetPerformance)
def get_budget_performance(
    budget_id: uuid.UUID,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    return budget_service.budget_performance(db, _get_or_404(db, user.id, budget_id))


@router.put("/{budget_id}", response_model=schemas.Budget)
def update_budget(
    budget_id: uuid.UUID,
    payload: schemas.BudgetUpdate,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    existing = _get_or_404(db, user.id, budget_id)
    start = payload.start_date if "start_date" in payload.model_fields_set else existing.start_date
    end = payload.end_date if "end_date" in payload.model_fields_set else existing.end_date
    if start and end and end < start:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="end_date must not be before start_date",
        )
    db_budget = budget_repo.update_budget(db, user.id, budget_id, payload)
    log_safely(
        db,
        action=AuditAction.BUDGET_UPDATE,
        target_type="budget",
        target_id=budget_id,
        actor_user_id=user.id,
        metadata={"fields": sorted(payload.model_fields_set)},
    )
    return db_budget


@router.delete("/{budget_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_budget(
    budget_id: uuid.UUID,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    try:
        deleted = budget_repo.delete_budget(db, user.id, budget_id)
    except RuntimeError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Budget not found")
    log_safely(
        db,
        action=AuditAction.BUDGET_DELETE,
        target_type="budget",
        target_id=budget_id,
        actor_user_id=user.id,
    )
