"""
Investment API endpoints: holdings CRUD, portfolio totals and price refresh.
"""
from typing import List, Optional
import uuid

import requests
from fastapi import APIRouter, Body, Depends, HTTPException, status
from sqlalchemy.orm import Session

from cashnib.db.database import get_db
from cashnib.db import schemas
from cashnib.db.repositories import investments as investment_repo
from cashnib.api.deps import get_current_user_context
from cashnib.audit import AuditAction, log_safely
from cashnib.services import investment_service

router = APIRouter(prefix="/investments", tags=["investments"])


@router.get("/", response_model=List[schemas.Investment])
def list_investments(
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    return investment_repo.get_investments(db, user.id)


@router.get("/portfolio", response_model=schemas.Portfolio)
def get_portfolio(
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    return investment_service.build_portfolio(db, user.id)


@router.post("/prices/refresh", response_model=schemas.PriceRefreshResult)
def refresh_prices(
    payload: Optional[schemas.PriceRefreshRequest] = Body(default=None),
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    prices = payload.prices if payload else None
    try:
        result = investment_service.refresh_prices(db, user.id, prices)
    except (requests.RequestException, RuntimeError) as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"Price provider error: {exc}")
    log_safely(
        db,
        action=AuditAction.PRICE_REFRESH,
        target_type="investment",
        actor_user_id=user.id,
        metadata={"updated": result.updated, "skipped": result.skipped},
    )
    return result


@router.post("/", response_model=schemas.Investment, status_code=status.HTTP_201_CREATED)
def create_investment(
    payload: schemas.InvestmentCreate,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    db_investment = investment_repo.create_investment(db, user.id, payload)
    log_safely(
        db,
        action=AuditAction.INVESTMENT_CREATE,
        target_type="investment",
        target_id=db_investment.id,
        actor_user_id=user.id,
        metadata={"symbol": db_investment.symbol},
    )
    return db_investment


@router.get("/{investment_id}", response_model=schemas.Investment)
def get_investment(
    investment_id: uuid.UUID,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    db_investment = investment_repo.get_investment(db, user.id, investment_id)
    if db_investment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Investment not found")
    return db_investment


@router.put("/{investment_id}", response_model=schemas.Investment)
def update_investment(
    investment_id: uuid.UUID,
    payload: schemas.InvestmentUpdate,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    db_investment = investment_repo.update_investment(db, user.id, investment_id, payload)
    if db_investment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Investment not found")
    log_safely(
        db,
        action=AuditAction.INVESTMENT_UPDATE,
        target_type="investment",
        target_id=investment_id,
        actor_user_id=user.id,
        metadata={"fields": sorted(payload.model_fields_set)},
    )
    return db_investment


@router.delete("/{investment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_investment(
    investment_id: uuid.UUID,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    try:
        deleted = investment_repo.delete_investment(db, user.id, investment_id)
    except RuntimeError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Investment not found")
    log_safely(
        db,
        action=AuditAction.INVESTMENT_DELETE,
        target_type="investment",
        target_id=investment_id,
        actor_user_id=user.id,
    )
