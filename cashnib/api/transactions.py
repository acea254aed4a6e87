"""
Transaction API endpoints.

CRUD over the caller's transactions plus categorization, stats, and bulk
import/export. Creating an expense also runs the budget alert and anomaly
checks; their failures never fail the request.
"""
from typing import Optional
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from cashnib.db.database import get_db
from cashnib.db import schemas
from cashnib.db.repositories import transactions as transaction_repo
from cashnib.api.deps import get_current_user_context
from cashnib.audit import AuditAction, log_safely
from cashnib.services import budget_service, transaction_service
from cashnib.services.notification_service import notify_safely
from cashnib.utils.feature_flags import (
    budget_alerts_enabled,
    transaction_anomalies_enabled,
    transaction_import_enabled,
)
from cashnib.utils.periods import STATS_PERIODS

router = APIRouter(prefix="/transactions", tags=["transactions"])


def _filters(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    category: Optional[str] = None,
    type: Optional[str] = Query(None, pattern="^(income|expense|transfer)$"),
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    min_amount: Optional[float] = None,
    max_amount: Optional[float] = None,
    search: Optional[str] = None,
    sort_by: str = Query("date", pattern="^(date|amount|category)$"),
    sort_order: str = Query("desc", pattern="^(asc|desc)$"),
) -> schemas.TransactionFilter:
    try:
        return schemas.TransactionFilter(
            page=page,
            limit=limit,
            category=category,
            type=type,
            start_date=start_date,
            end_date=end_date,
            min_amount=min_amount,
            max_amount=max_amount,
            search=search,
            sort_by=sort_by,
            sort_order=sort_order,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))


@router.get("/", response_model=schemas.TransactionListResponse)
def list_transactions(
    filters: schemas.TransactionFilter = Depends(_filters),
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    items, total = transaction_repo.list_transactions(db, user.id, filters)
    return schemas.TransactionListResponse(
        transactions=items,
        pagination=schemas.Pagination.build(filters.page, filters.limit, total),
    )


@router.get("/categories/list")
def list_categories(
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    return {"categories": transaction_service.list_categories(db, user.id)}


@router.post("/categorize", response_model=schemas.CategorizeResponse)
def categorize_transaction(
    payload: schemas.CategorizeRequest,
    user_context=Depends(get_current_user_context),
):
    return schemas.CategorizeResponse(
        category=transaction_service.categorize(payload.description, payload.amount)
    )


@router.get("/stats/summary", response_model=schemas.TransactionStats)
def get_stats(
    period: str = "month",
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    if period not in STATS_PERIODS:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"period must be one of: {', '.join(STATS_PERIODS)}",
        )
    return transaction_service.transaction_stats(db, user.id, period)


@router.post("/export")
def export_transactions(
    payload: schemas.ExportRequest,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    body, media_type, filename = transaction_service.export_transactions(db, user.id, payload)
    log_safely(
        db,
        action=AuditAction.TRANSACTION_EXPORT,
        target_type="transaction",
        actor_user_id=user.id,
        metadata={"format": payload.format},
    )
    return Response(
        content=body,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/import", response_model=schemas.ImportResult)
def import_transactions(
    payload: schemas.ImportRequest,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    if not transaction_import_enabled():
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Transaction import is disabled")
    result = transaction_service.import_transactions(db, user.id, payload.transactions)
    log_safely(
        db,
        action=AuditAction.TRANSACTION_IMPORT,
        target_type="transaction",
        actor_user_id=user.id,
        metadata=result.model_dump(exclude={"errors"}),
    )
    return result


@router.get("/recent/list", response_model=list[schemas.Transaction])
def recent_transactions(
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    return transaction_repo.get_recent_transactions(db, user.id, limit)


@router.get("/{transaction_id}", response_model=schemas.Transaction)
def get_transaction(
    transaction_id: uuid.UUID,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    db_transaction = transaction_repo.get_transaction(db, user.id, transaction_id)
    if db_transaction is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found")
    return db_transaction


@router.post("/", response_model=schemas.Transaction, status_code=status.HTTP_201_CREATED)
def create_transaction(
    payload: schemas.TransactionCreate,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    db_transaction = transaction_repo.create_transaction(db, user.id, payload)
    log_safely(
        db,
        action=AuditAction.TRANSACTION_CREATE,
        target_type="transaction",
        target_id=db_transaction.id,
        actor_user_id=user.id,
        metadata={"amount": db_transaction.amount, "type": db_transaction.type},
    )
    if db_transaction.type == "expense":
        if budget_alerts_enabled():
            notify_safely(db, budget_service.check_budget_alerts, db, db_transaction)
        if transaction_anomalies_enabled():
            notify_safely(db, transaction_service.check_anomaly, db, db_transaction)
    return db_transaction


@router.put("/{transaction_id}", response_model=schemas.Transaction)
def update_transaction(
    transaction_id: uuid.UUID,
    payload: schemas.TransactionUpdate,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    db_transaction = transaction_repo.update_transaction(db, user.id, transaction_id, payload)
    if db_transaction is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found")
    log_safely(
        db,
        action=AuditAction.TRANSACTION_UPDATE,
        target_type="transaction",
        target_id=transaction_id,
        actor_user_id=user.id,
        metadata={"fields": sorted(payload.model_fields_set)},
    )
    return db_transaction


@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_transaction(
    transaction_id: uuid.UUID,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    try:
        deleted = transaction_repo.delete_transaction(db, user.id, transaction_id)
    except RuntimeError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found")
    log_safely(
        db,
        action=AuditAction.TRANSACTION_DELETE,
        target_type="transaction",
        target_id=transaction_id,
        actor_user_id=user.id,
    )
