"""
Transaction repository functions.

CRUD, filtered listing with pagination, and the aggregate queries used by
stats, budgets and reports.
"""
from __future__ import annotations

import uuid
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple
from sqlalchemy import func
from sqlalchemy.orm import Session

from cashnib.db import models, schemas

_SORT_COLUMNS = {
    'date': models.Transaction.date,
    'amount': models.Transaction.amount,
    'category': models.Transaction.category,
}


def create_transaction(db: Session, user_id: uuid.UUID, transaction: schemas.TransactionCreate, *, is_manual: bool = True):
    db_transaction = models.Transaction(
        **transaction.model_dump(),
        user_id=user_id,
        is_manual=is_manual,
    )
    db.add(db_transaction)
    db.commit()
    db.refresh(db_transaction)
    return db_transaction


def get_transaction(db: Session, user_id: uuid.UUID, transaction_id: uuid.UUID):
    return (
        db.query(models.Transaction)
        .filter(models.Transaction.id == transaction_id, models.Transaction.user_id == user_id)
        .first()
    )


def list_transactions(
    db: Session,
    user_id: uuid.UUID,
    filters: schemas.TransactionFilter,
) -> Tuple[List[models.Transaction], int]:
    """Return one page of transactions plus the total matching count."""
    q = db.query(models.Transaction).filter(models.Transaction.user_id == user_id)
    if filters.category:
        q = q.filter(models.Transaction.category == filters.category)
    if filters.type:
        q = q.filter(models.Transaction.type == filters.type)
    if filters.start_date:
        q = q.filter(models.Transaction.date >= filters.start_date)
    if filters.end_date:
        q = q.filter(models.Transaction.date <= filters.end_date)
    if filters.min_amount is not None:
        q = q.filter(models.Transaction.amount >= filters.min_amount)
    if filters.max_amount is not None:
        q = q.filter(models.Transaction.amount <= filters.max_amount)
    if filters.search:
        q = q.filter(func.lower(models.Transaction.description).contains(filters.search.strip().lower()))

    total = q.count()
    column = _SORT_COLUMNS[filters.sort_by]
    ordering = column.asc() if filters.sort_order == 'asc' else column.desc()
    items = (
        q.order_by(ordering, models.Transaction.created_at.desc())
        .offset((filters.page - 1) * filters.limit)
        .limit(filters.limit)
        .all()
    )
    return items, total


def update_transaction(db: Session, user_id: uuid.UUID, transaction_id: uuid.UUID, transaction: schemas.TransactionUpdate):
    db_transaction = get_transaction(db, user_id, transaction_id)
    if db_transaction:
        for key, value in transaction.model_dump(exclude_unset=True).items():
            setattr(db_transaction, key, value)
        db.commit()
        db.refresh(db_transaction)
    return db_transaction


def delete_transaction(db: Session, user_id: uuid.UUID, transaction_id: uuid.UUID) -> bool:
    try:
        db_transaction = get_transaction(db, user_id, transaction_id)
        if not db_transaction:
            return False
        db.delete(db_transaction)
        db.commit()
        return True
    except Exception as e:
        db.rollback()
        raise RuntimeError(f"Failed to delete transaction {transaction_id}: {str(e)}")


def get_user_categories(db: Session, user_id: uuid.UUID) -> List[str]:
    rows = (
        db.query(models.Transaction.category)
        .filter(models.Transaction.user_id == user_id)
        .distinct()
        .all()
    )
    return sorted(r[0] for r in rows if r[0])


def get_transactions_in_range(
    db: Session,
    user_id: uuid.UUID,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    *,
    type: Optional[str] = None,
    categories: Optional[Iterable[str]] = None,
):
    q = db.query(models.Transaction).filter(models.Transaction.user_id == user_id)
    if start_date:
        q = q.filter(models.Transaction.date >= start_date)
    if end_date:
        q = q.filter(models.Transaction.date <= end_date)
    if type:
        q = q.filter(models.Transaction.type == type)
    if categories:
        q = q.filter(models.Transaction.category.in_(list(categories)))
    return q.order_by(models.Transaction.date.desc(), models.Transaction.created_at.desc()).all()


def get_recent_transactions(db: Session, user_id: uuid.UUID, limit: int = 10):
    return (
        db.query(models.Transaction)
        .filter(models.Transaction.user_id == user_id)
        .order_by(models.Transaction.date.desc(), models.Transaction.created_at.desc())
        .limit(limit)
        .all()
    )


def find_duplicate(
    db: Session,
    user_id: uuid.UUID,
    *,
    on: date,
    amount: float,
    description: Optional[str],
    type: str,
):
    q = db.query(models.Transaction).filter(
        models.Transaction.user_id == user_id,
        models.Transaction.date == on,
        models.Transaction.amount == amount,
        models.Transaction.type == type,
    )
    if description is None:
        q = q.filter(models.Transaction.description.is_(None))
    else:
        q = q.filter(models.Transaction.description == description)
    return q.first()


def sum_expenses_by_category(
    db: Session,
    user_id: uuid.UUID,
    start_date: date,
    end_date: date,
    categories: Optional[Iterable[str]] = None,
) -> Dict[str, float]:
    q = db.query(models.Transaction.category, func.sum(models.Transaction.amount)).filter(
        models.Transaction.user_id == user_id,
        models.Transaction.type == 'expense',
        models.Transaction.date >= start_date,
        models.Transaction.date <= end_date,
    )
    if categories is not None:
        q = q.filter(models.Transaction.category.in_(list(categories)))
    rows = q.group_by(models.Transaction.category).all()
    return {category: float(total or 0) for category, total in rows}


def get_category_expense_amounts(
    db: Session,
    user_id: uuid.UUID,
    category: str,
    since: date,
    *,
    exclude_id: Optional[uuid.UUID] = None,
) -> List[float]:
    q = db.query(models.Transaction.amount).filter(
        models.Transaction.user_id == user_id,
        models.Transaction.type == 'expense',
        models.Transaction.category == category,
        models.Transaction.date >= since,
    )
    if exclude_id is not None:
        q = q.filter(models.Transaction.id != exclude_id)
    return [float(r[0]) for r in q.all()]
