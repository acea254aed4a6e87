"""
Transaction business logic: categorization, stats, import/export and
anomaly detection on new expenses.
"""
from __future__ import annotations

import csv
import io
import json
import logging
import uuid
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError
from sqlalchemy.orm import Session

from cashnib.db import models, schemas
from cashnib.db.repositories import transactions as transaction_repo
from cashnib.services.notification_service import NotificationService
from cashnib.utils.periods import stats_window

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    'Food & Dining',
    'Transportation',
    'Shopping',
    'Entertainment',
    'Bills & Utilities',
    'Healthcare',
    'Education',
    'Travel',
    'Income',
    'Other',
]

# First matching rule wins
_CATEGORY_RULES: List[Tuple[str, Tuple[str, ...]]] = [
    ('Food & Dining', ('food', 'restaurant', 'grocery', 'cafe', 'coffee')),
    ('Transportation', ('gas', 'uber', 'taxi', 'lyft', 'parking', 'transit')),
    ('Shopping', ('amazon', 'store', 'shop')),
    ('Entertainment', ('movie', 'netflix', 'spotify', 'concert')),
    ('Bills & Utilities', ('electric', 'water', 'internet', 'phone bill', 'rent')),
    ('Healthcare', ('pharmacy', 'doctor', 'hospital', 'dental')),
    ('Education', ('tuition', 'course', 'school', 'books')),
    ('Travel', ('hotel', 'airline', 'flight', 'airbnb')),
    ('Income', ('salary', 'payroll', 'paycheck', 'dividend')),
]

ANOMALY_LOOKBACK_DAYS = 90
ANOMALY_MIN_SAMPLES = 5
ANOMALY_FACTOR = 3.0

EXPORT_COLUMNS = [
    'id', 'date', 'type', 'amount', 'category', 'subcategory',
    'description', 'account_id', 'tags', 'is_manual',
]


def categorize(description: str, amount: float) -> str:
    desc = (description or '').lower()
    for category, keywords in _CATEGORY_RULES:
        if any(k in desc for k in keywords):
            return category
    return 'Other'


def list_categories(db: Session, user_id: uuid.UUID) -> List[str]:
    """Default categories followed by the user's own, without duplicates."""
    custom = [c for c in transaction_repo.get_user_categories(db, user_id) if c not in DEFAULT_CATEGORIES]
    return DEFAULT_CATEGORIES + custom


def transaction_stats(db: Session, user_id: uuid.UUID, period: str, today: Optional[date] = None) -> schemas.TransactionStats:
    start, end = stats_window(period, today)
    rows = transaction_repo.get_transactions_in_range(db, user_id, start, end)
    income = sum(float(t.amount) for t in rows if t.type == 'income')
    expenses = sum(float(t.amount) for t in rows if t.type == 'expense')
    count = len(rows)
    average = sum(float(t.amount) for t in rows) / count if count else 0.0
    return schemas.TransactionStats(
        period=period,
        start_date=start,
        end_date=end,
        total_income=round(income, 2),
        total_expenses=round(expenses, 2),
        net_income=round(income - expenses, 2),
        transaction_count=count,
        average_transaction=round(average, 2),
    )


def _export_row(t: models.Transaction) -> Dict[str, Any]:
    return {
        'id': str(t.id),
        'date': t.date.isoformat(),
        'type': t.type,
        'amount': float(t.amount),
        'category': t.category,
        'subcategory': t.subcategory or '',
        'description': t.description or '',
        'account_id': t.account_id or '',
        'tags': list(t.tags or []),
        'is_manual': bool(t.is_manual),
    }


def export_transactions(db: Session, user_id: uuid.UUID, request: schemas.ExportRequest) -> Tuple[str, str, str]:
    """Return (body, media_type, filename) for the requested export."""
    rows = transaction_repo.get_transactions_in_range(
        db, user_id, request.start_date, request.end_date, categories=request.categories
    )
    stamp = date.today().isoformat()
    records = [_export_row(t) for t in rows]
    if request.format == 'json':
        body = json.dumps({'transactions': records, 'count': len(records)}, indent=2)
        return body, 'application/json', f"transactions_{stamp}.json"

    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=EXPORT_COLUMNS)
    writer.writeheader()
    for record in records:
        writer.writerow({**record, 'tags': ';'.join(record['tags'])})
    return buffer.getvalue(), 'text/csv', f"transactions_{stamp}.csv"


def _error_message(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = '.'.join(str(p) for p in err.get('loc', ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else err.get('msg', ''))
    return '; '.join(parts)


def import_transactions(db: Session, user_id: uuid.UUID, rows: List[Dict[str, Any]]) -> schemas.ImportResult:
    """Insert each valid, non-duplicate row; report per-row failures."""
    imported = failed = duplicates = 0
    errors: List[schemas.ImportRowError] = []
    for index, raw in enumerate(rows):
        try:
            payload = schemas.TransactionCreate.model_validate(raw)
        except ValidationError as exc:
            failed += 1
            errors.append(schemas.ImportRowError(index=index, error=_error_message(exc)))
            continue
        existing = transaction_repo.find_duplicate(
            db,
            user_id,
            on=payload.date,
            amount=payload.amount,
            description=payload.description,
            type=payload.type,
        )
        if existing is not None:
            duplicates += 1
            continue
        transaction_repo.create_transaction(db, user_id, payload, is_manual=False)
        imported += 1
    logger.info(
        "Transaction import finished",
        extra={'user_id': str(user_id), 'imported': imported, 'failed': failed, 'duplicates': duplicates},
    )
    return schemas.ImportResult(imported=imported, failed=failed, duplicates=duplicates, errors=errors)


def check_anomaly(db: Session, transaction: models.Transaction) -> Optional[models.Notification]:
    """Flag an expense far above the category's recent average."""
    if transaction.type != 'expense':
        return None
    since = transaction.date - timedelta(days=ANOMALY_LOOKBACK_DAYS)
    history = transaction_repo.get_category_expense_amounts(
        db, transaction.user_id, transaction.category, since, exclude_id=transaction.id
    )
    if len(history) < ANOMALY_MIN_SAMPLES:
        return None
    average = sum(history) / len(history)
    if average <= 0 or float(transaction.amount) <= average * ANOMALY_FACTOR:
        return None
    return NotificationService(db).notify_transaction_anomaly(
        transaction.user_id,
        transaction_id=transaction.id,
        category=transaction.category,
        amount=float(transaction.amount),
        average=average,
    )
