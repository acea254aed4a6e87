"""Budget performance and over-spend alerts."""
from __future__ import annotations

import logging
import os
import uuid
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from cashnib.db import models, schemas
from cashnib.db.repositories import budgets as budget_repo
from cashnib.db.repositories import notifications as notification_repo
from cashnib.db.repositories import transactions as transaction_repo
from cashnib.services.notification_service import TYPE_BUDGET_ALERT, NotificationService
from cashnib.utils.periods import budget_window

logger = logging.getLogger(__name__)

ON_TRACK_RATIO = 75.0


def alert_threshold() -> float:
    raw = os.getenv("BUDGET_ALERT_THRESHOLD", "100")
    try:
        return float(raw)
    except ValueError:
        logger.warning("Invalid BUDGET_ALERT_THRESHOLD '%s'; using 100.", raw)
        return 100.0


def category_status(spent: float, budgeted: float) -> str:
    if spent > budgeted:
        return 'over'
    if budgeted > 0 and spent / budgeted * 100 >= ON_TRACK_RATIO:
        return 'on_track'
    return 'under'


def _percentage(spent: float, budgeted: float) -> float:
    return round(spent / budgeted * 100, 2) if budgeted > 0 else 0.0


def budget_performance(db: Session, budget: models.Budget, today: Optional[date] = None) -> schemas.BudgetPerformance:
    start, end = budget_window(budget.period, budget.start_date, budget.end_date, today)
    categories = budget.categories or []
    names = [c.get('category_name') for c in categories]
    spent_by_category = transaction_repo.sum_expenses_by_category(db, budget.user_id, start, end, names)

    rows: List[schemas.CategoryPerformance] = []
    for entry in categories:
        name = entry.get('category_name')
        budgeted = float(entry.get('allocated_amount') or 0)
        spent = round(spent_by_category.get(name, 0.0), 2)
        rows.append(schemas.CategoryPerformance(
            category=name,
            budgeted=budgeted,
            spent=spent,
            remaining=round(budgeted - spent, 2),
            percentage_used=_percentage(spent, budgeted),
            status=category_status(spent, budgeted),
        ))

    total_budget = float(budget.total_amount or 0)
    total_spent = round(sum(r.spent for r in rows), 2)
    return schemas.BudgetPerformance(
        budget_id=budget.id,
        budget_name=budget.name,
        window_start=start,
        window_end=end,
        total_budget=total_budget,
        total_spent=total_spent,
        remaining_budget=round(total_budget - total_spent, 2),
        percentage_used=_percentage(total_spent, total_budget),
        category_performance=rows,
    )


def _already_alerted(db: Session, user_id: uuid.UUID, budget_id: uuid.UUID, category: str, window: str) -> bool:
    matches = notification_repo.get_notifications_by_type(
        db, user_id, TYPE_BUDGET_ALERT, budget_id=str(budget_id), category=category, window=window
    )
    return bool(matches)


def check_budget_alerts(
    db: Session,
    transaction: models.Transaction,
    *,
    threshold: Optional[float] = None,
    today: Optional[date] = None,
) -> List[models.Notification]:
    """Raise a budget alert when `transaction` pushes a category past the threshold.

    Only expenses dated inside an active budget's window are considered, and
    each (budget, category, window) is alerted at most once.
    """
    if transaction.type != 'expense':
        return []
    threshold = alert_threshold() if threshold is None else threshold
    service = NotificationService(db)
    created: List[models.Notification] = []
    for budget in budget_repo.get_active_budgets(db, transaction.user_id):
        start, end = budget_window(budget.period, budget.start_date, budget.end_date, today)
        if not (start <= transaction.date <= end):
            continue
        entry = next(
            (c for c in (budget.categories or []) if c.get('category_name') == transaction.category),
            None,
        )
        if entry is None:
            continue
        budgeted = float(entry.get('allocated_amount') or 0)
        if budgeted <= 0:
            continue
        spent = transaction_repo.sum_expenses_by_category(
            db, transaction.user_id, start, end, [transaction.category]
        ).get(transaction.category, 0.0)
        before = spent - float(transaction.amount)
        if _percentage(before, budgeted) >= threshold or _percentage(spent, budgeted) < threshold:
            continue
        window = f"{start.isoformat()}/{end.isoformat()}"
        if _already_alerted(db, transaction.user_id, budget.id, transaction.category, window):
            continue
        notification = service.notify_budget_alert(
            transaction.user_id,
            budget_id=budget.id,
            budget_name=budget.name,
            category=transaction.category,
            spent=round(spent, 2),
            budgeted=budgeted,
            window=window,
        )
        if notification is not None:
            created.append(notification)
    return created
