"""
Report services: income/expense summaries, category breakdowns and monthly
spending trends.
"""
from __future__ import annotations

import uuid
from collections import defaultdict
from datetime import date
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from cashnib.db import schemas
from cashnib.db.repositories import transactions as transaction_repo
from cashnib.utils.periods import add_months, month_start

TOP_CATEGORY_COUNT = 5


def _breakdown(by_category: Dict[str, float]) -> List[schemas.CategoryAmount]:
    total = sum(by_category.values())
    ordered = sorted(by_category.items(), key=lambda kv: (-kv[1], kv[0]))
    return [
        schemas.CategoryAmount(
            category=category,
            amount=round(amount, 2),
            percentage=round(amount / total * 100, 2) if total else 0.0,
        )
        for category, amount in ordered
    ]


def financial_summary(
    db: Session,
    user_id: uuid.UUID,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    today: Optional[date] = None,
) -> schemas.FinancialSummary:
    """Income vs. expenses over a date range; defaults to the current month."""
    today = today or date.today()
    start = start_date or month_start(today)
    end = end_date or today
    rows = transaction_repo.get_transactions_in_range(db, user_id, start, end)

    income = 0.0
    expenses = 0.0
    by_category: Dict[str, float] = defaultdict(float)
    for t in rows:
        amount = float(t.amount)
        if t.type == 'income':
            income += amount
        elif t.type == 'expense':
            expenses += amount
            by_category[t.category] += amount

    return schemas.FinancialSummary(
        start_date=start,
        end_date=end,
        total_income=round(income, 2),
        total_expenses=round(expenses, 2),
        net_income=round(income - expenses, 2),
        top_categories=_breakdown(by_category)[:TOP_CATEGORY_COUNT],
    )


def spending_analysis(
    db: Session,
    user_id: uuid.UUID,
    months: int = 6,
    today: Optional[date] = None,
) -> schemas.SpendingAnalysis:
    """Expense trend over the last `months` calendar months, current one included."""
    today = today or date.today()
    start = add_months(month_start(today), -(months - 1))
    rows = transaction_repo.get_transactions_in_range(db, user_id, start, today, type='expense')

    by_category: Dict[str, float] = defaultdict(float)
    by_month: Dict[str, float] = {add_months(start, i).strftime('%Y-%m'): 0.0 for i in range(months)}
    for t in rows:
        amount = float(t.amount)
        by_category[t.category] += amount
        key = t.date.strftime('%Y-%m')
        if key in by_month:
            by_month[key] += amount

    total = sum(by_category.values())
    days = (today - start).days + 1
    return schemas.SpendingAnalysis(
        start_date=start,
        end_date=today,
        category_breakdown=_breakdown(by_category),
        monthly_trends=[
            schemas.MonthlyTrendPoint(month=month, amount=round(amount, 2))
            for month, amount in by_month.items()
        ],
        average_daily=round(total / days, 2) if days > 0 else 0.0,
        average_monthly=round(total / months, 2) if months > 0 else 0.0,
    )
