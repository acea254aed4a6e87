"""Date window helpers shared by stats, budgets and reports."""
from __future__ import annotations

from datetime import date, timedelta
from typing import Optional, Tuple

STATS_PERIODS = ("week", "month", "year", "all")
BUDGET_PERIODS = ("weekly", "monthly", "yearly")


def month_start(day: date) -> date:
    return date(day.year, day.month, 1)


def month_end(day: date) -> date:
    if day.month == 12:
        return date(day.year, 12, 31)
    return date(day.year, day.month + 1, 1) - timedelta(days=1)


def add_months(day: date, months: int) -> date:
    """Shift to the first day of the month `months` away from `day`."""
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def stats_window(period: str, today: Optional[date] = None) -> Tuple[Optional[date], date]:
    """Return (start, end) for a stats period; start is None for 'all'."""
    today = today or date.today()
    if period == "week":
        return today - timedelta(days=today.weekday()), today
    if period == "month":
        return month_start(today), today
    if period == "year":
        return date(today.year, 1, 1), today
    if period == "all":
        return None, today
    raise ValueError(f"Unknown period '{period}'. Expected one of: {', '.join(STATS_PERIODS)}")


def _period_bounds(period: str, day: date) -> Tuple[date, date]:
    if period == "weekly":
        start = day - timedelta(days=day.weekday())
        return start, start + timedelta(days=6)
    if period == "yearly":
        return date(day.year, 1, 1), date(day.year, 12, 31)
    return month_start(day), month_end(day)


def budget_window(
    period: str,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    today: Optional[date] = None,
) -> Tuple[date, date]:
    """Resolve the active window of a budget.

    Explicit dates win; a missing bound falls back to the calendar period that
    contains `today`. When that would leave the window inverted (a budget that
    ended before the current period, or starts after it), the missing bound
    comes from the period containing the explicit date instead.
    """
    today = today or date.today()
    default_start, default_end = _period_bounds(period, today)
    if start_date is None and end_date is not None and default_start > end_date:
        default_start = _period_bounds(period, end_date)[0]
    if end_date is None and start_date is not None and default_end < start_date:
        default_end = _period_bounds(period, start_date)[1]
    return start_date or default_start, end_date or default_end
