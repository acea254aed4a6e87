from datetime import date

import pytest

from cashnib.utils.periods import add_months, budget_window, month_end, stats_window


def test_month_end_handles_december_and_leap_years():
    assert month_end(date(2026, 12, 5)) == date(2026, 12, 31)
    assert month_end(date(2028, 2, 10)) == date(2028, 2, 29)
    assert month_end(date(2026, 2, 10)) == date(2026, 2, 28)


def test_add_months_crosses_year_boundaries():
    assert add_months(date(2026, 1, 15), -1) == date(2025, 12, 1)
    assert add_months(date(2026, 11, 30), 3) == date(2027, 2, 1)


@pytest.mark.parametrize(
    "period,expected_start",
    [
        ("week", date(2026, 10, 12)),
        ("month", date(2026, 10, 1)),
        ("year", date(2026, 1, 1)),
        ("all", None),
    ],
)
def test_stats_window(period, expected_start):
    today = date(2026, 10, 14)  # Wednesday
    start, end = stats_window(period, today)
    assert start == expected_start
    assert end == today


def test_stats_window_rejects_unknown_period():
    with pytest.raises(ValueError):
        stats_window("decade", date(2026, 10, 14))


def test_budget_window_defaults_to_calendar_period():
    today = date(2026, 10, 14)
    assert budget_window("monthly", today=today) == (date(2026, 10, 1), date(2026, 10, 31))
    assert budget_window("weekly", today=today) == (date(2026, 10, 12), date(2026, 10, 18))
    assert budget_window("yearly", today=today) == (date(2026, 1, 1), date(2026, 12, 31))


def test_budget_window_explicit_dates_win():
    start, end = budget_window(
        "monthly", date(2026, 9, 15), date(2026, 10, 14), today=date(2026, 10, 1)
    )
    assert (start, end) == (date(2026, 9, 15), date(2026, 10, 14))


def test_budget_window_single_bound_outside_current_period():
    today = date(2026, 10, 14)
    # ended last month: start comes from the month containing end_date
    assert budget_window("monthly", end_date=date(2026, 8, 20), today=today) == (
        date(2026, 8, 1), date(2026, 8, 20)
    )
    # starts next year: end comes from the year containing start_date
    assert budget_window("yearly", start_date=date(2027, 3, 1), today=today) == (
        date(2027, 3, 1), date(2027, 12, 31)
    )
    # inside the current period the defaults are kept
    assert budget_window("monthly", end_date=date(2026, 10, 20), today=today) == (
        date(2026, 10, 1), date(2026, 10, 20)
    )
    assert budget_window("monthly", start_date=date(2026, 9, 10), today=today) == (
        date(2026, 9, 10), date(2026, 10, 31)
    )
