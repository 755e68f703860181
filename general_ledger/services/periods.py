"""
Financial year windows.

A financial year runs from the first day of the configured start
month to the day before the same date next year (April to March
by default).
"""

import datetime as dt

from general_ledger.config import get_settings


def _start_month(start_month: int | None) -> int:
    month = start_month or get_settings().FISCAL_YEAR_START_MONTH
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid fiscal year start month: {month}")
    return month


def financial_year(
    start_year: int, start_month: int | None = None
) -> tuple[dt.date, dt.date]:
    """Return the inclusive (first_day, last_day) of a financial year."""
    month = _start_month(start_month)
    first_day = dt.date(start_year, month, 1)
    next_first = dt.date(start_year + 1, month, 1)
    return first_day, next_first - dt.timedelta(days=1)


def financial_year_for(
    target: dt.date, start_month: int | None = None
) -> tuple[dt.date, dt.date]:
    """The financial year window containing `target`."""
    month = _start_month(start_month)
    start_year = target.year - 1 if target.month < month else target.year
    return financial_year(start_year, month)


def financial_year_label(start_year: int) -> str:
    """`FY 2024-25` style label."""
    return f"FY {start_year}-{str(start_year + 1)[-2:]}"
