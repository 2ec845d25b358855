"""Relative reporting periods and the transaction filters behind them."""

from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Dict, Iterable, List, Optional, Union

from .models import Transaction

CURRENT_MONTH = 'current_month'
LAST_MONTH = 'last_month'
LAST_3_MONTHS = 'last_3_months'
LAST_6_MONTHS = 'last_6_months'
THIS_YEAR = 'this_year'
ALL_TIME = 'all_time'

PERIOD_OPTIONS = [CURRENT_MONTH, LAST_MONTH, LAST_3_MONTHS, LAST_6_MONTHS, THIS_YEAR, ALL_TIME]

PERIOD_LABELS: Dict[str, str] = {
    CURRENT_MONTH: 'Current Month',
    LAST_MONTH: 'Last Month',
    LAST_3_MONTHS: 'Last 3 Months',
    LAST_6_MONTHS: 'Last 6 Months',
    THIS_YEAR: 'This Year',
    ALL_TIME: 'All Time',
}

DateLike = Union[date, datetime]


def period_label(period_key: str) -> str:
    return PERIOD_LABELS.get(period_key, PERIOD_LABELS[ALL_TIME])


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move a (year, month) pair by ``delta`` months, rolling over year boundaries."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def months_back_start(now: DateLike, months: int) -> date:
    """First day of the month ``months`` months before ``now``'s month."""
    year, month = shift_month(now.year, now.month, -months)
    return date(year, month, 1)


def _period_predicate(period_key: str, now: DateLike) -> Optional[Callable[[date], bool]]:
    if period_key == CURRENT_MONTH:
        return lambda d: (d.year, d.month) == (now.year, now.month)
    if period_key == LAST_MONTH:
        target = shift_month(now.year, now.month, -1)
        return lambda d: (d.year, d.month) == target
    if period_key == LAST_3_MONTHS:
        start = months_back_start(now, 3)
        return lambda d: d >= start
    if period_key == LAST_6_MONTHS:
        start = months_back_start(now, 6)
        return lambda d: d >= start
    if period_key == THIS_YEAR:
        return lambda d: d.year == now.year
    return None


def filter_by_period(
    transactions: Iterable[Transaction],
    period_key: str,
    now: Optional[DateLike] = None,
) -> List[Transaction]:
    """Keep the transactions that fall inside the named period relative to ``now``.

    ``all_time`` and unrecognised keys return every transaction. Windowed
    periods drop transactions whose date cannot be parsed. Result order
    follows the input; use :func:`sort_most_recent` for display order.
    """
    transactions = list(transactions)
    predicate = _period_predicate(period_key, now or datetime.now())
    if predicate is None:
        return transactions

    selected: List[Transaction] = []
    for t in transactions:
        occurred = t.parsed_date()
        if occurred is not None and predicate(occurred):
            selected.append(t)
    return selected


def sort_most_recent(transactions: Iterable[Transaction]) -> List[Transaction]:
    return sorted(transactions, key=lambda t: t.date, reverse=True)
