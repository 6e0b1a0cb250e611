"""Aggregation engine behind the dashboard.

Every function here is pure: it reads the immutable transaction tuple (and the
budget table where needed) and returns a fresh value. The page calls them again
on every selection change, so nothing is cached between calls.
"""
from collections import Counter
from decimal import ROUND_HALF_UP, Decimal
from functools import reduce
from typing import Callable, Dict, Iterable, Optional, Tuple

from expenses.domain import (
    ALL,
    Budget,
    Category,
    CategoryFilter,
    CategoryUsage,
    MonthOverMonth,
    PaymentMethod,
    Selection,
    Transaction,
)
from expenses.functional import pipe

DAYS_PER_MONTH = 30
MAX_UTILIZATION = 999


def by_month(month: str) -> Callable[[Transaction], bool]:
    def _filter(t: Transaction) -> bool:
        return t.month == month

    return _filter


def by_category(category: CategoryFilter) -> Callable[[Transaction], bool]:
    def _filter(t: Transaction) -> bool:
        return category == ALL or t.category == category

    return _filter


def list_months(trans: Iterable[Transaction]) -> Tuple[str, ...]:
    """Distinct YYYY-MM keys, most recent first."""
    return tuple(sorted({t.month for t in trans}, reverse=True))


def filter_by_month_and_category(
    trans: Iterable[Transaction], month: str, category: CategoryFilter = ALL
) -> Tuple[Transaction, ...]:
    in_month = by_month(month)
    in_category = by_category(category)
    return tuple(t for t in trans if in_month(t) and in_category(t))


def sum_amounts(trans: Iterable[Transaction]) -> Decimal:
    return reduce(lambda acc, t: acc + t.amount, trans, Decimal(0))


def monthly_total(trans: Iterable[Transaction], month: str) -> Decimal:
    return pipe(
        trans,
        lambda ts: filter_by_month_and_category(ts, month, ALL),
        sum_amounts,
    )


def previous_month_key(month: str) -> str:
    """Calendar month before ``month``; "2024-01" -> "2023-12"."""
    year, mon = (int(part) for part in month.split("-"))
    if not 1 <= mon <= 12:
        raise ValueError(f"Invalid month key: {month!r}")
    if mon == 1:
        year, mon = year - 1, 12
    else:
        mon -= 1
    return f"{year:04d}-{mon:02d}"


def month_over_month_change(trans: Iterable[Transaction], month: str) -> MonthOverMonth:
    trans = tuple(trans)
    current = monthly_total(trans, month)
    previous = monthly_total(trans, previous_month_key(month))
    delta = current - previous
    percent = None if previous == 0 else delta / previous * 100
    return MonthOverMonth(current=current, previous=previous, delta=delta, percent=percent)


def utilization_percent(actual: Decimal, budget: Decimal) -> int:
    ratio = actual / budget * 100
    if ratio >= MAX_UTILIZATION:
        return MAX_UTILIZATION
    return int(ratio.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def category_breakdown(
    trans: Iterable[Transaction], budgets: Tuple[Budget, ...], month: str
) -> Tuple[CategoryUsage, ...]:
    """One row per budget entry, in table order, zero spend included."""
    in_month = filter_by_month_and_category(trans, month, ALL)
    rows = []
    for b in budgets:
        actual = sum_amounts(filter(by_category(b.category), in_month))
        rows.append(CategoryUsage(
            category=b.category,
            actual=actual,
            budget=b.limit,
            utilization=utilization_percent(actual, b.limit),
        ))
    return tuple(rows)


def payment_method_split(trans: Iterable[Transaction]) -> Dict[PaymentMethod, Decimal]:
    totals = {method: Decimal(0) for method in PaymentMethod}
    for t in trans:
        totals[t.payment_method] += t.amount
    return totals


def average_per_day(trans: Iterable[Transaction], month: str) -> Decimal:
    # TODO: confirm whether this should divide by the real number of days in the month
    return monthly_total(trans, month) / DAYS_PER_MONTH


def highest_expense(trans: Iterable[Transaction]) -> Optional[Transaction]:
    best = None
    for t in trans:
        if best is None or t.amount > best.amount:
            best = t
    return best


def most_active_category(trans: Iterable[Transaction]) -> Optional[Category]:
    counts = Counter(t.category for t in trans)
    if not counts:
        return None
    top = max(counts.values())
    return next(c for c in Category if counts.get(c) == top)


def default_selection(trans: Iterable[Transaction]) -> Selection:
    months = list_months(trans)
    return Selection(month=months[0] if months else None, category=ALL)
