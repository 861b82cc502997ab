"""Scalar totals over a transaction snapshot"""

import math
from collections import defaultdict
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, TypeVar

from budgetme_insights.domain.models import (
    Aggregates,
    CategoryBreakdownItem,
    DashboardSummary,
    Transaction,
    TransactionLike,
    TransactionType,
    coerce_transactions,
)
from budgetme_insights.utils.date_utils import month_key

INCOME_TYPES = (TransactionType.INCOME, TransactionType.CASH_IN)
UNCATEGORIZED = "Uncategorized"

K = TypeVar("K")


def finite_or_zero(value: float) -> float:
    """Replace NaN/Infinity with 0"""
    return value if math.isfinite(value) else 0.0


def finite_totals(totals: Mapping[K, float]) -> Dict[K, float]:
    """Per-bucket sums with overflowed buckets zeroed"""
    return {key: finite_or_zero(amount) for key, amount in totals.items()}


def savings_rate(income: float, expenses: float) -> float:
    """
    (income - expenses) / income * 100, floored at 0.

    0 when there is no income; a deficit period saved nothing, so it also
    reports 0 rather than a negative rate.
    """
    if income <= 0:
        return 0.0
    return max(0.0, finite_or_zero((income - expenses) / income * 100))


def aggregate(transactions: Iterable[TransactionLike]) -> Aggregates:
    """
    Reduce a transaction set into income, expenses, balance and savings rate.

    Income counts `income` and `cash_in`; expenses count `expense`.
    Transfers and contributions move money between the user's own
    accounts and are ignored. Never raises: malformed amounts were
    already coerced to 0 and every result is guarded against NaN/Infinity.
    """
    income = 0.0
    expenses = 0.0
    for tx in coerce_transactions(transactions):
        if tx.type in INCOME_TYPES:
            income += tx.amount
        elif tx.type == TransactionType.EXPENSE:
            expenses += tx.amount

    income = finite_or_zero(income)
    expenses = finite_or_zero(expenses)
    balance = finite_or_zero(income - expenses)

    return Aggregates(
        income=income,
        expenses=expenses,
        balance=balance,
        savings_rate=savings_rate(income, expenses),
    )


def _monthly_totals(transactions: List[Transaction]) -> Dict[Tuple[int, int], Tuple[float, float]]:
    income: Dict[Tuple[int, int], float] = defaultdict(float)
    expenses: Dict[Tuple[int, int], float] = defaultdict(float)
    for tx in transactions:
        if tx.date is None:
            continue
        key = month_key(tx.date)
        # touch both so months with a single kind still show up
        income[key] += tx.amount if tx.type in INCOME_TYPES else 0.0
        expenses[key] += tx.amount if tx.type == TransactionType.EXPENSE else 0.0
    return {key: (finite_or_zero(income[key]), finite_or_zero(expenses[key])) for key in income}


def _pct_change(current: float, previous: float) -> Optional[float]:
    return finite_or_zero((current - previous) / previous * 100) if previous > 0 else None


def summarize(transactions: Iterable[TransactionLike]) -> DashboardSummary:
    """
    Dashboard headline: all-time totals, the latest month's income and
    expenses, and changes against the month before it.
    """
    txs = coerce_transactions(transactions)
    totals = aggregate(txs)
    monthly = _monthly_totals(txs)

    months = sorted(monthly)
    latest_income, latest_expenses = monthly[months[-1]] if months else (0.0, 0.0)
    prev_income, prev_expenses = monthly[months[-2]] if len(months) > 1 else (0.0, 0.0)

    prev_rate = savings_rate(prev_income, prev_expenses)
    prev_balance = prev_income - prev_expenses
    cur_balance = latest_income - latest_expenses

    return DashboardSummary(
        total_income=totals.income,
        total_expenses=totals.expenses,
        savings_rate=totals.savings_rate,
        monthly_income=latest_income,
        monthly_expenses=latest_expenses,
        balance_change=(
            finite_or_zero((cur_balance - prev_balance) / abs(prev_balance) * 100) if prev_balance != 0 else None
        ),
        income_change=_pct_change(latest_income, prev_income),
        expense_change=_pct_change(latest_expenses, prev_expenses),
        savings_rate_change=totals.savings_rate - prev_rate if prev_rate != 0 else None,
    )


def category_breakdown(transactions: Iterable[TransactionLike]) -> List[CategoryBreakdownItem]:
    """All-time expense totals per category, largest first"""
    totals: Dict[str, float] = defaultdict(float)
    for tx in coerce_transactions(transactions):
        if tx.is_expense:
            totals[tx.category or UNCATEGORIZED] += tx.amount

    items = [CategoryBreakdownItem(name=name, amount=amount) for name, amount in finite_totals(totals).items()]
    items.sort(key=lambda item: item.amount, reverse=True)
    return items
