"""
Spending trends - latest month against each category's own history.

Expense transactions are bucketed by (year, month) and category. The most
recent month is "current"; every earlier month in which a category
appears contributes to its historical average.

    change = (current - historical) / historical * 100   historical > 0
           = 100                                          current > 0 only
           = 0                                            otherwise

    trend  = neutral  when |change| < 2
             up       when change > 0
             down     otherwise

With fewer than two months of data there is nothing to compare against,
so the analyzer falls back to all-time totals marked neutral.

Jitter
------
The dashboard deliberately varies amounts a little between refreshes.
A category factor in [0, 1] comes from sin(first letter + 10-second time
bucket) using the injected clock, scaled by how volatile the category
usually is. Ranking adds uniform noise of +/-50 from the injected random
source. Pass jitter=False for exact figures.
"""

import math
import random
from collections import defaultdict
from datetime import datetime, tzinfo
from typing import Dict, Iterable, List, Optional, Tuple

from budgetme_insights.domain.aggregator import UNCATEGORIZED, finite_or_zero, finite_totals
from budgetme_insights.domain.exceptions import InvalidLimitError
from budgetme_insights.domain.models import Trend, TrendDirection, TransactionLike, coerce_transactions
from budgetme_insights.domain.recommendations import recommend
from budgetme_insights.utils.date_utils import DEFAULT_TIMEZONE, Clock, SystemClock, month_key
from budgetme_insights.utils.formatting import round_half_up

DEFAULT_TREND_LIMIT = 4

NEUTRAL_BAND = 2.0
SIGNIFICANT_CHANGE = 12.0
NARRATIVE_SIGNIFICANT_CHANGE = 15.0

# Built-in expense categories, evaluated ahead of user-defined ones
KNOWN_CATEGORIES = [
    "Debt Payments",
    "Education",
    "Entertainment",
    "Food & Dining",
    "Gifts & Donations",
    "Groceries",
    "Healthcare",
    "Housing",
    "Insurance",
    "Investments",
    "Other Expenses",
    "Personal Care",
    "Shopping",
    "Transportation",
    "Travel",
    "Utilities",
]

_VARIABILITY: Dict[str, float] = {
    "Housing": 0.05,
    "Insurance": 0.05,
    "Debt Payments": 0.05,
    "Entertainment": 0.15,
    "Shopping": 0.15,
    "Food & Dining": 0.15,
    "Utilities": 0.08,
    "Transportation": 0.08,
}
_DEFAULT_VARIABILITY = 0.10

MonthKey = Tuple[int, int]


def percent_change(current: float, historical: float) -> float:
    if historical > 0:
        return finite_or_zero((current - historical) / historical * 100)
    if current > 0:
        return 100.0
    return 0.0


def classify_trend(change: float) -> TrendDirection:
    if abs(change) < NEUTRAL_BAND:
        return TrendDirection.NEUTRAL
    return TrendDirection.UP if change > 0 else TrendDirection.DOWN


def jitter_factor(category: str, now: datetime) -> float:
    """Deterministic for a given category and 10-second window"""
    bucket = math.floor(now.timestamp() * 1000 / 10000)
    seed = ord(category[0]) + bucket
    random_factor = (math.sin(seed) + 1) / 2
    return (random_factor - 0.5) * _VARIABILITY.get(category, _DEFAULT_VARIABILITY)


def _narrate(category: str, change: float, direction: TrendDirection) -> Tuple[str, str]:
    magnitude = abs(round_half_up(change))
    if direction == TrendDirection.NEUTRAL:
        return (
            f"{category} spending is consistent with historical patterns",
            "Continue maintaining your current spending habits",
        )
    increasing = direction == TrendDirection.UP
    if abs(change) > SIGNIFICANT_CHANGE:
        side = "above" if increasing else "below"
        insight = f"{category} spending is {magnitude}% {side} historical average"
    else:
        verb = "increased" if increasing else "decreased"
        insight = f"{category} spending {verb} by {magnitude}% from average"
    return insight, recommend(category, increasing)


def _ordered_categories(*groups: Iterable[str]) -> List[str]:
    seen: Dict[str, None] = {}
    for group in groups:
        for category in group:
            seen.setdefault(category, None)
    return list(seen)


def _all_time_trends(totals: Dict[str, float], now: datetime, jitter: bool) -> List[Trend]:
    trends = []
    for category in _ordered_categories(KNOWN_CATEGORIES, totals):
        total = totals.get(category, 0.0)
        if total == 0:
            continue
        amount = finite_or_zero(total * (1 + jitter_factor(category, now))) if jitter else total
        trends.append(
            Trend(
                category=category,
                current_amount=amount,
                previous_amount=0.0,
                change=0.0,
                trend=TrendDirection.NEUTRAL,
                insight=f"All-time {category} spending: {round_half_up(amount):,}",
                recommendation=recommend(category, False),
            )
        )
    return trends


def _period_trends(
    monthly: Dict[MonthKey, Dict[str, float]],
    totals: Dict[str, float],
    now: datetime,
    jitter: bool,
) -> List[Trend]:
    months = sorted(monthly)
    recent = monthly[months[-1]]
    history = [monthly[key] for key in months[:-1]]

    trends = []
    for category in _ordered_categories(KNOWN_CATEGORIES, recent, totals):
        seen = [month[category] for month in history if category in month]
        historical = finite_or_zero(sum(seen) / len(seen)) if seen else 0.0
        current = recent.get(category, 0.0)
        if current == 0 and historical == 0:
            continue

        if jitter:
            factor = jitter_factor(category, now)
            if current > 0:
                current = finite_or_zero(current * (1 + factor))
            if historical > 0:
                historical = finite_or_zero(historical * (1 + factor * 0.8))

        change = percent_change(current, historical)
        direction = classify_trend(change)
        insight, recommendation = _narrate(category, change, direction)
        trends.append(
            Trend(
                category=category,
                current_amount=current,
                previous_amount=historical,
                change=change,
                trend=direction,
                insight=insight,
                recommendation=recommendation,
            )
        )
    return trends


def analyze_trends(
    transactions: Iterable[TransactionLike],
    limit: int = DEFAULT_TREND_LIMIT,
    clock: Optional[Clock] = None,
    rng: Optional[random.Random] = None,
    jitter: bool = True,
    tz: tzinfo = DEFAULT_TIMEZONE,
) -> List[Trend]:
    """
    Top `limit` category trends, largest current spend first.

    Only expenses with a positive amount and a parseable date count;
    a missing category becomes "Uncategorized".
    """
    if limit < 0:
        raise InvalidLimitError(f"limit must be >= 0, got {limit}")

    monthly: Dict[MonthKey, Dict[str, float]] = defaultdict(lambda: defaultdict(float))
    totals: Dict[str, float] = defaultdict(float)

    for tx in coerce_transactions(transactions, tz):
        if not tx.is_expense or tx.amount <= 0 or tx.date is None:
            continue
        key = month_key(tx.date)
        category = tx.category or UNCATEGORIZED
        monthly[key][category] += tx.amount
        totals[category] += tx.amount

    monthly = {key: finite_totals(bucket) for key, bucket in monthly.items()}
    totals = finite_totals(totals)
    if not monthly:
        return []

    now = (clock or SystemClock(tz)).now()
    if len(monthly) < 2:
        trends = _all_time_trends(totals, now, jitter)
        trends.sort(key=lambda t: t.current_amount, reverse=True)
        return trends[:limit]

    trends = _period_trends(monthly, totals, now, jitter)
    source = rng or random.Random()
    scores = {
        id(trend): trend.current_amount + ((source.random() - 0.5) * 100 if jitter else 0.0)
        for trend in trends
    }
    trends.sort(key=lambda t: scores[id(t)], reverse=True)
    return trends[:limit]


def describe_trend(trend: Trend) -> str:
    """One-line narrative for a trend card"""
    magnitude = abs(round_half_up(trend.change))
    significant = abs(trend.change) > NARRATIVE_SIGNIFICANT_CHANGE

    if trend.trend == TrendDirection.UP and significant:
        return f"Your {trend.category} spending increased significantly by {magnitude}%. This warrants attention."
    if trend.trend == TrendDirection.DOWN and significant:
        return f"Excellent! You reduced {trend.category} expenses by {magnitude}% this month."
    if trend.trend == TrendDirection.NEUTRAL:
        return f"Your {trend.category} spending remained stable, showing consistent budgeting."
    verb = "increased" if trend.trend == TrendDirection.UP else "decreased"
    return f"{trend.category} spending {verb} by {magnitude}%."
