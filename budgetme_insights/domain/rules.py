"""
Insight rules - independent checks over one financial snapshot.

Every rule is a plain function of a RuleContext that returns one Insight
or None. Rules never look at each other's output, so any number of them
may fire on the same snapshot. RULES fixes the evaluation order, which
is also the order of the candidate list before selection.

Rules that need "now" or a random draw take them from the context
(ctx.now, ctx.rng), never from the wall clock or the global RNG.
"""

import random
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from functools import cached_property
from typing import Callable, Dict, List, Optional, Sequence

from budgetme_insights.domain.aggregator import UNCATEGORIZED, finite_or_zero, finite_totals
from budgetme_insights.domain.models import Budget, Insight, InsightType, Transaction, TransactionType
from budgetme_insights.utils.date_utils import MONTH_ABBREVIATIONS, month_key, shift_month
from budgetme_insights.utils.formatting import format_currency, format_date, format_percentage, round_half_up


@dataclass(frozen=True)
class RuleThresholds:
    """Tunable cut-offs that have no fixed business definition"""

    round_number_share: float = 0.30  # of expense transaction count
    impulse_day_share: float = 0.15  # of total expenses, for a 5+ purchase day
    heavy_day_share: float = 0.10  # of total expenses, for one day of the month
    tip_probability: float = 0.3


@dataclass
class RuleContext:
    """Guarded inputs shared by every rule in one evaluation pass"""

    transactions: Sequence[Transaction]
    budgets: Sequence[Budget]
    income: float
    expenses: float
    savings_rate: float
    now: datetime
    rng: random.Random
    thresholds: RuleThresholds = field(default_factory=RuleThresholds)

    @classmethod
    def build(
        cls,
        transactions: Sequence[Transaction],
        budgets: Sequence[Budget],
        income: float,
        expenses: float,
        savings_rate: float,
        now: datetime,
        rng: random.Random,
        thresholds: Optional[RuleThresholds] = None,
    ) -> "RuleContext":
        """Clamp totals to finite, non-negative values before any rate math"""
        return cls(
            transactions=transactions,
            budgets=budgets,
            income=max(0.0, finite_or_zero(float(income))),
            expenses=max(0.0, finite_or_zero(float(expenses))),
            savings_rate=finite_or_zero(float(savings_rate)),
            now=now,
            rng=rng,
            thresholds=thresholds or RuleThresholds(),
        )

    @property
    def balance(self) -> float:
        return self.income - self.expenses

    @cached_property
    def expense_transactions(self) -> List[Transaction]:
        return [tx for tx in self.transactions if tx.is_expense]

    @cached_property
    def dated_expenses(self) -> List[Transaction]:
        return [tx for tx in self.expense_transactions if tx.date is not None]


RuleFn = Callable[[RuleContext], Optional[Insight]]


@dataclass(frozen=True)
class Rule:
    name: str
    evaluate: RuleFn


def _total(transactions: Sequence[Transaction]) -> float:
    return finite_or_zero(sum(tx.amount for tx in transactions))


def _mentions(tx: Transaction, keywords: Sequence[str]) -> bool:
    haystack = " ".join(part.lower() for part in (tx.category, tx.notes, tx.description) if part)
    return any(keyword in haystack for keyword in keywords)


def _plural(count: int, singular: str, plural: str) -> str:
    return singular if count == 1 else plural


# ── Critical alerts ───────────────────────────────────────────────────────────


def no_income(ctx: RuleContext) -> Optional[Insight]:
    if ctx.income == 0 and ctx.expenses > 0:
        return Insight(
            title="Critical: No income recorded",
            description=(
                f"You have expenses of {format_currency(ctx.expenses)} but no recorded income. "
                "Add your income sources to get accurate financial insights and improve your financial health score."
            ),
            type=InsightType.DANGER,
            icon="lucide:alert-triangle",
        )
    return None


def negative_balance(ctx: RuleContext) -> Optional[Insight]:
    gap = format_currency(abs(ctx.balance))
    if ctx.balance < -5000:
        return Insight(
            title="Urgent: Significant negative balance",
            description=(
                f"Your expenses exceed income by {gap}. "
                "Take immediate action to balance your finances or review your budget."
            ),
            type=InsightType.DANGER,
            icon="lucide:alert-circle",
        )
    if ctx.balance < 0:
        return Insight(
            title="Warning: Negative balance detected",
            description=f"Your expenses exceed income by {gap}. Consider reducing expenses or increasing income.",
            type=InsightType.WARNING,
            icon="lucide:alert-triangle",
        )
    return None


def unusual_subscription(ctx: RuleContext) -> Optional[Insight]:
    flagged = [tx for tx in ctx.transactions if tx.amount > 1000 and _mentions(tx, ("subscription",))]
    if not flagged:
        return None

    large = [tx for tx in flagged if tx.amount > 10000]
    if large:
        biggest = max(large, key=lambda tx: tx.amount)
        when = f" on {format_date(biggest.date)}" if biggest.date else ""
        return Insight(
            title="Critical: Unusual subscription charge",
            description=(
                f"There's an unusually large subscription charge of {format_currency(biggest.amount)}{when}. "
                "Please verify this transaction."
            ),
            type=InsightType.DANGER,
            icon="lucide:alert-circle",
        )

    count = len(flagged)
    noun = _plural(count, "transaction", "transactions")
    verb = _plural(count, "doesn't", "don't")
    return Insight(
        title="Unusual spending detected",
        description=f"Found {count} {noun} that {verb} match your typical spending pattern.",
        type=InsightType.WARNING,
        icon="lucide:alert-circle",
    )


def over_budget(ctx: RuleContext) -> Optional[Insight]:
    over = [budget for budget in ctx.budgets if budget.is_over]
    if not over:
        return None
    count = len(over)
    names = ", ".join(budget.display_name for budget in over)
    return Insight(
        title=f"Over budget in {count} {_plural(count, 'category', 'categories')}",
        description=(
            f"You've exceeded your budget in {names}. "
            "Consider adjusting your spending or your budget amounts."
        ),
        type=InsightType.DANGER,
        icon="lucide:alert-triangle",
    )


def savings_ladder(ctx: RuleContext) -> Optional[Insight]:
    """Exactly one rung of the income/expense ladder, checked top to bottom"""
    income, expenses, rate = ctx.income, ctx.expenses, ctx.savings_rate

    if 0 < income < expenses:
        deficit = expenses - income
        deficit_pct = deficit / income * 100
        if deficit_pct > 50:
            return Insight(
                title="Critical: Major overspending",
                description=(
                    f"You spent {format_currency(deficit)} ({format_percentage(deficit_pct)}) more than earned. "
                    "Immediate action needed."
                ),
                type=InsightType.DANGER,
                icon="lucide:trending-down",
            )
        return Insight(
            title="Spending exceeds income",
            description=(
                f"You spent {format_currency(deficit)} more than you earned this period. "
                "Review your expenses to identify areas to cut back."
            ),
            type=InsightType.DANGER,
            icon="lucide:trending-down",
        )

    if income <= expenses:
        return None

    pct = format_percentage(rate)
    if rate >= 30:
        return Insight(
            title="Outstanding savings rate!",
            description=f"Excellent! You're saving {pct} of your income. Consider investing excess funds for growth.",
            type=InsightType.SUCCESS,
            icon="lucide:trophy",
        )
    if rate >= 20:
        return Insight(
            title="Great savings rate!",
            description=f"You're saving {pct} of your income, which meets or exceeds the recommended 20%.",
            type=InsightType.SUCCESS,
            icon="lucide:piggy-bank",
        )
    if rate >= 10:
        return Insight(
            title="Improve your savings",
            description=f"Your current savings rate is {pct}. Try to save at least 20% of your income for financial security.",
            type=InsightType.INFO,
            icon="lucide:line-chart",
        )
    if rate >= 5:
        return Insight(
            title="Low savings rate warning",
            description=f"You're only saving {pct} of your income. Consider reducing expenses to improve financial security.",
            type=InsightType.WARNING,
            icon="lucide:alert-circle",
        )
    return Insight(
        title="Critical: Minimal savings",
        description=f"Your savings rate is only {pct}. This leaves you vulnerable to financial emergencies.",
        type=InsightType.DANGER,
        icon="lucide:shield-alert",
    )


# ── Spending patterns ─────────────────────────────────────────────────────────


def spending_spike(ctx: RuleContext) -> Optional[Insight]:
    # baseline is the all-time total spread over a 30-day month
    daily_average = ctx.expenses / 30
    cutoff = ctx.now - timedelta(days=7)
    recent = [tx for tx in ctx.dated_expenses if tx.date >= cutoff]
    if not recent or daily_average <= 0:
        return None

    recent_daily = _total(recent) / 7
    if recent_daily > daily_average * 1.5:
        return Insight(
            title="Recent spending spike",
            description=(
                f"Your daily spending this week ({format_currency(recent_daily)}) is "
                f"{format_percentage((recent_daily / daily_average - 1) * 100)} above average."
            ),
            type=InsightType.WARNING,
            icon="lucide:arrow-up",
        )
    if recent_daily < daily_average * 0.7:
        return Insight(
            title="Great spending control!",
            description=(
                f"Excellent! Your daily spending this week ({format_currency(recent_daily)}) is "
                f"{format_percentage((1 - recent_daily / daily_average) * 100)} below average."
            ),
            type=InsightType.SUCCESS,
            icon="lucide:thumbs-up",
        )
    return None


def large_expense(ctx: RuleContext) -> Optional[Insight]:
    if ctx.expenses <= 0:
        return None
    large = [tx for tx in ctx.expense_transactions if tx.amount > ctx.expenses * 0.15]
    if not large:
        return None

    largest = max(large, key=lambda tx: tx.amount)
    share = largest.amount / ctx.expenses * 100
    return Insight(
        title="Large expense detected",
        description=(
            f"Your largest expense ({format_currency(largest.amount)}) represents "
            f"{format_percentage(share)} of total spending."
        ),
        type=InsightType.WARNING if share > 30 else InsightType.INFO,
        icon="lucide:alert-circle",
    )


def small_purchases(ctx: RuleContext) -> Optional[Insight]:
    small = [tx for tx in ctx.expense_transactions if tx.amount < 100]
    if len(small) <= 20 or ctx.expenses <= 0:
        return None
    small_total = _total(small)
    return Insight(
        title="Many small purchases",
        description=(
            f"You have {len(small)} transactions under {format_currency(100)}, totaling "
            f"{format_currency(small_total)} ({format_percentage(small_total / ctx.expenses * 100)} of expenses)."
        ),
        type=InsightType.INFO,
        icon="lucide:coins",
    )


def weekend_spending(ctx: RuleContext) -> Optional[Insight]:
    weekend = [tx for tx in ctx.dated_expenses if tx.date.weekday() >= 5]
    weekday = [tx for tx in ctx.dated_expenses if tx.date.weekday() < 5]
    if not weekend or not weekday:
        return None

    # per-day averages: two weekend days against five weekdays
    weekend_avg = _total(weekend) / max(1.0, len(weekend) / 2)
    weekday_avg = _total(weekday) / max(1.0, len(weekday) / 5)
    if weekday_avg > 0 and weekend_avg > weekday_avg * 1.5:
        return Insight(
            title="High weekend spending",
            description=(
                f"You spend {format_percentage((weekend_avg / weekday_avg - 1) * 100)} more per day on weekends. "
                "Consider budgeting for weekend activities."
            ),
            type=InsightType.WARNING,
            icon="lucide:calendar",
        )
    return None


def month_over_month(ctx: RuleContext) -> Optional[Insight]:
    current = month_key(ctx.now)
    previous = shift_month(*current, -1)
    this_month = [tx for tx in ctx.dated_expenses if month_key(tx.date) == current]
    last_month = [tx for tx in ctx.dated_expenses if month_key(tx.date) == previous]
    if not this_month or not last_month:
        return None

    current_total = _total(this_month)
    last_total = _total(last_month)
    change = (current_total - last_total) / last_total * 100 if last_total > 0 else 0.0

    if change > 20:
        return Insight(
            title="Spending increased significantly",
            description=(
                f"Your spending this month is {format_percentage(change)} higher than last month. "
                "Review recent purchases."
            ),
            type=InsightType.WARNING,
            icon="lucide:trending-up",
        )
    if change < -15:
        return Insight(
            title="Great spending reduction!",
            description=f"Excellent! You've reduced spending by {format_percentage(abs(change))} compared to last month.",
            type=InsightType.SUCCESS,
            icon="lucide:trending-down",
        )
    return None


def income_consistency(ctx: RuleContext) -> Optional[Insight]:
    amounts = [tx.amount for tx in ctx.transactions if tx.type == TransactionType.INCOME]
    if len(amounts) < 2:
        return None

    average = ctx.income / len(amounts)
    variability = (max(amounts) - min(amounts)) / average * 100 if average > 0 else 0.0

    if variability > 50:
        return Insight(
            title="Irregular income detected",
            description=(
                f"Your income varies by {format_percentage(variability)}. "
                "Consider building a larger emergency fund for stability."
            ),
            type=InsightType.INFO,
            icon="lucide:line-chart",
        )
    if variability < 10:
        return Insight(
            title="Stable income stream",
            description=f"Great! Your income is very consistent with only {format_percentage(variability)} variation.",
            type=InsightType.SUCCESS,
            icon="lucide:check-circle",
        )
    return None


def emergency_fund(ctx: RuleContext) -> Optional[Insight]:
    # roughly one month per 30 expense entries
    monthly_expenses = ctx.expenses / max(1.0, len(ctx.expense_transactions) / 30)
    if ctx.income > ctx.expenses and monthly_expenses > 0:
        months = (ctx.income - ctx.expenses) / monthly_expenses
    else:
        months = 0.0

    if months < 1 and ctx.income > 0:
        return Insight(
            title="Build emergency fund",
            description=(
                "You need an emergency fund covering 3-6 months of expenses. "
                "Start saving immediately for financial security."
            ),
            type=InsightType.DANGER,
            icon="lucide:shield-alert",
        )
    if months >= 6:
        return Insight(
            title="Strong emergency fund!",
            description=f"Excellent! Your current savings can cover {int(months)} months of expenses.",
            type=InsightType.SUCCESS,
            icon="lucide:shield-check",
        )
    if months >= 3:
        return Insight(
            title="Good emergency fund",
            description=f"You have {int(months)} months of expenses saved. Consider building up to 6 months.",
            type=InsightType.INFO,
            icon="lucide:shield",
        )
    return None


RECURRING_KEYWORDS = ("subscription", "monthly", "netflix", "spotify", "gym", "membership", "plan")


def _looks_recurring(tx: Transaction) -> bool:
    if tx.raw_amount is not None and tx.raw_amount.endswith(".00"):
        return True
    haystack = " ".join(part.lower() for part in (tx.notes, tx.description) if part)
    return any(keyword in haystack for keyword in RECURRING_KEYWORDS)


def recurring_payments(ctx: RuleContext) -> Optional[Insight]:
    recurring = [tx for tx in ctx.expense_transactions if _looks_recurring(tx)]
    if len(recurring) < 5:
        return None

    recurring_total = _total(recurring)
    share = recurring_total / ctx.expenses * 100 if ctx.expenses > 0 else 0.0
    return Insight(
        title="Multiple subscriptions detected",
        description=(
            f"You have {len(recurring)} potential subscriptions costing {format_currency(recurring_total)} "
            f"({format_percentage(share)} of expenses)."
        ),
        type=InsightType.WARNING if share > 15 else InsightType.INFO,
        icon="lucide:repeat",
    )


def heavy_spending_day(ctx: RuleContext) -> Optional[Insight]:
    by_day: Dict[int, float] = defaultdict(float)
    for tx in ctx.dated_expenses:
        by_day[tx.date.day] += tx.amount
    by_day = finite_totals(by_day)

    cutoff = ctx.expenses * ctx.thresholds.heavy_day_share
    heavy = {day: amount for day, amount in by_day.items() if amount > cutoff}
    if not heavy:
        return None

    top_day = max(heavy, key=heavy.get)
    return Insight(
        title="Heavy spending day identified",
        description=(
            f"Day {top_day} of the month shows highest spending ({format_currency(heavy[top_day])}). "
            "Plan major purchases carefully."
        ),
        type=InsightType.INFO,
        icon="lucide:calendar-days",
    )


def high_activity_days(ctx: RuleContext) -> Optional[Insight]:
    per_day = Counter(tx.date.date() for tx in ctx.dated_expenses)
    if not per_day:
        return None

    average = sum(per_day.values()) / len(per_day)
    busy = sum(1 for count in per_day.values() if count > average * 2)
    if busy == 0:
        return None
    return Insight(
        title="Spending pattern detected",
        description=(
            f"You have {busy} days with unusually high transaction activity. "
            "Consider consolidating purchases."
        ),
        type=InsightType.INFO,
        icon="lucide:bar-chart-3",
    )


def round_numbers(ctx: RuleContext) -> Optional[Insight]:
    expenses = ctx.expense_transactions
    if not expenses:
        return None
    # every multiple of 100 is also a multiple of 50
    rounded = [tx for tx in expenses if tx.amount % 50 == 0]
    if len(rounded) <= len(expenses) * ctx.thresholds.round_number_share:
        return None
    return Insight(
        title="Round number spending pattern",
        description=(
            f"{format_percentage(len(rounded) / len(expenses) * 100)} of your transactions are round numbers. "
            "This might indicate budgeting opportunities."
        ),
        type=InsightType.INFO,
        icon="lucide:calculator",
    )


def category_concentration(ctx: RuleContext) -> Optional[Insight]:
    by_category: Dict[str, float] = defaultdict(float)
    for tx in ctx.expense_transactions:
        by_category[tx.category or UNCATEGORIZED] += tx.amount
    by_category = finite_totals(by_category)

    if len(by_category) <= 1 or ctx.expenses <= 0:
        return None

    top = max(by_category, key=by_category.get)
    share = by_category[top] / ctx.expenses * 100
    if share <= 40:
        return None
    return Insight(
        title="Spending concentrated in one category",
        description=(
            f"{format_percentage(share)} of spending is in {top}. "
            "Consider diversifying expenses or reviewing this category."
        ),
        type=InsightType.WARNING,
        icon="lucide:pie-chart",
    )


def impulse_buying(ctx: RuleContext) -> Optional[Insight]:
    by_date: Dict[date, List[Transaction]] = defaultdict(list)
    for tx in ctx.dated_expenses:
        by_date[tx.date.date()].append(tx)

    cutoff = ctx.expenses * ctx.thresholds.impulse_day_share
    impulse_days = [day for day, txs in by_date.items() if len(txs) >= 5 and _total(txs) > cutoff]
    if not impulse_days:
        return None
    return Insight(
        title="Potential impulse buying detected",
        description=(
            f"Found {len(impulse_days)} days with 5+ transactions and high spending. "
            "Consider implementing a 24-hour waiting period for purchases."
        ),
        type=InsightType.WARNING,
        icon="lucide:alert-triangle",
    )


def health_score(ctx: RuleContext) -> Optional[Insight]:
    flow = ctx.income + ctx.expenses
    score = ctx.income / flow * 100 if flow > 0 else 0.0
    shown = round_half_up(score)

    if score >= 60:
        return Insight(
            title="Excellent financial health!",
            description=f"Your financial health score is {shown}%. You're managing money very well.",
            type=InsightType.SUCCESS,
            icon="lucide:heart",
        )
    if score >= 45:
        return Insight(
            title="Good financial health",
            description=(
                f"Your financial health score is {shown}%. "
                "There's room for improvement by increasing income or reducing expenses."
            ),
            type=InsightType.INFO,
            icon="lucide:activity",
        )
    if score > 0:
        return Insight(
            title="Financial health needs attention",
            description=f"Your financial health score is {shown}%. Focus on increasing income and controlling expenses.",
            type=InsightType.WARNING,
            icon="lucide:heart-crack",
        )
    if ctx.expenses > 0:
        return Insight(
            title="Critical: Financial health at risk",
            description=(
                "No income recorded while having expenses. "
                "Add income sources immediately to improve your financial health score."
            ),
            type=InsightType.DANGER,
            icon="lucide:heart-crack",
        )
    return None


def seasonal_pattern(ctx: RuleContext) -> Optional[Insight]:
    # month of year, all years folded together
    by_month: Dict[int, float] = defaultdict(float)
    for tx in ctx.dated_expenses:
        by_month[tx.date.month] += tx.amount
    by_month = finite_totals(by_month)

    if len(by_month) < 3:
        return None

    average = sum(by_month.values()) / len(by_month)
    high = sorted(month for month, amount in by_month.items() if amount > average * 1.3)
    if not high:
        return None
    names = ", ".join(MONTH_ABBREVIATIONS[month - 1] for month in high)
    return Insight(
        title="Seasonal spending pattern detected",
        description=f"Higher spending detected in {names}. Plan and budget for these seasonal increases.",
        type=InsightType.INFO,
        icon="lucide:calendar-range",
    )


def persistent_deficit(ctx: RuleContext) -> Optional[Insight]:
    window = 3
    current = month_key(ctx.now)
    deficit_months = 0
    for offset in range(window):
        key = shift_month(*current, -offset)
        month_txs = [tx for tx in ctx.transactions if tx.date is not None and month_key(tx.date) == key]
        income = _total([tx for tx in month_txs if tx.type == TransactionType.INCOME])
        spent = _total([tx for tx in month_txs if tx.is_expense])
        if spent > income:
            deficit_months += 1

    if deficit_months < 2:
        return None
    return Insight(
        title="Persistent deficit warning",
        description=(
            f"You've spent more than earned in {deficit_months} of the last {window} months. "
            "Consider debt counseling or financial planning."
        ),
        type=InsightType.DANGER,
        icon="lucide:alert-circle",
    )


def goal_potential(ctx: RuleContext) -> Optional[Insight]:
    if ctx.income <= ctx.expenses:
        return None
    yearly = (ctx.income - ctx.expenses) * 12

    if yearly >= 50000:
        return Insight(
            title="Strong goal achievement potential",
            description=(
                f"At current savings rate, you could save {format_currency(yearly)} annually. "
                "Perfect for major financial goals!"
            ),
            type=InsightType.SUCCESS,
            icon="lucide:bullseye",
        )
    if yearly >= 20000:
        return Insight(
            title="Moderate goal achievement potential",
            description=f"You could save {format_currency(yearly)} annually. Consider setting medium-term financial goals.",
            type=InsightType.INFO,
            icon="lucide:target",
        )
    return None


def _time_slot(hour: int) -> str:
    if 6 <= hour < 12:
        return "morning"
    if 12 <= hour < 18:
        return "afternoon"
    return "evening"


def time_of_day_spending(ctx: RuleContext) -> Optional[Insight]:
    totals = {"morning": 0.0, "afternoon": 0.0, "evening": 0.0}
    for tx in ctx.dated_expenses:
        if tx.time_known:
            totals[_time_slot(tx.date.hour)] += tx.amount
    totals = finite_totals(totals)

    peak = max(totals.values())
    if peak <= 0 or ctx.expenses <= 0:
        return None

    # on a tie the later slot wins
    slot = [name for name, amount in totals.items() if amount == peak][-1]
    share = peak / ctx.expenses * 100
    if share <= 50:
        return None
    return Insight(
        title=f"Heavy {slot} spending",
        description=(
            f"{format_percentage(share)} of spending occurs in the {slot}. "
            "Consider if this aligns with your financial goals."
        ),
        type=InsightType.INFO,
        icon="lucide:clock",
    )


MILESTONES = [
    (100_000, "₱100K milestone achieved!"),
    (500_000, "₱500K milestone achieved!"),
    (1_000_000, "₱1M milestone achieved!"),
    (5_000_000, "₱5M milestone achieved!"),
    (10_000_000, "₱10M milestone achieved!"),
]


def wealth_milestone(ctx: RuleContext) -> Optional[Insight]:
    wealth = ctx.income - ctx.expenses
    reached = [(amount, title) for amount, title in MILESTONES if wealth >= amount]
    if not reached:
        return None

    amount, title = reached[-1]
    upcoming = [target for target, _ in MILESTONES if wealth < target]
    next_target = upcoming[0] if upcoming else amount * 2
    return Insight(
        title=title,
        description=(
            f"Congratulations! You've reached {format_currency(amount)} in net savings. "
            f"Next target: {format_currency(next_target)}."
        ),
        type=InsightType.SUCCESS,
        icon="lucide:award",
    )


# ── Check-ins and tips ────────────────────────────────────────────────────────


def time_of_day_checkin(ctx: RuleContext) -> Optional[Insight]:
    hour = ctx.now.hour
    if 9 <= hour <= 11:
        return Insight(
            title="Morning financial check-in",
            description="Good morning! Take 2 minutes to review your spending goals for today.",
            type=InsightType.INFO,
            icon="lucide:sunrise",
        )
    if 12 <= hour <= 14:
        return Insight(
            title="Lunchtime financial tip",
            description="Consider tracking your lunch expenses - small daily savings add up over time.",
            type=InsightType.INFO,
            icon="lucide:coffee",
        )
    if 17 <= hour <= 19:
        return Insight(
            title="Evening financial review",
            description="End of day review: Did you stay within your budget today?",
            type=InsightType.INFO,
            icon="lucide:sunset",
        )
    return None


def day_of_week_checkin(ctx: RuleContext) -> Optional[Insight]:
    weekday = ctx.now.weekday()
    if weekday == 6:
        return Insight(
            title="Sunday planning session",
            description="Perfect time to plan your budget for the upcoming week!",
            type=InsightType.SUCCESS,
            icon="lucide:calendar",
        )
    if weekday == 0:
        return Insight(
            title="Monday motivation",
            description="Start the week strong! Review your financial goals and set weekly targets.",
            type=InsightType.SUCCESS,
            icon="lucide:target",
        )
    if weekday == 4:
        return Insight(
            title="Friday financial wrap-up",
            description="Great job this week! Review your spending patterns before the weekend.",
            type=InsightType.SUCCESS,
            icon="lucide:party-popper",
        )
    return None


TIPS = [
    Insight(
        title="Tip: Track every expense",
        description="Small purchases add up. Track everything for accurate budgeting.",
        type=InsightType.INFO,
        icon="lucide:receipt",
    ),
    Insight(
        title="Tip: Emergency fund first",
        description="Build 3-6 months of expenses before investing for long-term security.",
        type=InsightType.WARNING,
        icon="lucide:shield-alert",
    ),
    Insight(
        title="Tip: Review subscriptions monthly",
        description="Cancel unused subscriptions to save money automatically each month.",
        type=InsightType.INFO,
        icon="lucide:repeat",
    ),
    Insight(
        title="Tip: Use the 50/30/20 rule",
        description="50% needs, 30% wants, 20% savings - a balanced budget approach.",
        type=InsightType.SUCCESS,
        icon="lucide:pie-chart",
    ),
]


def random_tip(ctx: RuleContext) -> Optional[Insight]:
    if ctx.rng.random() < ctx.thresholds.tip_probability:
        return ctx.rng.choice(TIPS)
    return None


RULES: List[Rule] = [
    Rule("no_income", no_income),
    Rule("negative_balance", negative_balance),
    Rule("unusual_subscription", unusual_subscription),
    Rule("over_budget", over_budget),
    Rule("savings_ladder", savings_ladder),
    Rule("spending_spike", spending_spike),
    Rule("large_expense", large_expense),
    Rule("small_purchases", small_purchases),
    Rule("weekend_spending", weekend_spending),
    Rule("month_over_month", month_over_month),
    Rule("income_consistency", income_consistency),
    Rule("emergency_fund", emergency_fund),
    Rule("recurring_payments", recurring_payments),
    Rule("heavy_spending_day", heavy_spending_day),
    Rule("high_activity_days", high_activity_days),
    Rule("round_numbers", round_numbers),
    Rule("category_concentration", category_concentration),
    Rule("impulse_buying", impulse_buying),
    Rule("health_score", health_score),
    Rule("seasonal_pattern", seasonal_pattern),
    Rule("persistent_deficit", persistent_deficit),
    Rule("goal_potential", goal_potential),
    Rule("time_of_day_spending", time_of_day_spending),
    Rule("wealth_milestone", wealth_milestone),
    Rule("time_of_day_checkin", time_of_day_checkin),
    Rule("day_of_week_checkin", day_of_week_checkin),
    Rule("random_tip", random_tip),
]
