"""Unit tests for individual insight rules"""

import random
from datetime import datetime

import pytest

from budgetme_insights.domain.aggregator import savings_rate as derived_rate
from budgetme_insights.domain.models import InsightType, coerce_budgets, coerce_transactions
from budgetme_insights.domain.rules import (
    RULES,
    TIPS,
    RuleContext,
    RuleThresholds,
    category_concentration,
    day_of_week_checkin,
    emergency_fund,
    goal_potential,
    health_score,
    heavy_spending_day,
    high_activity_days,
    impulse_buying,
    income_consistency,
    large_expense,
    month_over_month,
    negative_balance,
    no_income,
    over_budget,
    persistent_deficit,
    random_tip,
    recurring_payments,
    round_numbers,
    savings_ladder,
    seasonal_pattern,
    small_purchases,
    spending_spike,
    time_of_day_checkin,
    time_of_day_spending,
    unusual_subscription,
    wealth_milestone,
    weekend_spending,
)
from budgetme_insights.utils.date_utils import localize
from conftest import QUIET_MOMENT, make_tx


def build_ctx(
    transactions=(),
    budgets=(),
    income=0.0,
    expenses=0.0,
    savings_rate=None,
    now=QUIET_MOMENT,
    thresholds=None,
    rng=None,
) -> RuleContext:
    return RuleContext.build(
        transactions=coerce_transactions(transactions),
        budgets=coerce_budgets(budgets),
        income=income,
        expenses=expenses,
        savings_rate=derived_rate(income, expenses) if savings_rate is None else savings_rate,
        now=localize(now),
        rng=rng or random.Random(0),
        thresholds=thresholds,
    )


# ── Critical alerts ───────────────────────────────────────────────────────────


def test_no_income_with_expenses_is_danger():
    insight = no_income(build_ctx(income=0, expenses=1000))

    assert insight.type == InsightType.DANGER
    assert insight.title == "Critical: No income recorded"
    assert "₱1,000" in insight.description


def test_no_income_silent_without_expenses():
    assert no_income(build_ctx(income=0, expenses=0)) is None


def test_significant_negative_balance_wins_over_warning():
    insight = negative_balance(build_ctx(income=10000, expenses=16000))

    assert insight.type == InsightType.DANGER
    assert insight.title == "Urgent: Significant negative balance"
    assert "₱6,000" in insight.description


def test_small_negative_balance_is_warning():
    insight = negative_balance(build_ctx(income=5000, expenses=7000))

    assert insight.type == InsightType.WARNING
    assert insight.title == "Warning: Negative balance detected"


def test_positive_balance_has_no_balance_alert():
    assert negative_balance(build_ctx(income=5000, expenses=1000)) is None


def test_unusual_subscription_names_largest_charge():
    transactions = [
        make_tx("2024-01-10", 15000, category="Entertainment", notes="Annual SUBSCRIPTION renewal"),
        make_tx("2024-01-12", 12000, category="Subscription"),
        make_tx("2024-01-15", 1500, category="Subscription"),
    ]

    insight = unusual_subscription(build_ctx(transactions, expenses=28500))

    assert insight.type == InsightType.DANGER
    assert "₱15,000" in insight.description
    assert "Jan 10, 2024" in insight.description


def test_subscription_charges_below_critical_are_counted():
    transactions = [
        make_tx("2024-01-15", 1500, category="Subscription"),
        make_tx("2024-01-16", 999, category="Subscription"),
    ]

    insight = unusual_subscription(build_ctx(transactions, expenses=2499))

    assert insight.type == InsightType.WARNING
    assert insight.description == "Found 1 transaction that doesn't match your typical spending pattern."


def test_over_budget_lists_every_exceeded_budget():
    budgets = [
        {"category_name": "Food & Dining", "amount": 1000, "spent": 1500},
        {"budget_name": "Fun money", "amount": "500", "spent": "600"},
        {"category_name": "Housing", "amount": 1000, "spent": 900},
    ]

    insight = over_budget(build_ctx(budgets=budgets))

    assert insight.type == InsightType.DANGER
    assert insight.title == "Over budget in 2 categories"
    assert "Food & Dining, Fun money" in insight.description
    assert "Housing" not in insight.description


# ── Savings ladder ────────────────────────────────────────────────────────────


@pytest.mark.parametrize(
    "income,expenses,title,insight_type",
    [
        (1000, 1600, "Critical: Major overspending", InsightType.DANGER),
        (1000, 1400, "Spending exceeds income", InsightType.DANGER),
        (1000, 600, "Outstanding savings rate!", InsightType.SUCCESS),
        (1000, 750, "Great savings rate!", InsightType.SUCCESS),
        (1000, 850, "Improve your savings", InsightType.INFO),
        (1000, 920, "Low savings rate warning", InsightType.WARNING),
        (1000, 980, "Critical: Minimal savings", InsightType.DANGER),
    ],
)
def test_savings_ladder_rungs(income, expenses, title, insight_type):
    insight = savings_ladder(build_ctx(income=income, expenses=expenses))

    assert insight.title == title
    assert insight.type == insight_type


def test_savings_ladder_fires_exactly_once():
    ctx = build_ctx(income=1000, expenses=600)
    ladder_titles = {
        "Critical: Major overspending",
        "Spending exceeds income",
        "Outstanding savings rate!",
        "Great savings rate!",
        "Improve your savings",
        "Low savings rate warning",
        "Critical: Minimal savings",
    }

    fired = [rule.evaluate(ctx) for rule in RULES]
    titles = [insight.title for insight in fired if insight is not None]

    assert [title for title in titles if title in ladder_titles] == ["Outstanding savings rate!"]


def test_savings_ladder_silent_when_nothing_recorded():
    assert savings_ladder(build_ctx(income=0, expenses=0)) is None


# ── Spending patterns ─────────────────────────────────────────────────────────


def test_spending_spike_in_last_week():
    transactions = [make_tx("2024-03-12", 2000)]

    insight = spending_spike(build_ctx(transactions, income=5000, expenses=3000))

    assert insight.type == InsightType.WARNING
    assert insight.title == "Recent spending spike"


def test_spending_control_in_last_week():
    transactions = [make_tx("2024-03-12", 100)]

    insight = spending_spike(build_ctx(transactions, income=5000, expenses=3000))

    assert insight.type == InsightType.SUCCESS
    assert insight.title == "Great spending control!"


def test_spending_spike_ignores_older_transactions():
    transactions = [make_tx("2024-02-01", 2000)]

    assert spending_spike(build_ctx(transactions, income=5000, expenses=3000)) is None


def test_large_expense_over_thirty_percent_is_warning():
    transactions = [make_tx("2024-03-01", amount) for amount in (5000, 1000, 1000, 1000)]

    insight = large_expense(build_ctx(transactions, expenses=8000))

    assert insight.type == InsightType.WARNING
    assert "₱5,000" in insight.description
    assert "62.5%" in insight.description


def test_large_expense_between_fifteen_and_thirty_percent_is_info():
    transactions = [make_tx("2024-03-01", 2000)] + [make_tx("2024-03-02", 1000) for _ in range(8)]

    insight = large_expense(build_ctx(transactions, expenses=10000))

    assert insight.type == InsightType.INFO
    assert "20.0%" in insight.description


def test_small_purchases_need_more_than_twenty():
    twenty = [make_tx("2024-03-01", 50) for _ in range(20)]

    assert small_purchases(build_ctx(twenty, expenses=1000)) is None

    insight = small_purchases(build_ctx(twenty + [make_tx("2024-03-01", 50)], expenses=2100))
    assert insight.type == InsightType.INFO
    assert insight.description.startswith("You have 21 transactions under ₱100")


def test_weekend_spending_per_day_comparison():
    transactions = [
        make_tx("2024-03-09", 1000),  # Saturday
        make_tx("2024-03-10", 1000),  # Sunday
        make_tx("2024-03-11", 100),
        make_tx("2024-03-12", 100),
    ]

    insight = weekend_spending(build_ctx(transactions, expenses=2200))

    assert insight.type == InsightType.WARNING
    assert insight.title == "High weekend spending"


def test_weekend_spending_needs_both_kinds_of_day():
    transactions = [make_tx("2024-03-09", 1000)]

    assert weekend_spending(build_ctx(transactions, expenses=1000)) is None


def test_month_over_month_increase():
    transactions = [make_tx("2024-02-10", 1000), make_tx("2024-03-05", 1300)]

    insight = month_over_month(build_ctx(transactions, expenses=2300))

    assert insight.type == InsightType.WARNING
    assert "30.0%" in insight.description


def test_month_over_month_reduction():
    transactions = [make_tx("2024-02-10", 1000), make_tx("2024-03-05", 800)]

    insight = month_over_month(build_ctx(transactions, expenses=1800))

    assert insight.type == InsightType.SUCCESS
    assert "20.0%" in insight.description


def test_month_over_month_across_year_boundary():
    transactions = [make_tx("2023-12-10", 1000), make_tx("2024-01-05", 2000)]

    insight = month_over_month(build_ctx(transactions, expenses=3000, now=datetime(2024, 1, 20, 8, 0)))

    assert insight.type == InsightType.WARNING


def test_stable_income():
    transactions = [make_tx("2024-02-01", 5000, "income"), make_tx("2024-03-01", 5000, "income")]

    insight = income_consistency(build_ctx(transactions, income=10000))

    assert insight.type == InsightType.SUCCESS
    assert insight.title == "Stable income stream"


def test_irregular_income():
    transactions = [make_tx("2024-02-01", 1000, "income"), make_tx("2024-03-01", 5000, "income")]

    insight = income_consistency(build_ctx(transactions, income=6000))

    assert insight.type == InsightType.INFO
    assert insight.title == "Irregular income detected"


@pytest.mark.parametrize(
    "income,expenses,insight_type",
    [
        (1000, 900, InsightType.DANGER),
        (5000, 1000, InsightType.INFO),
        (10000, 1000, InsightType.SUCCESS),
    ],
)
def test_emergency_fund_coverage(income, expenses, insight_type):
    transactions = [make_tx("2024-03-01", expenses)]

    insight = emergency_fund(build_ctx(transactions, income=income, expenses=expenses))

    assert insight.type == insight_type


def test_emergency_fund_months_in_description():
    transactions = [make_tx("2024-03-01", 1000)]

    insight = emergency_fund(build_ctx(transactions, income=10000, expenses=1000))

    assert "9 months" in insight.description


def test_recurring_payments_from_whole_peso_amounts():
    transactions = [make_tx("2024-03-01", "499.00", category="Shopping") for _ in range(5)]

    insight = recurring_payments(build_ctx(transactions, expenses=2495))

    assert insight.type == InsightType.WARNING
    assert "5 potential subscriptions" in insight.description


def test_recurring_payments_from_keywords_small_share_is_info():
    transactions = [make_tx("2024-03-01", 549, notes="Netflix") for _ in range(5)]

    insight = recurring_payments(build_ctx(transactions, expenses=100000))

    assert insight.type == InsightType.INFO


def test_recurring_payments_need_five():
    transactions = [make_tx("2024-03-01", 549, description="gym membership") for _ in range(4)]

    assert recurring_payments(build_ctx(transactions, expenses=2196)) is None


def test_heavy_spending_day_names_top_day():
    transactions = [
        make_tx("2024-03-05", 3000),
        make_tx("2024-02-10", 500),
        make_tx("2024-02-20", 500),
    ]

    insight = heavy_spending_day(build_ctx(transactions, expenses=4000))

    assert insight.description.startswith("Day 5 of the month")


def test_heavy_spending_day_respects_threshold():
    transactions = [make_tx(f"2024-03-{day:02d}", 100) for day in range(1, 21)]
    thresholds = RuleThresholds(heavy_day_share=0.10)

    assert heavy_spending_day(build_ctx(transactions, expenses=2000, thresholds=thresholds)) is None


def test_high_activity_days():
    transactions = [make_tx("2024-03-01", 10) for _ in range(6)]
    transactions += [make_tx(f"2024-03-{day:02d}", 10) for day in range(2, 7)]

    insight = high_activity_days(build_ctx(transactions, expenses=110))

    assert insight.description.startswith("You have 1 days")


def test_round_numbers():
    transactions = [make_tx("2024-03-01", 100), make_tx("2024-03-01", 150), make_tx("2024-03-01", 33.3)]

    insight = round_numbers(build_ctx(transactions, expenses=283.3))

    assert insight.type == InsightType.INFO
    assert insight.description.startswith("66.7%")


def test_round_numbers_threshold_is_configurable():
    transactions = [make_tx("2024-03-01", 100), make_tx("2024-03-01", 33.3)]

    assert round_numbers(build_ctx(transactions, thresholds=RuleThresholds(round_number_share=0.5))) is None
    assert round_numbers(build_ctx(transactions, thresholds=RuleThresholds(round_number_share=0.3))) is not None


def test_category_concentration():
    transactions = [make_tx("2024-03-01", 900, category="Housing"), make_tx("2024-03-01", 100, category="Food")]

    insight = category_concentration(build_ctx(transactions, expenses=1000))

    assert insight.type == InsightType.WARNING
    assert "90.0% of spending is in Housing" in insight.description


def test_category_concentration_needs_two_categories():
    transactions = [make_tx("2024-03-01", 900, category="Housing")]

    assert category_concentration(build_ctx(transactions, expenses=900)) is None


def test_impulse_buying_day():
    transactions = [make_tx("2024-03-02", 100) for _ in range(5)] + [make_tx("2024-03-03", 500)]

    insight = impulse_buying(build_ctx(transactions, expenses=1000))

    assert insight.type == InsightType.WARNING
    assert insight.description.startswith("Found 1 days")


def test_impulse_buying_needs_five_transactions():
    transactions = [make_tx("2024-03-02", 200) for _ in range(4)]

    assert impulse_buying(build_ctx(transactions, expenses=800)) is None


@pytest.mark.parametrize(
    "income,expenses,insight_type",
    [
        (600, 400, InsightType.SUCCESS),
        (450, 550, InsightType.INFO),
        (100, 900, InsightType.WARNING),
        (0, 500, InsightType.DANGER),
    ],
)
def test_health_score_bands(income, expenses, insight_type):
    insight = health_score(build_ctx(income=income, expenses=expenses))

    assert insight.type == insight_type


def test_health_score_silent_without_activity():
    assert health_score(build_ctx(income=0, expenses=0)) is None


def test_seasonal_pattern_names_months_in_calendar_order():
    transactions = [
        make_tx("2023-12-10", 500),
        make_tx("2024-01-10", 100),
        make_tx("2024-02-10", 100),
        make_tx("2024-03-10", 400),
    ]

    insight = seasonal_pattern(build_ctx(transactions, expenses=1100))

    assert insight.description.startswith("Higher spending detected in Mar, Dec.")


def test_seasonal_pattern_needs_three_months():
    transactions = [make_tx("2024-01-10", 100), make_tx("2024-02-10", 900)]

    assert seasonal_pattern(build_ctx(transactions, expenses=1000)) is None


def test_persistent_deficit():
    transactions = [
        make_tx("2024-01-05", 1000, "income"),
        make_tx("2024-01-10", 2000),
        make_tx("2024-02-10", 500),
        make_tx("2024-03-05", 3000, "income"),
    ]

    insight = persistent_deficit(build_ctx(transactions, income=4000, expenses=2500))

    assert insight.type == InsightType.DANGER
    assert "2 of the last 3 months" in insight.description


def test_single_deficit_month_is_not_persistent():
    transactions = [make_tx("2024-02-10", 500), make_tx("2024-03-05", 3000, "income")]

    assert persistent_deficit(build_ctx(transactions, income=3000, expenses=500)) is None


@pytest.mark.parametrize(
    "income,expenses,insight_type",
    [
        (10000, 5000, InsightType.SUCCESS),
        (3000, 1000, InsightType.INFO),
        (2000, 1000, None),
        (1000, 2000, None),
    ],
)
def test_goal_potential(income, expenses, insight_type):
    insight = goal_potential(build_ctx(income=income, expenses=expenses))

    assert (insight.type if insight else None) == insight_type


def test_time_of_day_spending_evening():
    transactions = [
        make_tx("2024-03-10T20:00:00", 800),
        make_tx("2024-03-10T09:00:00", 200),
    ]

    insight = time_of_day_spending(build_ctx(transactions, expenses=1000))

    assert insight.title == "Heavy evening spending"
    assert insight.description.startswith("80.0%")


def test_time_of_day_spending_ignores_date_only_entries():
    transactions = [make_tx("2024-03-10", 800), make_tx("2024-03-11", 200)]

    assert time_of_day_spending(build_ctx(transactions, expenses=1000)) is None


def test_wealth_milestone_names_highest_and_next():
    insight = wealth_milestone(build_ctx(income=700000, expenses=100000))

    assert insight.title == "₱500K milestone achieved!"
    assert "Next target: ₱1,000,000." in insight.description


def test_wealth_milestone_beyond_last_target():
    insight = wealth_milestone(build_ctx(income=12_000_000, expenses=0))

    assert insight.title == "₱10M milestone achieved!"
    assert "Next target: ₱20,000,000." in insight.description


# ── Check-ins and tips ────────────────────────────────────────────────────────


@pytest.mark.parametrize(
    "hour,title",
    [
        (10, "Morning financial check-in"),
        (13, "Lunchtime financial tip"),
        (18, "Evening financial review"),
        (8, None),
        (21, None),
    ],
)
def test_time_of_day_checkin(hour, title):
    insight = time_of_day_checkin(build_ctx(now=datetime(2024, 3, 13, hour, 0)))

    assert (insight.title if insight else None) == title


@pytest.mark.parametrize(
    "day,title",
    [
        (10, "Sunday planning session"),
        (11, "Monday motivation"),
        (15, "Friday financial wrap-up"),
        (13, None),
    ],
)
def test_day_of_week_checkin(day, title):
    insight = day_of_week_checkin(build_ctx(now=datetime(2024, 3, day, 8, 0)))

    assert (insight.title if insight else None) == title


def test_random_tip_probability():
    always = RuleThresholds(tip_probability=1.0)
    never = RuleThresholds(tip_probability=0.0)

    assert random_tip(build_ctx(thresholds=always)) in TIPS
    assert random_tip(build_ctx(thresholds=never)) is None


def test_rules_never_raise_on_degenerate_input():
    transactions = [
        {"date": "not a date", "amount": "abc", "type": "expense"},
        {"date": None, "amount": None, "type": None},
        {"amount": float("inf"), "type": "income"},
        {},
    ]
    budgets = [{"amount": "x", "spent": None}, {}]
    ctx = build_ctx(transactions, budgets, income=float("nan"), expenses=float("-inf"), savings_rate=float("nan"))

    for rule in RULES:
        rule.evaluate(ctx)

    assert ctx.income == 0
    assert ctx.expenses == 0
    assert ctx.savings_rate == 0


def test_rules_never_raise_on_overflowing_buckets():
    transactions = [
        make_tx("2024-03-12T10:00:00", 1e308, category="Housing"),
        make_tx("2024-03-12T11:00:00", 1e308, category="Housing"),
        make_tx("2024-02-12", 1e308, category="Travel"),
        make_tx("2024-02-12", 1e308, category="Travel"),
    ]
    ctx = build_ctx(transactions, income=1000.0, expenses=500.0)

    for rule in RULES:
        rule.evaluate(ctx)

    assert heavy_spending_day(ctx) is None
