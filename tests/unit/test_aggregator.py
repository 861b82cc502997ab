"""Unit tests for transaction aggregation"""

import pytest

from budgetme_insights.domain.aggregator import aggregate, category_breakdown, savings_rate
from conftest import make_tx


def test_aggregate_income_cash_in_and_expenses():
    """Income counts income and cash_in; transfers and contributions are ignored"""
    transactions = [
        make_tx("2024-01-05", 5000, "income"),
        make_tx("2024-01-06", 1000, "cash_in"),
        make_tx("2024-01-07", 2000, "expense", "Food & Dining"),
        make_tx("2024-01-08", 9999, "transfer"),
        make_tx("2024-01-09", 500, "contribution"),
    ]

    result = aggregate(transactions)

    assert result.income == 6000
    assert result.expenses == 2000
    assert result.balance == 4000
    assert result.savings_rate == pytest.approx(66.6666, rel=1e-4)


def test_aggregate_is_idempotent():
    transactions = [
        make_tx("2024-01-05", "5000", "income"),
        make_tx("2024-01-10", "1234.56", "expense", "Groceries"),
    ]

    assert aggregate(transactions) == aggregate(transactions)


def test_aggregate_coerces_malformed_amounts():
    """Non-numeric, missing and non-finite amounts count as zero"""
    transactions = [
        make_tx("2024-01-05", "abc", "income"),
        make_tx("2024-01-05", None, "expense"),
        make_tx("2024-01-05", "NaN", "expense"),
        make_tx("2024-01-05", "Infinity", "income"),
        make_tx("2024-01-05", " 250 ", "expense"),
    ]

    result = aggregate(transactions)

    assert result.income == 0
    assert result.expenses == 250
    assert result.balance == -250
    assert result.savings_rate == 0


def test_aggregate_empty():
    result = aggregate([])
    assert (result.income, result.expenses, result.balance, result.savings_rate) == (0, 0, 0, 0)


def test_savings_rate_is_floored_at_zero():
    assert savings_rate(0, 500) == 0
    assert savings_rate(1000, 600) == pytest.approx(40)
    assert savings_rate(5000, 7000) == 0


def test_category_breakdown_sorted_largest_first():
    transactions = [
        make_tx("2024-01-05", 300, "expense", "Groceries"),
        make_tx("2024-01-06", 900, "expense", "Housing"),
        make_tx("2024-01-07", 200, "expense", "Groceries"),
        make_tx("2024-01-08", 100, "expense"),
        make_tx("2024-01-09", 5000, "income", "Salary"),
    ]

    items = category_breakdown(transactions)

    assert [(item.name, item.amount) for item in items] == [
        ("Housing", 900),
        ("Groceries", 500),
        ("Uncategorized", 100),
    ]
