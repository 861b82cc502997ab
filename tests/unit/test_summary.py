"""Unit tests for the dashboard summary"""

import pytest

from budgetme_insights.domain.aggregator import summarize
from conftest import make_tx


def test_summary_month_over_month_changes():
    transactions = [
        make_tx("2024-01-05", 4000, "income"),
        make_tx("2024-01-20", 1000, "expense", "Groceries"),
        make_tx("2024-02-05", 5000, "income"),
        make_tx("2024-02-18", 2000, "expense", "Groceries"),
    ]

    summary = summarize(transactions)

    assert summary.total_income == 9000
    assert summary.total_expenses == 3000
    assert summary.savings_rate == pytest.approx(66.6667, rel=1e-4)
    assert summary.monthly_income == 5000
    assert summary.monthly_expenses == 2000
    assert summary.balance_change == pytest.approx(0)
    assert summary.income_change == pytest.approx(25)
    assert summary.expense_change == pytest.approx(100)
    # all-time rate against the previous month's 75%
    assert summary.savings_rate_change == pytest.approx(-8.3333, rel=1e-4)


def test_summary_single_month_has_no_changes():
    transactions = [
        make_tx("2024-01-05", 4000, "income"),
        make_tx("2024-01-20", 1000, "expense", "Groceries"),
    ]

    summary = summarize(transactions)

    assert summary.monthly_income == 4000
    assert summary.monthly_expenses == 1000
    assert summary.balance_change is None
    assert summary.income_change is None
    assert summary.expense_change is None
    assert summary.savings_rate_change is None


def test_summary_empty():
    summary = summarize([])

    assert summary.total_income == 0
    assert summary.monthly_expenses == 0
    assert summary.income_change is None
