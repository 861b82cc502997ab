"""Domain models - pure Python dataclasses representing business entities"""

import math
from dataclasses import dataclass
from datetime import datetime, tzinfo
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from budgetme_insights.utils.date_utils import DEFAULT_TIMEZONE, parse_transaction_date


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"
    CONTRIBUTION = "contribution"
    CASH_IN = "cash_in"


class InsightType(str, Enum):
    INFO = "info"
    WARNING = "warning"
    SUCCESS = "success"
    DANGER = "danger"


class TrendDirection(str, Enum):
    UP = "up"
    DOWN = "down"
    NEUTRAL = "neutral"


def coerce_number(value: Any) -> float:
    """Parse a numeric field, 0.0 for anything missing, malformed or non-finite"""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


@dataclass
class Transaction:
    """Completed ledger entry, read-only snapshot from the caller"""

    date: Optional[datetime]
    amount: float
    type: Optional[TransactionType]  # None for kinds the engine does not know
    category: Optional[str] = None
    notes: Optional[str] = None
    description: Optional[str] = None
    time_known: bool = False
    raw_amount: Optional[str] = None  # original text when the amount arrived as a string

    @classmethod
    def from_dict(cls, record: Mapping[str, Any], tz: tzinfo = DEFAULT_TIMEZONE) -> "Transaction":
        """Build from a loosely-typed record; never raises"""
        moment, time_known = parse_transaction_date(record.get("date"), tz)
        raw = record.get("amount")
        try:
            tx_type = TransactionType(record.get("type"))
        except ValueError:
            tx_type = None

        return cls(
            date=moment,
            amount=coerce_number(raw),
            type=tx_type,
            category=_text(record.get("category")),
            notes=_text(record.get("notes")),
            description=_text(record.get("description")),
            time_known=time_known,
            raw_amount=raw.strip() if isinstance(raw, str) else None,
        )

    @property
    def is_expense(self) -> bool:
        return self.type == TransactionType.EXPENSE


@dataclass
class Budget:
    """Active budget with its spend so far"""

    name: str = ""
    category_name: str = ""
    amount: float = 0.0
    spent: float = 0.0
    percentage_used: float = 0.0

    @classmethod
    def from_dict(cls, record: Mapping[str, Any]) -> "Budget":
        return cls(
            name=_text(record.get("name") or record.get("budget_name")) or "",
            category_name=_text(record.get("category_name") or record.get("expense_category_name")) or "",
            amount=coerce_number(record.get("amount")),
            spent=coerce_number(record.get("spent")),
            percentage_used=coerce_number(record.get("percentage_used")),
        )

    @property
    def display_name(self) -> str:
        return self.category_name or self.name

    @property
    def is_over(self) -> bool:
        return self.spent > self.amount


@dataclass
class Aggregates:
    """Scalar totals over a transaction set"""

    income: float
    expenses: float
    balance: float
    savings_rate: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "income": self.income,
            "expenses": self.expenses,
            "balance": self.balance,
            "savingsRate": self.savings_rate,
        }


@dataclass(frozen=True)
class Insight:
    """Single human-readable observation for the dashboard feed"""

    title: str
    description: str
    type: InsightType
    icon: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "title": self.title,
            "description": self.description,
            "type": self.type.value,
            "icon": self.icon,
        }


@dataclass
class Trend:
    """Per-category comparison of the latest month against history"""

    category: str
    current_amount: float
    previous_amount: float
    change: float
    trend: TrendDirection
    insight: str
    recommendation: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "currentAmount": self.current_amount,
            "previousAmount": self.previous_amount,
            "change": self.change,
            "trend": self.trend.value,
            "insight": self.insight,
            "recommendation": self.recommendation,
        }


@dataclass
class DashboardSummary:
    """Headline numbers plus month-over-month changes"""

    total_income: float
    total_expenses: float
    savings_rate: float
    monthly_income: float
    monthly_expenses: float
    balance_change: Optional[float]
    income_change: Optional[float]
    expense_change: Optional[float]
    savings_rate_change: Optional[float]


@dataclass
class CategoryBreakdownItem:
    name: str
    amount: float


TransactionLike = Union[Transaction, Mapping[str, Any]]
BudgetLike = Union[Budget, Mapping[str, Any]]


def coerce_transactions(records: Optional[Iterable[TransactionLike]], tz: tzinfo = DEFAULT_TIMEZONE) -> List[Transaction]:
    """Accept model instances or raw mappings"""
    return [
        record if isinstance(record, Transaction) else Transaction.from_dict(record, tz)
        for record in (records or [])
    ]


def coerce_budgets(records: Optional[Iterable[BudgetLike]]) -> List[Budget]:
    return [
        record if isinstance(record, Budget) else Budget.from_dict(record)
        for record in (records or [])
    ]
