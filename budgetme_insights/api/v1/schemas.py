"""Pydantic schemas for API request/response validation"""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts snake_case or camelCase keys, serializes camelCase"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TransactionSchema(CamelModel):
    """Ledger entry as sent by the dashboard; amounts may arrive as text"""

    date: Optional[str] = None
    amount: Union[float, str, None] = None
    type: Optional[str] = None
    category: Optional[str] = None
    notes: Optional[str] = None
    description: Optional[str] = None


class BudgetSchema(CamelModel):
    name: Optional[str] = None
    budget_name: Optional[str] = None
    category_name: Optional[str] = None
    expense_category_name: Optional[str] = None
    amount: Union[float, str, None] = None
    spent: Union[float, str, None] = None
    percentage_used: Union[float, str, None] = None


class InsightsRequest(CamelModel):
    """Request body for POST /v1/insights"""

    transactions: List[TransactionSchema] = Field(default_factory=list)
    budgets: List[BudgetSchema] = Field(default_factory=list)
    limit: Optional[int] = Field(None, description="Feed size, defaults to the configured insight limit")
    income: Optional[float] = None
    expenses: Optional[float] = None
    savings_rate: Optional[float] = None


class AggregatesSchema(CamelModel):
    income: float
    expenses: float
    balance: float
    savings_rate: float


class InsightSchema(CamelModel):
    title: str
    description: str
    type: str  # success | warning | info | danger
    icon: str


class InsightsResponse(CamelModel):
    """Response for POST /v1/insights"""

    aggregates: AggregatesSchema
    insights: List[InsightSchema]
    candidate_count: int


class TrendsRequest(CamelModel):
    """Request body for POST /v1/trends"""

    transactions: List[TransactionSchema] = Field(default_factory=list)
    limit: Optional[int] = None


class TrendSchema(CamelModel):
    category: str
    current_amount: float
    previous_amount: float
    change: float
    trend: str  # up | down | neutral
    insight: str
    recommendation: str
    narrative: str


class TrendsResponse(CamelModel):
    """Response for POST /v1/trends"""

    trends: List[TrendSchema]


class SummaryRequest(CamelModel):
    """Request body for POST /v1/summary"""

    transactions: List[TransactionSchema] = Field(default_factory=list)


class SummarySchema(CamelModel):
    total_income: float
    total_expenses: float
    savings_rate: float
    monthly_income: float
    monthly_expenses: float
    balance_change: Optional[float] = None
    income_change: Optional[float] = None
    expense_change: Optional[float] = None
    savings_rate_change: Optional[float] = None


class CategorySchema(CamelModel):
    name: str
    amount: float


class SummaryResponse(CamelModel):
    """Response for POST /v1/summary"""

    summary: SummarySchema
    categories: List[CategorySchema]
