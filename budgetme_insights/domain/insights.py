"""Insight engine - runs the rule table and samples the feed"""

import logging
import random
from dataclasses import dataclass
from datetime import tzinfo
from typing import Iterable, List, Optional, Sequence

from budgetme_insights.domain.aggregator import aggregate, finite_or_zero, savings_rate as rate_from_totals
from budgetme_insights.domain.exceptions import InvalidLimitError
from budgetme_insights.domain.models import (
    Aggregates,
    BudgetLike,
    Insight,
    TransactionLike,
    coerce_budgets,
    coerce_transactions,
)
from budgetme_insights.domain.rules import RULES, Rule, RuleContext, RuleThresholds
from budgetme_insights.utils.date_utils import DEFAULT_TIMEZONE, Clock, SystemClock, localize

logger = logging.getLogger(__name__)

DEFAULT_INSIGHT_LIMIT = 4


@dataclass
class FiredRule:
    """A rule that produced an insight in one pass"""

    rule: str
    insight: Insight


@dataclass
class InsightReport:
    """Result of one full pipeline run"""

    aggregates: Aggregates
    candidates: List[FiredRule]
    insights: List[Insight]


def select_insights(
    insights: Sequence[Insight],
    limit: int = DEFAULT_INSIGHT_LIMIT,
    rng: Optional[random.Random] = None,
) -> List[Insight]:
    """
    Shuffle the full candidate list and keep the first `limit`.

    Severity plays no part: a danger alert can lose its slot to a tip.
    The caller refreshes the feed by calling again.
    """
    if limit < 0:
        raise InvalidLimitError(f"limit must be >= 0, got {limit}")
    shuffled = list(insights)
    (rng or random.Random()).shuffle(shuffled)
    return shuffled[:limit]


class InsightEngine:
    """
    Evaluates every rule over one snapshot.

    Clock and random source are injected; production passes a SystemClock
    and an unseeded Random, tests pass a FixedClock and a seeded Random.
    """

    def __init__(
        self,
        clock: Optional[Clock] = None,
        rng: Optional[random.Random] = None,
        thresholds: Optional[RuleThresholds] = None,
        rules: Optional[Sequence[Rule]] = None,
        tz: tzinfo = DEFAULT_TIMEZONE,
    ):
        self.tz = tz
        self.clock = clock or SystemClock(tz)
        self.rng = rng or random.Random()
        self.thresholds = thresholds or RuleThresholds()
        self.rules = list(rules) if rules is not None else list(RULES)

    def run_rules(
        self,
        transactions: Iterable[TransactionLike],
        budgets: Iterable[BudgetLike],
        income: float,
        expenses: float,
        savings_rate: float,
    ) -> List[FiredRule]:
        """Evaluate all rules, keeping the name of each one that fired"""
        ctx = RuleContext.build(
            transactions=coerce_transactions(transactions, self.tz),
            budgets=coerce_budgets(budgets),
            income=income,
            expenses=expenses,
            savings_rate=savings_rate,
            now=localize(self.clock.now(), self.tz),
            rng=self.rng,
            thresholds=self.thresholds,
        )

        fired = []
        for rule in self.rules:
            insight = rule.evaluate(ctx)
            if insight is not None:
                logger.debug("Rule fired", extra={"rule": rule.name, "insight_type": insight.type.value})
                fired.append(FiredRule(rule=rule.name, insight=insight))
        return fired

    def evaluate(
        self,
        transactions: Iterable[TransactionLike],
        budgets: Iterable[BudgetLike],
        income: float,
        expenses: float,
        savings_rate: float,
    ) -> List[Insight]:
        """Every insight the rules produce, in rule order"""
        return [fired.insight for fired in self.run_rules(transactions, budgets, income, expenses, savings_rate)]

    def select(self, insights: Sequence[Insight], limit: int = DEFAULT_INSIGHT_LIMIT) -> List[Insight]:
        return select_insights(insights, limit, self.rng)

    def generate(
        self,
        transactions: Iterable[TransactionLike],
        budgets: Iterable[BudgetLike],
        limit: int = DEFAULT_INSIGHT_LIMIT,
        income: Optional[float] = None,
        expenses: Optional[float] = None,
        savings_rate: Optional[float] = None,
    ) -> InsightReport:
        """
        Main entry point: aggregate, run rules, sample the feed.

        Income or expenses the caller leaves out are derived from the
        transactions. A missing savings_rate is computed from the resolved
        income and expenses, so it always agrees with them.
        """
        txs = coerce_transactions(transactions, self.tz)
        derived = aggregate(txs)
        income = derived.income if income is None else finite_or_zero(income)
        expenses = derived.expenses if expenses is None else finite_or_zero(expenses)
        if savings_rate is None:
            savings_rate = rate_from_totals(income, expenses)
        else:
            savings_rate = finite_or_zero(savings_rate)

        candidates = self.run_rules(txs, budgets, income, expenses, savings_rate)
        selected = self.select([fired.insight for fired in candidates], limit)

        return InsightReport(
            aggregates=Aggregates(
                income=income,
                expenses=expenses,
                balance=finite_or_zero(income - expenses),
                savings_rate=savings_rate,
            ),
            candidates=candidates,
            insights=selected,
        )


def generate_insights(
    transactions: Iterable[TransactionLike],
    budgets: Iterable[BudgetLike],
    limit: int = DEFAULT_INSIGHT_LIMIT,
    clock: Optional[Clock] = None,
    rng: Optional[random.Random] = None,
) -> List[Insight]:
    """Convenience wrapper: a fresh engine, derived totals, sampled feed"""
    engine = InsightEngine(clock=clock, rng=rng)
    return engine.generate(transactions, budgets, limit).insights
