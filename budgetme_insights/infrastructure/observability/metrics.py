"""Prometheus metrics for insight mix, rule activity and request latency"""

from typing import Iterable

from prometheus_client import Counter, Histogram

from budgetme_insights.domain.insights import InsightReport
from budgetme_insights.domain.models import Trend

# Insight metrics
insights_counter = Counter(
    "budgetme_insights_total",
    "Insights emitted to the feed",
    ["type"],  # success | warning | info | danger
)

rule_fired_counter = Counter(
    "budgetme_rule_fired_total",
    "Rules that produced a candidate insight",
    ["rule"],
)

# Trend metrics
trends_counter = Counter(
    "budgetme_trends_total",
    "Category trends emitted",
    ["direction"],  # up | down | neutral
)

# Summary metrics
summaries_counter = Counter(
    "budgetme_summaries_total",
    "Dashboard summaries computed",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_insights(report: InsightReport) -> None:
    """Count every rule that fired and every insight that made the feed"""
    for fired in report.candidates:
        rule_fired_counter.labels(rule=fired.rule).inc()
    for insight in report.insights:
        insights_counter.labels(type=insight.type.value).inc()


def record_trends(trends: Iterable[Trend]) -> None:
    for trend in trends:
        trends_counter.labels(direction=trend.trend.value).inc()


def record_summary() -> None:
    summaries_counter.inc()
