"""Dependency injection for FastAPI endpoints"""

import random
from datetime import tzinfo
from zoneinfo import ZoneInfo

from fastapi import Depends, Request

from budgetme_insights.config import settings
from budgetme_insights.domain.insights import InsightEngine
from budgetme_insights.domain.rules import RuleThresholds
from budgetme_insights.utils.date_utils import Clock, SystemClock


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_timezone() -> tzinfo:
    return ZoneInfo(settings.timezone)


def get_clock(tz: tzinfo = Depends(get_timezone)) -> Clock:
    """Wall clock in the configured timezone"""
    return SystemClock(tz)


def get_rng() -> random.Random:
    """Fresh unseeded random source per request"""
    return random.Random()


def get_thresholds() -> RuleThresholds:
    return settings.rule_thresholds()


def get_trend_jitter() -> bool:
    return settings.trend_jitter


def get_insight_engine(
    clock: Clock = Depends(get_clock),
    rng: random.Random = Depends(get_rng),
    thresholds: RuleThresholds = Depends(get_thresholds),
    tz: tzinfo = Depends(get_timezone),
) -> InsightEngine:
    """Insight engine wired with the request's clock, randomness and thresholds"""
    return InsightEngine(clock=clock, rng=rng, thresholds=thresholds, tz=tz)
