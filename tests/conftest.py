"""Pytest fixtures for testing"""

import random
from datetime import datetime
from typing import Any, Dict, Optional

import pytest
from fastapi.testclient import TestClient

from budgetme_insights.api.dependencies import get_clock, get_rng, get_trend_jitter
from budgetme_insights.api.main import create_app
from budgetme_insights.utils.date_utils import FixedClock

# Wednesday 2024-03-13 08:00 Manila: outside every check-in window
QUIET_MOMENT = datetime(2024, 3, 13, 8, 0)


def make_tx(
    date: Optional[str],
    amount: Any,
    type: str = "expense",
    category: Optional[str] = None,
    notes: Optional[str] = None,
    description: Optional[str] = None,
) -> Dict[str, Any]:
    """Transaction record shaped the way the dashboard sends it"""
    record: Dict[str, Any] = {"date": date, "amount": amount, "type": type}
    if category is not None:
        record["category"] = category
    if notes is not None:
        record["notes"] = notes
    if description is not None:
        record["description"] = description
    return record


@pytest.fixture
def quiet_clock() -> FixedClock:
    """Clock that triggers neither check-in rule"""
    return FixedClock(QUIET_MOMENT)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def client(quiet_clock: FixedClock) -> TestClient:
    """FastAPI test client with pinned time, seeded randomness and no trend jitter"""
    app = create_app()

    app.dependency_overrides[get_clock] = lambda: quiet_clock
    app.dependency_overrides[get_rng] = lambda: random.Random(1234)
    app.dependency_overrides[get_trend_jitter] = lambda: False
    return TestClient(app)
