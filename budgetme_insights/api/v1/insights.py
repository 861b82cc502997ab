"""POST /v1/insights - rule-based insight feed"""

import logging
import time

from fastapi import APIRouter, Depends, HTTPException, Request

from budgetme_insights.api.dependencies import get_insight_engine, get_request_id
from budgetme_insights.api.v1.schemas import InsightsRequest, InsightsResponse
from budgetme_insights.config import settings
from budgetme_insights.domain.exceptions import InvalidLimitError
from budgetme_insights.domain.insights import InsightEngine
from budgetme_insights.infrastructure.observability.logging import log_insights_generated
from budgetme_insights.infrastructure.observability.metrics import record_insights

router = APIRouter()


@router.post("/insights", response_model=InsightsResponse)
async def create_insights(
    request_body: InsightsRequest,
    request: Request,
    engine: InsightEngine = Depends(get_insight_engine),
):
    """
    Build the dashboard insight feed for one snapshot.

    Flow:
    1. Derive any totals the caller left out
    2. Evaluate every rule
    3. Shuffle the candidates and keep `limit`
    """
    start_time = time.time()
    request_id = get_request_id(request)
    limit = settings.insight_limit if request_body.limit is None else request_body.limit

    try:
        report = engine.generate(
            transactions=[tx.model_dump() for tx in request_body.transactions],
            budgets=[budget.model_dump() for budget in request_body.budgets],
            limit=limit,
            income=request_body.income,
            expenses=request_body.expenses,
            savings_rate=request_body.savings_rate,
        )
    except InvalidLimitError as e:
        logging.warning(f"Invalid limit: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    record_insights(report)
    log_insights_generated(request_id, len(report.candidates), len(report.insights), duration_ms)

    return InsightsResponse(
        aggregates=report.aggregates.to_dict(),
        insights=[insight.to_dict() for insight in report.insights],
        candidate_count=len(report.candidates),
    )
