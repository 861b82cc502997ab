"""POST /v1/trends - per-category spending trends"""

import logging
import random
import time
from datetime import tzinfo

from fastapi import APIRouter, Depends, HTTPException, Request

from budgetme_insights.api.dependencies import get_clock, get_request_id, get_rng, get_timezone, get_trend_jitter
from budgetme_insights.api.v1.schemas import TrendSchema, TrendsRequest, TrendsResponse
from budgetme_insights.config import settings
from budgetme_insights.domain.exceptions import InvalidLimitError
from budgetme_insights.domain.trends import analyze_trends, describe_trend
from budgetme_insights.infrastructure.observability.logging import log_trends_generated
from budgetme_insights.infrastructure.observability.metrics import record_trends
from budgetme_insights.utils.date_utils import Clock

router = APIRouter()


@router.post("/trends", response_model=TrendsResponse)
async def create_trends(
    request_body: TrendsRequest,
    request: Request,
    clock: Clock = Depends(get_clock),
    rng: random.Random = Depends(get_rng),
    jitter: bool = Depends(get_trend_jitter),
    tz: tzinfo = Depends(get_timezone),
):
    """Latest month per category against its historical average, top `limit` by spend"""
    start_time = time.time()
    request_id = get_request_id(request)
    limit = settings.trend_limit if request_body.limit is None else request_body.limit

    try:
        trends = analyze_trends(
            [tx.model_dump() for tx in request_body.transactions],
            limit=limit,
            clock=clock,
            rng=rng,
            jitter=jitter,
            tz=tz,
        )
    except InvalidLimitError as e:
        logging.warning(f"Invalid limit: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    record_trends(trends)
    log_trends_generated(request_id, len(trends), duration_ms)

    return TrendsResponse(
        trends=[TrendSchema(**trend.to_dict(), narrative=describe_trend(trend)) for trend in trends],
    )
