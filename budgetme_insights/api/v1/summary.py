"""POST /v1/summary - dashboard headline numbers and category breakdown"""

import logging
import time
from dataclasses import asdict
from datetime import tzinfo

from fastapi import APIRouter, Depends, HTTPException, Request

from budgetme_insights.api.dependencies import get_request_id, get_timezone
from budgetme_insights.api.v1.schemas import CategorySchema, SummaryRequest, SummaryResponse, SummarySchema
from budgetme_insights.domain.aggregator import category_breakdown, summarize
from budgetme_insights.domain.models import coerce_transactions
from budgetme_insights.infrastructure.observability.logging import log_summary_generated
from budgetme_insights.infrastructure.observability.metrics import record_summary

router = APIRouter()


@router.post("/summary", response_model=SummaryResponse)
async def create_summary(
    request_body: SummaryRequest,
    request: Request,
    tz: tzinfo = Depends(get_timezone),
):
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        transactions = coerce_transactions([tx.model_dump() for tx in request_body.transactions], tz)
        summary = summarize(transactions)
        categories = category_breakdown(transactions)
    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    record_summary()
    log_summary_generated(request_id, len(transactions), len(categories), duration_ms)

    return SummaryResponse(
        summary=SummarySchema(**asdict(summary)),
        categories=[CategorySchema(name=item.name, amount=item.amount) for item in categories],
    )
