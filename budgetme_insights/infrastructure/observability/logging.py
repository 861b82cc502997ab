"""Structured JSON logging for the insights service"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger.json import JsonFormatter


class CustomJsonFormatter(JsonFormatter):
    """JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = "budgetme-insights"


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging on the root logger"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_insights_generated(
    request_id: str,
    candidate_count: int,
    emitted_count: int,
    duration_ms: float,
) -> None:
    """One record per insight engine run"""
    logging.info(
        "Insights generated",
        extra={
            "request_id": request_id,
            "step": "insights_complete",
            "candidate_count": candidate_count,
            "emitted_count": emitted_count,
            "duration_ms": duration_ms,
        },
    )


def log_trends_generated(
    request_id: str,
    emitted_count: int,
    duration_ms: float,
) -> None:
    """One record per trend analysis"""
    logging.info(
        "Trends generated",
        extra={
            "request_id": request_id,
            "step": "trends_complete",
            "emitted_count": emitted_count,
            "duration_ms": duration_ms,
        },
    )


def log_summary_generated(
    request_id: str,
    transaction_count: int,
    category_count: int,
    duration_ms: float,
) -> None:
    """One record per dashboard summary"""
    logging.info(
        "Summary generated",
        extra={
            "request_id": request_id,
            "step": "summary_complete",
            "transaction_count": transaction_count,
            "category_count": category_count,
            "duration_ms": duration_ms,
        },
    )
