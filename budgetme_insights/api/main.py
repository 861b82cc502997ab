"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from budgetme_insights.api.middleware import MetricsMiddleware, RequestIDMiddleware
from budgetme_insights.api.v1 import insights, summary, trends
from budgetme_insights.config import settings
from budgetme_insights.infrastructure.observability.logging import setup_logging

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="BudgetMe Insights",
        description="Rule-based financial insights and spending trends for the dashboard",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(insights.router, prefix="/v1", tags=["insights"])
    app.include_router(trends.router, prefix="/v1", tags=["trends"])
    app.include_router(summary.router, prefix="/v1", tags=["summary"])

    return app


app = create_app()
