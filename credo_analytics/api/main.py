"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from credo_analytics.api.middleware import MetricsMiddleware, RequestIDMiddleware
from credo_analytics.api.v1 import credit, fraud, segments, trends
from credo_analytics.config import settings
from credo_analytics.domain.categories import build_credit_category_index
from credo_analytics.infrastructure.observability.logging import setup_logging

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Credo Analytics",
        description="Fraud network detection, customer segmentation and credit category service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Built once per app and shared read-only by every request
    app.state.category_index = build_credit_category_index()

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(fraud.router, prefix="/v1", tags=["fraud"])
    app.include_router(segments.router, prefix="/v1", tags=["segments"])
    app.include_router(credit.router, prefix="/v1", tags=["credit"])
    app.include_router(trends.router, prefix="/v1", tags=["trends"])

    return app


app = create_app()
