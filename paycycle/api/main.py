"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from paycycle.api.middleware import RequestIDMiddleware, MetricsMiddleware
from paycycle.api.v1 import cards, categories, transactions, payments, receipts
from paycycle.infrastructure.observability.logging import setup_logging
from paycycle.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Paycycle",
        description="Card billing cycles and upcoming payment projections",
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

    # Register API routers
    app.include_router(cards.router, prefix="/v1", tags=["cards"])
    app.include_router(categories.router, prefix="/v1", tags=["categories"])
    app.include_router(transactions.router, prefix="/v1", tags=["transactions"])
    app.include_router(payments.router, prefix="/v1", tags=["payments"])
    app.include_router(receipts.router, prefix="/v1", tags=["receipts"])

    return app


app = create_app()
