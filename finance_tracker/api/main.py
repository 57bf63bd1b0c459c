"""FastAPI application factory"""

import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from finance_tracker.api.dependencies import get_request_id
from finance_tracker.api.middleware import RequestIDMiddleware, MetricsMiddleware
from finance_tracker.api.v1 import budgets, dashboard, session, transactions
from finance_tracker.domain.exceptions import FinanceServiceError, NotAuthenticatedError, ServiceRejectedError
from finance_tracker.infrastructure.observability.logging import setup_logging
from finance_tracker.config import settings
from finance_tracker.tracker import FinanceTracker

# Setup structured logging
setup_logging(settings.log_level)


def create_app(tracker: FinanceTracker | None = None) -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Finance Tracker",
        description="Transactions, budgets and analytics over a remote finance service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.tracker = tracker or FinanceTracker()

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.exception_handler(NotAuthenticatedError)
    async def not_authenticated_handler(request: Request, exc: NotAuthenticatedError):
        return JSONResponse(status_code=401, content={"detail": str(exc)})

    @app.exception_handler(ServiceRejectedError)
    async def rejected_handler(request: Request, exc: ServiceRejectedError):
        logging.warning(f"Finance service rejected request: {exc.message}", extra={"request_id": get_request_id(request)})
        return JSONResponse(status_code=400, content={"detail": exc.message})

    @app.exception_handler(FinanceServiceError)
    async def connection_error_handler(request: Request, exc: FinanceServiceError):
        logging.error(f"Finance service error: {exc}", extra={"request_id": get_request_id(request)})
        return JSONResponse(status_code=503, content={"detail": FinanceServiceError.user_message})

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {
            "status": "ok",
            "service": settings.service_name,
            "authenticated": app.state.tracker.session.is_authenticated,
        }

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(session.router, prefix="/v1", tags=["session"])
    app.include_router(dashboard.router, prefix="/v1", tags=["dashboard"])
    app.include_router(transactions.router, prefix="/v1", tags=["transactions"])
    app.include_router(budgets.router, prefix="/v1", tags=["budgets"])

    return app


app = create_app()
