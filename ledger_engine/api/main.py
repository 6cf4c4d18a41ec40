"""FastAPI application factory"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from ledger_engine.api.middleware import RequestIDMiddleware, MetricsMiddleware
from ledger_engine.api.v1 import budget, recurring, reminders
from ledger_engine.infrastructure.database.session import init_schema
from ledger_engine.infrastructure.observability.logging import setup_logging
from ledger_engine.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.create_schema_on_startup:
        init_schema()
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Ledger Engine",
        description="Recurring obligations, budget alerts and bill reminder triggers",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(recurring.router, prefix="/v1", tags=["recurring"])
    app.include_router(budget.router, prefix="/v1", tags=["budget"])
    app.include_router(reminders.router, prefix="/v1", tags=["reminders"])

    return app


app = create_app()
