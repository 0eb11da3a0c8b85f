# File: src/cashledger/main.py
"""FastAPI application factory."""

import os
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI

from cashledger.core.logging import configure_logging, get_logger

configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager for startup and shutdown events."""
    start_time = datetime.now()
    logger.info("app.startup", message="CashLedger starting up", timestamp=start_time.isoformat())

    from cashledger.api.health import set_app_start_time

    set_app_start_time(start_time)

    yield

    logger.info("app.shutdown", message="CashLedger shutting down gracefully")


def _setup_middleware(app: FastAPI) -> None:
    """Configure all middleware."""
    from cashledger.middleware.logging import RequestIDMiddleware

    app.add_middleware(RequestIDMiddleware)


def _register_routers(app: FastAPI) -> None:
    """Register all API routers."""
    from cashledger.api.cash_session import router as cash_session_router
    from cashledger.api.health import router as health_router
    from cashledger.api.session_history import router as session_history_router

    app.include_router(health_router)
    app.include_router(session_history_router)
    app.include_router(cash_session_router)


def create_app() -> FastAPI:
    """Application factory for CashLedger."""
    environment = os.getenv("ENVIRONMENT", "development")

    app = FastAPI(
        title="CashLedger API",
        description="Cashier session ledger and reconciliation",
        version="0.1.0",
        lifespan=lifespan,
        docs_url=None if environment == "production" else "/docs",
    )

    from cashledger.core.exception_handlers import register_exception_handlers

    register_exception_handlers(app)
    _setup_middleware(app)
    _register_routers(app)

    logger.info("app.configured", environment=environment)

    return app


def run() -> None:
    """Development server entrypoint."""
    uvicorn.run(
        "cashledger.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
