"""
Trustflow - Main Application Entry Point

Trust Score Engine for an invoice-financing marketplace: scores invoices
from seller settlement history, buyer payment reputation and invoice size,
and keeps that history current as invoices settle.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from trustflow import __version__
from trustflow.application.services import KeyedLockRegistry
from trustflow.core.config import settings
from trustflow.core.logging import setup_logging
from trustflow.core.metrics import get_metrics, get_metrics_content_type
from trustflow.infrastructure.database import db_manager
from trustflow.infrastructure.memory import InMemoryHistoryStore
from trustflow.presentation.api import api_router
from trustflow.presentation.middleware import (
    LoggingMiddleware,
    RequestContextMiddleware,
    error_handler_middleware,
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Handles startup and shutdown events:
    - Set up logging
    - Create the lock registry and the history backend
    - Release the backend on shutdown
    """
    setup_logging()
    app.state.lock_registry = KeyedLockRegistry()

    if settings.history_backend == "sql":
        db_manager.init()
        await db_manager.create_tables()
    else:
        app.state.history_store = InMemoryHistoryStore()

    logger = structlog.get_logger(__name__)
    logger.info(
        "application_started",
        app=settings.app_name,
        version=__version__,
        history_backend=settings.history_backend,
    )

    yield

    if settings.history_backend == "sql":
        await db_manager.close()
    else:
        app.state.history_store.close()
    logger.info("application_stopped")


app = FastAPI(
    title="Trustflow",
    description="Trust Score Engine for invoice financing",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(LoggingMiddleware)
app.add_middleware(RequestContextMiddleware)

error_handler_middleware(app)

app.include_router(api_router)


async def metrics() -> Response:
    """Prometheus metrics endpoint."""
    return Response(
        content=get_metrics(),
        media_type=get_metrics_content_type(),
    )


if settings.metrics_enabled:
    app.add_api_route("/metrics", metrics, methods=["GET"], include_in_schema=False)


@app.get("/", include_in_schema=False)
async def root():
    """Redirect to API documentation."""

    return RedirectResponse(url="/docs")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
