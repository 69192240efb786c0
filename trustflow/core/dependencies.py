"""Dependency injection for FastAPI."""

from typing import Annotated, AsyncGenerator

from fastapi import Depends, Request

from trustflow.application.services import KeyedLockRegistry, TrustScoreEngine
from trustflow.core.config import settings
from trustflow.domain.interfaces import HistoryRepository
from trustflow.infrastructure.database import db_manager
from trustflow.infrastructure.memory import InMemoryHistoryStore
from trustflow.infrastructure.repositories import (
    InMemoryHistoryRepository,
    SqlHistoryRepository,
)


def get_history_store(request: Request) -> InMemoryHistoryStore:
    """Get the in-memory store created in the application lifespan."""
    return request.app.state.history_store


def get_lock_registry(request: Request) -> KeyedLockRegistry:
    """Get the process-wide lock registry shared by all engine instances."""
    return request.app.state.lock_registry


# Repository dependencies
async def get_history_repository(
    request: Request,
) -> AsyncGenerator[HistoryRepository, None]:
    """Get a HistoryRepository for the configured backend."""
    if settings.history_backend == "sql":
        async with db_manager.session() as session:
            yield SqlHistoryRepository(session)
    else:
        yield InMemoryHistoryRepository(get_history_store(request))


# Service dependencies
async def get_trust_score_engine(
    repository: Annotated[HistoryRepository, Depends(get_history_repository)],
    locks: Annotated[KeyedLockRegistry, Depends(get_lock_registry)],
) -> TrustScoreEngine:
    """Get a TrustScoreEngine instance with all dependencies."""
    return TrustScoreEngine(repository=repository, locks=locks)
