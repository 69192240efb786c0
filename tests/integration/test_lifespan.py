"""
Integration tests for application startup and dependency wiring.

These tests verify:
1. The lifespan creates the lock registry and the in-memory store
2. Shutdown closes the store
3. The repository dependency follows the configured backend
"""

import pytest
from starlette.requests import Request

from trustflow.main import app, lifespan
from trustflow.application.services import KeyedLockRegistry, TrustScoreEngine
from trustflow.core import dependencies
from trustflow.core.config import settings
from trustflow.infrastructure.memory import InMemoryHistoryStore
from trustflow.infrastructure.repositories import InMemoryHistoryRepository


def make_request() -> Request:
    return Request({"type": "http", "app": app, "headers": []})


class TestLifespan:
    """Tests for startup and shutdown of the memory backend."""

    @pytest.mark.asyncio
    async def test_memory_backend_lifecycle(self, monkeypatch):
        monkeypatch.setattr(settings, "history_backend", "memory")

        async with lifespan(app):
            store = app.state.history_store
            assert isinstance(store, InMemoryHistoryStore)
            assert store.is_open
            assert isinstance(app.state.lock_registry, KeyedLockRegistry)

        assert not store.is_open


class TestDependencies:
    """Tests for the FastAPI dependency providers."""

    @pytest.mark.asyncio
    async def test_memory_backend_yields_memory_repository(self, monkeypatch):
        monkeypatch.setattr(dependencies.settings, "history_backend", "memory")
        store = InMemoryHistoryStore()
        app.state.history_store = store
        app.state.lock_registry = KeyedLockRegistry()
        request = make_request()

        repositories = dependencies.get_history_repository(request)
        repository = await repositories.__anext__()
        engine = await dependencies.get_trust_score_engine(
            repository,
            dependencies.get_lock_registry(request),
        )

        assert isinstance(repository, InMemoryHistoryRepository)
        assert isinstance(engine, TrustScoreEngine)

        await engine.record_settlement("seller_1", 10, True)
        assert store.sellers["seller_1"].total_invoices == 1

        await repositories.aclose()
