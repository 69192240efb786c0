"""
Fixtures for integration tests.

Provides:
- In-memory SQLite database for the SQL history repository
- Test client backed by the SQL repository
- Test client backed by the in-memory history store
- Test client whose history store is closed
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from trustflow.main import app
from trustflow.application.services import KeyedLockRegistry
from trustflow.core.dependencies import get_history_repository, get_lock_registry
from trustflow.infrastructure.database import Base
from trustflow.infrastructure.memory import InMemoryHistoryStore
from trustflow.infrastructure.repositories import (
    InMemoryHistoryRepository,
    SqlHistoryRepository,
)


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def test_engine():
    """Create an in-memory SQLite async engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def test_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with async_session() as session:
        yield session


# =============================================================================
# History Store Fixtures
# =============================================================================

@pytest.fixture
def history_store() -> InMemoryHistoryStore:
    """Create a fresh in-memory history store."""
    return InMemoryHistoryStore()


@pytest.fixture
def lock_registry() -> KeyedLockRegistry:
    """Create a lock registry shared by every request of a test."""
    return KeyedLockRegistry()


# =============================================================================
# App Client Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def client(
    test_session: AsyncSession,
    lock_registry: KeyedLockRegistry,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client backed by the SQL history repository.

    This client:
    - Uses an in-memory SQLite database
    - Shares one session across requests; engine mutations commit on it
    """
    async def override_get_history_repository():
        yield SqlHistoryRepository(test_session)

    def override_get_lock_registry():
        return lock_registry

    app.dependency_overrides[get_history_repository] = override_get_history_repository
    app.dependency_overrides[get_lock_registry] = override_get_lock_registry

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def memory_client(
    history_store: InMemoryHistoryStore,
    lock_registry: KeyedLockRegistry,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client backed by the in-memory history store.

    Safe for concurrent requests: the store has no session to share.
    """
    async def override_get_history_repository():
        yield InMemoryHistoryRepository(history_store)

    def override_get_lock_registry():
        return lock_registry

    app.dependency_overrides[get_history_repository] = override_get_history_repository
    app.dependency_overrides[get_lock_registry] = override_get_lock_registry

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client_with_closed_store(
    lock_registry: KeyedLockRegistry,
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client whose history store is unavailable."""
    store = InMemoryHistoryStore()
    store.close()

    async def override_get_history_repository():
        yield InMemoryHistoryRepository(store)

    def override_get_lock_registry():
        return lock_registry

    app.dependency_overrides[get_history_repository] = override_get_history_repository
    app.dependency_overrides[get_lock_registry] = override_get_lock_registry

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# =============================================================================
# Helper Fixtures
# =============================================================================

@pytest.fixture
def score_request() -> dict:
    """Request body for a trust score of a new seller."""
    return {
        "seller_id": "seller_123",
        "invoice_amount": "1000.00",
        "buyer_id": "buyer@example.com",
    }
