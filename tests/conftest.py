"""
HackReg Backend - Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.
Who:   Used by all test files in the tests/ directory.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: Mock database session (no real DB needed)
    ├── mock_store:      AsyncMock ChallengeStore for service tests
    ├── session_factory: async_sessionmaker over a fresh on-disk SQLite file
    ├── db_session:      One AsyncSession from session_factory
    └── test_client:     HTTPX AsyncClient wired to the app and session_factory
"""

import os
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Must run before any hackreg import: settings and the engine are built at import.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests
os.environ["RATE_LIMIT_REQUESTS"] = "10000"
os.environ["REGISTRATION_CLOSE_DATETIME"] = "2099-01-01T00:00:00+00:00"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from hackreg.database import Base, get_db_session  # noqa: E402
from hackreg.models.challenge import Challenge  # noqa: E402, F401
from hackreg.services.store_base import ChallengeStore  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Mocks
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Service tests hand it straight to a mocked store, so it only needs to
    exist; it is never queried.
    """
    session = AsyncMock(spec=AsyncSession)
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def mock_store():
    """ChallengeStore whose three operations are AsyncMocks."""
    store = MagicMock(spec=ChallengeStore)
    store.find_by_user_id = AsyncMock(return_value=None)
    store.create = AsyncMock()
    store.update_attempts_and_completion = AsyncMock()
    return store


# ══════════════════════════════════════════════════════════════════════════
# Real Database (SQLite via aiosqlite)
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def session_factory(tmp_path) -> AsyncGenerator[async_sessionmaker, None]:
    """
    A session factory over a throwaway SQLite file with the schema created.

    A file rather than :memory: so that every session sees the same data.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'hackreg.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """
    Provides an async HTTP test client for endpoint testing.

    How:   ASGITransport routes requests straight into the app (the lifespan
           does not run, so no startup database wait). get_db_session is
           overridden with the same commit/rollback contract on the test DB.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
    """
    from hackreg.main import app

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
