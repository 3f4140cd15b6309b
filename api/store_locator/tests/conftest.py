"""Test fixtures and configuration for Store Locator API tests."""
from __future__ import annotations

import os
from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock, patch

import pytest


def pytest_configure(config):
    """Set up environment variables before any test imports happen."""
    os.environ["ENVIRONMENT"] = "development"
    os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
    os.environ["REDIS_URL"] = "redis://localhost:6379/0"
    os.environ["CORS_ORIGINS"] = "http://localhost:8080"
    os.environ["API_CACHE_TTL_SECONDS"] = "300"
    os.environ["NEAREST_STORES_LIMIT"] = "5"
    os.environ["MAX_STORES_LIMIT"] = "50"
    os.environ["RATE_LIMIT_DEFAULT"] = "10000/minute"

    try:
        from store_locator.core.config import get_settings
        get_settings.cache_clear()
    except ImportError:
        pass


from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from store_locator.db.base import Base
from store_locator.db.models import Store
from store_locator.services.nearest import StoreRecord


@pytest.fixture
async def async_engine():
    """Create an async SQLite engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def async_session(async_engine) -> AsyncIterator[AsyncSession]:
    """Create an async session for testing."""
    factory = async_sessionmaker(async_engine, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
def mock_redis():
    """Mock Redis client for tests."""
    mock = MagicMock()
    mock.get = AsyncMock(return_value=None)
    mock.set = AsyncMock(return_value=True)
    mock.delete = AsyncMock(return_value=1)
    mock.ping = AsyncMock(return_value=True)
    mock.close = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def mock_session():
    session = AsyncMock()
    session.execute = AsyncMock(return_value=MagicMock(scalar=MagicMock(return_value=1)))
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    return session


@pytest.fixture
def client(mock_redis, mock_session) -> Iterator[TestClient]:
    """Create a test client with mocked dependencies."""
    from store_locator.core.config import get_settings
    get_settings.cache_clear()

    @asynccontextmanager
    async def mock_get_session():
        yield mock_session

    @asynccontextmanager
    async def mock_transaction():
        yield mock_session

    async def mock_get_redis():
        return mock_redis

    with patch("store_locator.routes.stores.get_async_session", mock_get_session), \
            patch("store_locator.routes.health.async_transaction", mock_transaction), \
            patch("store_locator.routes.health.get_redis_client", mock_get_redis), \
            patch("store_locator.services.cache._cache._redis", mock_redis):
        from store_locator.main import app
        with TestClient(app) as test_client:
            yield test_client


@pytest.fixture
def sample_store() -> Store:
    """Create a sample store row for testing."""
    return Store(
        id=101,
        title="Egmore Store",
        address_line1="12 Pantheon Road",
        address_line2=None,
        locality="Egmore",
        administrative_area="Tamil Nadu",
        postal_code="600008",
        country_code="IN",
        lat=13.0732,
        lon=80.2609,
    )


@pytest.fixture
def chennai_records() -> list[StoreRecord]:
    """Store records at increasing distance from central Chennai (13.0843, 80.2705)."""
    return [
        StoreRecord(id=1, title="Central", address="Anna Salai, Chennai", lat=13.0843, lon=80.2705),
        StoreRecord(id=2, title="Egmore", address=None, lat=13.0732, lon=80.2609),
        StoreRecord(id=3, title="Adyar", address="Adyar, Chennai", lat=13.0012, lon=80.2565),
        StoreRecord(id=4, title="Tambaram", address="Tambaram, Chennai", lat=12.9249, lon=80.1000),
        StoreRecord(id=5, title="Chengalpattu", address=None, lat=12.6819, lon=79.9888),
        StoreRecord(id=6, title="Bengaluru", address="Bengaluru, Karnataka", lat=12.9716, lon=77.5946),
        StoreRecord(id=7, title="Mumbai", address="Mumbai, Maharashtra", lat=19.0760, lon=72.8777),
    ]
