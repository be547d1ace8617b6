"""
Orders API — Test Configuration (conftest.py)
==============================================

Fixtures:
    mock_db_session        AsyncMock standing in for AsyncSession
    fake_order_service     InMemoryOrderService (tests/fakes.py)
    test_client            httpx client against the app, service swapped for the fake
    sqlite_engine          throwaway aiosqlite database with the schema created
    db_session             AsyncSession on that database
    sql_client             httpx client against the app, real SqlOrderService on SQLite
    incoming_payload       a valid camelCase order body
"""

import os
import tempfile

# Must be set before anything imports orders_api.config
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="orders_api_test_"), "unused.db"
)
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402

import orders_api.models  # noqa: E402,F401
from orders_api.database import Base, get_db_session  # noqa: E402
from orders_api.services.order_service import get_order_service  # noqa: E402

from fakes import InMemoryOrderService  # noqa: E402


@pytest.fixture
def incoming_payload():
    return {
        "customerName": "Ada Lovelace",
        "customerEmail": "ada@example.com",
        "shippingAddress": "12 Analytical Row, London",
        "description": "Difference engine spare parts",
        "totalAmount": "149.90",
        "currency": "gbp",
    }


@pytest.fixture
def mock_db_session():
    """
    AsyncSession double. Tests set `execute.side_effect` / `get.return_value`
    to script query results.
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def fake_order_service():
    return InMemoryOrderService()


@pytest_asyncio.fixture
async def test_client(fake_order_service):
    from orders_api.main import app

    app.dependency_overrides[get_order_service] = lambda: fake_order_service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def sqlite_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'orders.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(sqlite_engine):
    factory = async_sessionmaker(sqlite_engine, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest_asyncio.fixture
async def sql_client(sqlite_engine):
    """App wired to the real SqlOrderService, sessions drawn from sqlite_engine."""
    from orders_api.main import app

    factory = async_sessionmaker(sqlite_engine, expire_on_commit=False)

    async def override_db_session():
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
