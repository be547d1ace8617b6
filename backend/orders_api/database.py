"""
Orders API — Database Session Management
=========================================

What:  Async SQLAlchemy engine, session factory, declarative base and the
       per-request session dependency.
Why:   A request's writes land in one transaction, committed or discarded
       as a whole.
How:   One engine per process; every request gets its own AsyncSession which
       commits when the handler returns and rolls back when it raises.
Who:   get_order_service() depends on get_db_session(); the health route and
       the lifespan use the engine directly.
When:  Engine at import time; sessions per request; engine disposed on shutdown.
"""

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from orders_api.config import settings


# ── Engine ────────────────────────────────────────────────────────────────
engine = create_async_engine(settings.database_url, **settings.engine_options())

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: DTOs are built from ORM objects after the flush,
# and attribute access must not trigger a lazy reload outside the session.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for all ORM models; its metadata drives Alembic."""
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    Lifecycle:
        1. Open a session from the factory
        2. Yield it to the route (via the order service dependency)
        3. Commit if the route returned normally
        4. Roll back and re-raise if anything failed
        5. Close the session, returning the connection to the pool

    Exceptions are re-raised untouched so the global handlers in main.py can
    pick the status code.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def dispose_engine() -> None:
    """Close every pooled connection. Called from the app lifespan on shutdown."""
    await engine.dispose()
