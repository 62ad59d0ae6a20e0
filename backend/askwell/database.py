"""
Askwell Backend — Database Session Management
==============================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
How:   Creates an async engine with connection pooling, provides a session
       dependency that commits on success and rolls back on error.
Who:   Used by route handlers via FastAPI's dependency injection system.
When:  Engine is created at module import; sessions are created per-request.

Transaction Boundary:
    One request = one session = one transaction. Services only flush, so a
    vote row and the counter it moves, or a question and its tag links,
    commit together in get_db_session() or not at all.

Connection Pooling:
    pool_size=20:      Persistent connections for normal load
    max_overflow=10:   Temporary connections for traffic spikes (total max = 30)
    pool_pre_ping:     Validates connections before use
    pool_recycle=3600: Recycles connections every hour
"""

from typing import AsyncGenerator

from sqlalchemy import MetaData
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from askwell.config import settings


# ── Engine Configuration ──────────────────────────────────────────────────
_engine_options = {
    "pool_pre_ping": settings.db_pool_pre_ping,
    # SQL echo only in DEBUG mode
    "echo": settings.log_level == "DEBUG",
}
# SQLite (local runs, tests) keeps its dialect's own pool, which may not
# accept sizing arguments
if not settings.database_url.startswith("sqlite"):
    _engine_options.update(
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_recycle=3600,
    )

engine = create_async_engine(settings.database_url, **_engine_options)

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: ORM objects stay readable after commit. Lazy
# refreshes are not possible on an AsyncSession outside an await.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
# Constraint names are deterministic so Alembic migrations can reference them.
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models inherit from this class to register with the shared metadata
    used by Alembic and by `create_all` in the test suite.
    """
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler (services flush into it)
        3. On success: commits the transaction
        4. On error: rolls back, so no partial counter or notification survives
        5. Always: closes the session (returns connection to pool)

    Example usage in a route:
        @router.get("/questions")
        async def list_questions(db: AsyncSession = Depends(get_db_session)):
            return await query_service.list_questions(db)
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


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def dispose_engine() -> None:
    """Closes all pooled connections. Called from the lifespan shutdown."""
    await engine.dispose()
