"""
Askwell Backend — Test Configuration (conftest.py)
==================================================

What:  Shared fixtures: a real database per test, seeded users, an HTTP client.
How:   Each test gets a fresh file-backed SQLite database (aiosqlite) built
       with `Base.metadata.create_all`. Foreign keys are switched on and
       every transaction starts with BEGIN IMMEDIATE, so concurrent
       sessions take turns on the write lock the way row locks make them
       take turns on PostgreSQL.

Fixture Hierarchy (all function-scoped):
    engine ─▶ session_factory ─▶ db ─▶ users
                              └──────▶ client (app with get_db_session overridden)
"""

import os
import tempfile

# Settings are read at import time, so the environment comes first
_TEST_DIR = tempfile.mkdtemp(prefix="askwell_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR}/app.db"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RATE_LIMIT_REQUESTS"] = "10000"

from typing import AsyncGenerator, Dict  # noqa: E402

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

from askwell.database import Base, get_db_session  # noqa: E402
from askwell.models import User  # noqa: E402

USER_IDS = ("alice", "bob", "carol", "dave", "erin")


# ══════════════════════════════════════════════════════════════════════════
# Database
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def engine(tmp_path):
    test_engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'askwell.db'}",
        poolclass=NullPool,
        connect_args={"timeout": 30},
    )

    @event.listens_for(test_engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # Let SQLAlchemy issue BEGIN itself (needed for SAVEPOINT and IMMEDIATE)
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(test_engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    await test_engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """
    One session for the test body.

    Services only flush, so a test that needs its writes visible to other
    sessions (concurrency tests) must commit explicitly.
    """
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def users(db) -> Dict[str, str]:
    """Five committed users, keyed by id."""
    for user_id in USER_IDS:
        db.add(User(
            id=user_id,
            email=f"{user_id}@example.com",
            first_name=user_id.title(),
        ))
    await db.commit()
    return {user_id: user_id for user_id in USER_IDS}


# ══════════════════════════════════════════════════════════════════════════
# HTTP
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def client(session_factory):
    """
    HTTPX AsyncClient against a fresh app whose sessions use the test database.

    Usage:
        response = await client.post("/api/votes", json={...}, headers={"X-User-ID": "bob"})
    """
    from askwell.main import create_app

    async def _test_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app = create_app()
    app.dependency_overrides[get_db_session] = _test_db_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client
