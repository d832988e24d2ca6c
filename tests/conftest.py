"""
Test infrastructure for the Social API.

Strategy
--------
- SQLite in-memory via aiosqlite, so no Postgres is needed in CI.
- StaticPool makes every session share the one in-memory connection;
  a second connection would see an empty database.
- ``PRAGMA foreign_keys=ON`` is issued on connect so invalid user or
  comment references fail the same way they do on Postgres.
- A fresh engine is built per test and both store dependencies
  (``get_session_factory`` for the toggle, ``get_db`` for reads) are
  overridden to use it.
- Redis is disabled by leaving ``cache._redis`` unset; the cache manager
  degrades to misses and no-op writes.
"""
from types import SimpleNamespace

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool

from social_api.cache import cache
from social_api.database import Base, get_db, get_session_factory
from social_api.main import app
from social_api.middleware import install_query_counter
from social_api.models import Comment, Post, User

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def _enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture
async def engine_test():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine.sync_engine, "connect", _enable_foreign_keys)
    install_query_counter(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine_test) -> async_sessionmaker[AsyncSession]:
    factory = async_sessionmaker(engine_test, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session_factory] = lambda: factory
    app.dependency_overrides[get_db] = override_get_db
    yield factory
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncSession:
    """A live session for seeding data and asserting ORM state directly."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def async_client(session_factory) -> AsyncClient:
    cache._redis = None
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def _seed(session_factory) -> SimpleNamespace:
    async with session_factory() as session:
        u1 = User(id="u1", username="author", email="author@example.com")
        u2 = User(id="u2", username="reader", email="reader@example.com")
        u3 = User(id="u3", username="lurker", email="lurker@example.com")
        session.add_all([u1, u2, u3])
        await session.flush()

        p1 = Post(id="p1", title="Post", content="Body", author_id="u1", engagement_score=5)
        session.add(p1)
        await session.flush()

        session.add(Comment(id="c1", content="Nice", post_id="p1", author_id="u1"))
        await session.commit()

    return SimpleNamespace(author="u1", reader="u2", lurker="u3", post="p1", comment="c1")


@pytest_asyncio.fixture
async def seeded(session_factory) -> SimpleNamespace:
    """
    Author ``u1`` owns comment ``c1`` on post ``p1`` (engagement score 5).
    ``u2`` and ``u3`` are other readers.  No likes yet.
    """
    return await _seed(session_factory)


@pytest_asyncio.fixture
async def file_session_factory(tmp_path):
    """
    Session factory over a file-backed SQLite database with one
    connection per session, for tests that run toggles in parallel.
    Writers queue on the database lock (busy timeout) instead of failing.
    Seeded like ``seeded``; yields (factory, ids).
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'social.db'}",
        connect_args={"timeout": 15},
        poolclass=NullPool,
    )
    event.listen(engine.sync_engine, "connect", _enable_foreign_keys)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    ids = await _seed(factory)
    yield factory, ids
    await engine.dispose()
