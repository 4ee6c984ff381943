"""Service test fixtures - async DB, record store, fault injection, FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use the test DB
    - db_manager patched so the readiness probe sees the test engine
    - FaultyRecordStore wraps the real store and fails chosen (operation, table) calls
    - RefusingSession makes the Nth execute fail the way an unreachable server does

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for the SQL used here
"""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

import question_bank.infrastructure.database as db_module
from question_bank.core.errors import StoreError
from question_bank.db.base import Base
from question_bank.infrastructure.database import DatabaseSessionManager, get_db
from question_bank.infrastructure.record_store import SqlRecordStore, get_record_store
from question_bank.main import app

WRITE_OPERATIONS = frozenset({"insert", "update", "delete"})


class FaultyRecordStore:
    """RecordStore wrapper that records every call and fails the configured ones.

    failures maps (operation, table) -> number of times to fail; -1 fails forever.
    """

    def __init__(self, inner, failures: dict | None = None):
        self.inner = inner
        self.failures = dict(failures or {})
        self.calls: list[tuple[str, str]] = []

    @property
    def writes(self) -> list[tuple[str, str]]:
        return [c for c in self.calls if c[0] in WRITE_OPERATIONS]

    def _check(self, operation, table):
        table = getattr(table, "value", table)
        self.calls.append((operation, table))
        remaining = self.failures.get((operation, table), 0)
        if remaining:
            if remaining > 0:
                self.failures[(operation, table)] = remaining - 1
            raise StoreError(
                f"simulated {operation} failure on {table}", operation, table,
            )

    async def select(self, table, filters=None, order=()):
        self._check("select", table)
        return await self.inner.select(table, filters, order)

    async def select_one(self, table, filters):
        self._check("select", table)
        return await self.inner.select_one(table, filters)

    async def insert(self, table, rows):
        self._check("insert", table)
        return await self.inner.insert(table, rows)

    async def update(self, table, fields, filters):
        self._check("update", table)
        return await self.inner.update(table, fields, filters)

    async def delete(self, table, filters):
        self._check("delete", table)
        return await self.inner.delete(table, filters)


class RefusingSession:
    """AsyncSession stand-in whose Nth execute raises ConnectionRefusedError."""

    def __init__(self, inner, refuse_on: int):
        self._inner = inner
        self._refuse_on = refuse_on
        self.executes = 0

    async def execute(self, *args, **kwargs):
        self.executes += 1
        if self.executes == self._refuse_on:
            raise ConnectionRefusedError(111, "Connection refused")
        return await self._inner.execute(*args, **kwargs)

    def __getattr__(self, name):
        return getattr(self._inner, name)

@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def store(test_db):
    return SqlRecordStore(test_db, timeout_seconds=5.0)


@pytest.fixture
def faulty_store(store):
    """Factory: faulty_store({("insert", "options"): 1}) -> FaultyRecordStore."""
    def _make(failures=None):
        return FaultyRecordStore(store, failures)
    return _make


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def inject_store_faults(test_session_factory):
    """Route requests through a FaultyRecordStore. Returns the list of stores created."""
    created: list[FaultyRecordStore] = []

    def _install(failures):
        async def override_get_record_store():
            async with test_session_factory() as session:
                faulty = FaultyRecordStore(SqlRecordStore(session), failures)
                created.append(faulty)
                yield faulty

        app.dependency_overrides[get_record_store] = override_get_record_store
        return created

    return _install


@pytest.fixture
def refusing_store(test_db):
    """Factory: refusing_store(refuse_on=3) -> SqlRecordStore over a RefusingSession."""
    def _make(refuse_on: int):
        return SqlRecordStore(RefusingSession(test_db, refuse_on), timeout_seconds=5.0)
    return _make


@pytest.fixture
def refuse_connections(test_session_factory):
    """Route requests through a store whose Nth execute is refused."""
    def _install(refuse_on: int):
        async def override_get_record_store():
            async with test_session_factory() as session:
                yield SqlRecordStore(RefusingSession(session, refuse_on))

        app.dependency_overrides[get_record_store] = override_get_record_store

    return _install


@pytest.fixture
async def raising_client(client):
    """Client that returns the app's 500 response instead of re-raising."""
    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as c:
        yield c
