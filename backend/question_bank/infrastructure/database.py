"""Database Session Manager - engine ownership, request sessions, DB error mapping.

Invariants:
    - One engine per process, created by the lifespan and disposed on shutdown
    - A request session rolls back on any database failure and is always closed
    - Every SQLAlchemy or driver connection error leaving this layer is a StoreError
    - Pool sizing applies to server databases only (SQLite manages its own pool)

Design Decisions:
    - store_error_from() is shared with the record store so both paths report the
      same category and message for the same driver failure
    - expire_on_commit=False: rows read after a commit stay usable in async code
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from question_bank.core.errors import StoreError

logger = logging.getLogger(__name__)

_PREFIXES = (
    (IntegrityError, "Integrity constraint violated"),
    (OperationalError, "Connection or operational error"),
    (DBAPIError, "Database driver error"),
    # Driver connect failures (refused, reset) arrive unwrapped
    (OSError, "Connection or operational error"),
)


def store_error_from(
    exc: SQLAlchemyError | OSError, operation: str, table: str | None = None,
) -> StoreError:
    """Translate a SQLAlchemy or driver connection failure into a StoreError."""
    for exc_type, prefix in _PREFIXES:
        if isinstance(exc, exc_type):
            orig = getattr(exc, "orig", None)
            detail = str(orig) if orig is not None else str(exc)
            return StoreError(f"{prefix}: {detail}", operation, table)
    return StoreError(f"Database operation failed: {exc}", operation, table)


def _engine_options(database_url: str, pool_size: int, max_overflow: int) -> dict:
    if make_url(database_url).get_backend_name() == "sqlite":
        return {}
    return {
        "pool_size": pool_size,
        "max_overflow": max_overflow,
        "pool_pre_ping": True,
        "pool_recycle": 3600,
    }


class DatabaseSessionManager:
    """Owns the async engine and hands out sessions for request handling."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        self.engine = create_async_engine(
            database_url,
            **_engine_options(database_url, pool_size, max_overflow),
        )
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        session = self._session_factory()
        try:
            yield session
        except (SQLAlchemyError, OSError) as e:
            await session.rollback()
            error = store_error_from(e, "session")
            logger.error(error.message, extra={"operation": "session"})
            raise error from e
        finally:
            await session.close()

    async def health_check(self, timeout_seconds: float = 5.0) -> bool:
        """True when a trivial query round-trips within the timeout."""
        try:
            async with self.engine.connect() as conn:
                await asyncio.wait_for(
                    conn.execute(text("SELECT 1")), timeout=timeout_seconds,
                )
            return True
        except (SQLAlchemyError, OSError, asyncio.TimeoutError) as e:
            logger.error(f"DB health check failed: {e!r}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


# Set by init_db() from the application lifespan
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    logger.info(
        "Database engine ready",
        extra={"operation": make_url(database_url).get_backend_name()},
    )
    return db_manager


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request."""
    if db_manager is None:
        raise StoreError("Database not initialized", "connect")
    async with db_manager.session() as session:
        yield session
