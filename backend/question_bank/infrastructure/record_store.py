"""SQL Record Store - RecordStore implementation over an AsyncSession and SQLAlchemy Core.

Invariants:
    - Table names resolve through Base.metadata; unknown tables/columns raise StoreError
    - Every call commits (or rolls back) before returning: no transaction spans
      two calls, so multi-step writers must compensate on partial failure
    - Every call is bounded by timeout_seconds; expiry raises StoreTimeoutError
    - update/delete refuse to run without filters
    - insert returns rows in the order of the input parameters

Design Decisions:
    - Core statements over ORM units of work: the writers speak in rows and
      filters, which keeps the service layer independent of the mapped classes
    - Exception mapping shared with DatabaseSessionManager via store_error_from()
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from enum import Enum
from typing import TypeVar

from fastapi import Depends
from sqlalchemy import Table
from sqlalchemy import delete as sa_delete
from sqlalchemy import insert as sa_insert
from sqlalchemy import select as sa_select
from sqlalchemy import update as sa_update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

import question_bank.models  # noqa: F401
from question_bank.config import get_settings
from question_bank.core.errors import StoreError, StoreTimeoutError
from question_bank.core.repository_protocols import Filters, OrderBy
from question_bank.db.base import Base
from question_bank.infrastructure.database import get_db, store_error_from

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _table_name(table: str) -> str:
    """Accept Table enum members as well as plain names."""
    return table.value if isinstance(table, Enum) else table


class SqlRecordStore:
    """Row-level access to the question bank tables."""

    def __init__(self, db: AsyncSession, timeout_seconds: float = 30.0):
        self._db = db
        self._timeout = timeout_seconds

    # ─── Public API (RecordStore protocol) ──────────────────────

    async def select(
        self, table: str, filters: Filters | None = None,
        order: Sequence[OrderBy] = (),
    ) -> list[dict]:
        table = _table_name(table)
        t = self._table(table)
        stmt = sa_select(t).where(*self._conditions(t, filters))
        for column_name, descending in order:
            column = self._column(t, column_name)
            stmt = stmt.order_by(column.desc() if descending else column.asc())

        async def call() -> list[dict]:
            result = await self._db.execute(stmt)
            return [dict(row) for row in result.mappings().all()]

        return await self._run("select", table, call)

    async def select_one(self, table: str, filters: Filters) -> dict | None:
        rows = await self.select(table, filters)
        return rows[0] if rows else None

    async def insert(self, table: str, rows: list[dict]) -> list[dict]:
        table = _table_name(table)
        if not rows:
            return []
        t = self._table(table)
        stmt = sa_insert(t).returning(*t.c, sort_by_parameter_order=True)

        async def call() -> list[dict]:
            result = await self._db.execute(stmt, rows)
            return [dict(row) for row in result.mappings().all()]

        return await self._run("insert", table, call)

    async def update(
        self, table: str, fields: dict, filters: Filters,
    ) -> list[dict]:
        table = _table_name(table)
        t = self._table(table)
        if not filters:
            raise StoreError(f"Refusing unfiltered update on {table}", "update", table)
        stmt = (
            sa_update(t)
            .where(*self._conditions(t, filters))
            .values(**fields)
            .returning(*t.c)
        )

        async def call() -> list[dict]:
            result = await self._db.execute(stmt)
            return [dict(row) for row in result.mappings().all()]

        return await self._run("update", table, call)

    async def delete(self, table: str, filters: Filters) -> int:
        table = _table_name(table)
        t = self._table(table)
        if not filters:
            raise StoreError(f"Refusing unfiltered delete on {table}", "delete", table)
        stmt = sa_delete(t).where(*self._conditions(t, filters))

        async def call() -> int:
            result = await self._db.execute(stmt)
            return result.rowcount

        return await self._run("delete", table, call)

    # ─── Helpers ────────────────────────────────────────────────

    def _table(self, name: str) -> Table:
        table = Base.metadata.tables.get(name)
        if table is None:
            raise StoreError(f"Unknown table '{name}'", "resolve", name)
        return table

    def _column(self, table: Table, name: str):
        if name not in table.c:
            raise StoreError(
                f"Unknown column '{name}' on {table.name}", "resolve", table.name,
            )
        return table.c[name]

    def _conditions(self, table: Table, filters: Filters | None) -> list:
        conditions = []
        for name, value in (filters or {}).items():
            column = self._column(table, name)
            if value is None:
                conditions.append(column.is_(None))
            elif isinstance(value, (list, tuple, set, frozenset)):
                conditions.append(column.in_(list(value)))
            else:
                conditions.append(column == value)
        return conditions

    async def _run(
        self, operation: str, table: str, call: Callable[[], Awaitable[T]],
    ) -> T:
        """Execute one round-trip, commit, and map failures to StoreError."""
        try:
            result = await asyncio.wait_for(call(), timeout=self._timeout)
            await self._db.commit()
            return result
        except asyncio.TimeoutError:
            await self._rollback(operation, table)
            logger.error(
                f"Record store {operation} timed out",
                extra={"table": table, "operation": operation},
            )
            raise StoreTimeoutError(operation, table, self._timeout)
        except (SQLAlchemyError, OSError) as e:
            await self._rollback(operation, table)
            error = store_error_from(e, operation, table)
            logger.error(error.message, extra={"table": table, "operation": operation})
            raise error from e

    async def _rollback(self, operation: str, table: str) -> None:
        try:
            await self._db.rollback()
        except (SQLAlchemyError, OSError) as e:
            logger.error(
                f"Rollback after failed {operation} also failed: {e}",
                extra={"table": table, "operation": operation},
            )


async def get_record_store(
    db: AsyncSession = Depends(get_db),
) -> SqlRecordStore:
    """FastAPI dependency: one record store per request, bound to its session."""
    return SqlRecordStore(db, timeout_seconds=get_settings().store_timeout_seconds)
