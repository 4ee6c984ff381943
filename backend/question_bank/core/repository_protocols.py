"""Boundary Protocols - contract between the entity writers and the record store.

Invariants:
    - Services never import the SQLAlchemy implementation; they receive a RecordStore
    - Every method is one store round-trip and commits on its own (no transaction
      spans two calls)
    - Failures raise StoreError (or a subclass); select_one returns None when absent

Filter semantics:
    - {"col": value}          equality
    - {"col": None}           IS NULL
    - {"col": [v1, v2, ...]}  IN (empty list matches nothing)
Order semantics:
    - sequence of (column, descending) pairs
"""

from collections.abc import Mapping, Sequence
from typing import Any, Protocol

Filters = Mapping[str, Any]
OrderBy = tuple[str, bool]


class RecordStore(Protocol):
    """Generic row access over named tables - implemented by infrastructure."""

    async def select(
        self, table: str, filters: Filters | None = None,
        order: Sequence[OrderBy] = (),
    ) -> list[dict]: ...

    async def select_one(self, table: str, filters: Filters) -> dict | None: ...

    async def insert(self, table: str, rows: list[dict]) -> list[dict]: ...

    async def update(
        self, table: str, fields: dict, filters: Filters,
    ) -> list[dict]: ...

    async def delete(self, table: str, filters: Filters) -> int: ...
