"""Compensation Stack - undo log for multi-step writes without a spanning transaction.

Invariants:
    - Undo actions run in reverse registration order (LIFO)
    - Each undo is idempotent and retried up to max_attempts times
    - An undo that exhausts its attempts is logged at ERROR with table + filters
      (orphaned rows for operator follow-up) and the outcome becomes FAILED
    - abort() never raises on its own: it returns the error for the caller to raise

Design Decisions:
    - Explicit RollbackOutcome: a failed compensation is visible in logs and
      on PartialWriteError.rollback
    - Only StoreError is retried; anything else is a bug and propagates
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from question_bank.core.domain_types import RollbackOutcome
from question_bank.core.errors import PartialWriteError, StoreError

logger = logging.getLogger(__name__)


@dataclass
class UndoAction:
    """One compensating action for a completed write step."""
    step: str
    table: str
    filters: dict
    action: Callable[[], Awaitable[Any]]


class CompensationStack:
    """Collects undo actions as writes succeed; unwinds them on failure."""

    def __init__(self, max_attempts: int = 3):
        self._max_attempts = max(1, max_attempts)
        self._undos: list[UndoAction] = []

    @property
    def completed_steps(self) -> list[str]:
        return [u.step for u in self._undos]

    def push(
        self, step: str, table: str, filters: dict,
        action: Callable[[], Awaitable[Any]],
    ) -> None:
        name = table.value if isinstance(table, Enum) else table
        self._undos.append(UndoAction(step, name, filters, action))

    async def unwind(self) -> RollbackOutcome:
        """Run every undo, newest first. Returns the aggregate outcome."""
        if not self._undos:
            return RollbackOutcome.NOT_NEEDED
        outcome = RollbackOutcome.SUCCEEDED
        for undo in reversed(self._undos):
            if not await self._attempt(undo):
                outcome = RollbackOutcome.FAILED
        return outcome

    async def abort(self, cause: StoreError) -> StoreError:
        """Compensate after `cause`; wrap it in PartialWriteError if anything was written."""
        if not self._undos:
            return cause
        steps = self.completed_steps
        rollback = await self.unwind()
        log = logger.warning if rollback is RollbackOutcome.SUCCEEDED else logger.error
        log(
            f"Partial write after {steps[-1]}: {cause.message}",
            extra={
                "error_code": cause.code,
                "table": cause.table,
                "operation": cause.operation,
                "rollback": rollback.value,
            },
        )
        return PartialWriteError(cause, rollback, steps)

    async def _attempt(self, undo: UndoAction) -> bool:
        for attempt in range(1, self._max_attempts + 1):
            try:
                await undo.action()
                logger.info(
                    f"Compensated {undo.step}",
                    extra={"step": undo.step, "table": undo.table, "attempt": attempt},
                )
                return True
            except StoreError as e:
                logger.warning(
                    f"Compensating {undo.step} failed: {e.message}",
                    extra={"step": undo.step, "table": undo.table, "attempt": attempt},
                )
        logger.error(
            f"Compensation for {undo.step} exhausted {self._max_attempts} attempts; "
            "rows left orphaned",
            extra={
                "step": undo.step,
                "table": undo.table,
                "filters": {k: str(v) for k, v in undo.filters.items()},
                "rollback": RollbackOutcome.FAILED.value,
            },
        )
        return False
