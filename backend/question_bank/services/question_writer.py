"""Question Writer - nested create/update/soft-delete of question -> variant -> options.

Invariants:
    - Validation completes before the first store call (create and update)
    - Create: question, then one variant, then options for multiple_choice;
      a failure after the question insert deletes what this call wrote
    - Update: snapshot first, then question fields, variant name, delete all
      options, insert the new set; a failure restores the snapshot
    - Options are replaced wholesale, never patched
    - Delete sets deleted_at on the visible question only; children are untouched
    - Reads for GET require is_active = true and deleted_at IS NULL; the re-read
      after a write is by id only

Design Decisions:
    - Compensation instead of a transaction: each store call commits on its own,
      so CompensationStack holds the undo for every completed write
    - Not-found is a 404 (ResourceNotFoundError), not a generic 400/500
"""

import logging
from datetime import datetime, timezone
from functools import partial
from uuid import UUID

from question_bank.core.domain_types import (
    QUESTION_FIELDS, QuestionId, Table, VariantName,
)
from question_bank.core.errors import (
    MissingIdentifierError, ResourceNotFoundError, StoreError,
)
from question_bank.core.nest_records import nest_questions, option_rows
from question_bank.core.repository_protocols import RecordStore
from question_bank.core.validate_payload import (
    validate_question_create, validate_question_update,
)
from question_bank.services.compensation import CompensationStack

logger = logging.getLogger(__name__)

_VISIBLE = {"is_active": True, "deleted_at": None}
_LIST_ORDER = (("created_at", True), ("updated_at", True))


def _now() -> datetime:
    return datetime.now(timezone.utc)


class QuestionWriter:
    """Entity writer for the question aggregate."""

    def __init__(self, store: RecordStore, rollback_max_attempts: int = 3):
        self._store = store
        self._rollback_max_attempts = rollback_max_attempts

    # ─── Reads ──────────────────────────────────────────────────

    async def list_questions(self) -> list[dict]:
        questions = await self._store.select(
            Table.QUESTIONS, _VISIBLE, order=_LIST_ORDER,
        )
        return await self._nest(questions)

    async def get_question(self, question_id: QuestionId) -> dict:
        nested = await self._read_nested({"id": question_id, **_VISIBLE})
        if nested is None:
            raise ResourceNotFoundError("Question", str(question_id))
        return nested

    # ─── Writes ─────────────────────────────────────────────────

    async def create_question(self, payload: dict) -> dict | None:
        """Insert question, variant and options; compensate on partial failure."""
        variant_name = validate_question_create(payload)
        stack = CompensationStack(self._rollback_max_attempts)
        store = self._store
        try:
            question = (await store.insert(Table.QUESTIONS, [{
                "question_en": payload["question_en"],
                "question_vi": payload["question_vi"],
                "is_active": (
                    True if payload.get("is_active") is None
                    else payload["is_active"]
                ),
                "example_en": payload.get("example_en"),
                "example_vi": payload.get("example_vi"),
            }]))[0]
            question_id = question["id"]
            by_id = {"id": question_id}
            stack.push(
                "insert_question", Table.QUESTIONS, by_id,
                partial(store.delete, Table.QUESTIONS, by_id),
            )

            variant = (await store.insert(Table.QUESTION_VARIANT, [{
                "name": variant_name.value,
                "question_id": question_id,
            }]))[0]
            by_question = {"question_id": question_id}
            stack.push(
                "insert_variant", Table.QUESTION_VARIANT, by_question,
                partial(store.delete, Table.QUESTION_VARIANT, by_question),
            )

            if variant_name is VariantName.MULTIPLE_CHOICE:
                await store.insert(
                    Table.OPTIONS,
                    option_rows(payload["question_variant_options"], variant["id"]),
                )
        except StoreError as e:
            raise await stack.abort(e) from e

        logger.info(
            "Question created",
            extra={"question_id": str(question_id), "step": variant_name.value},
        )
        return await self._read_nested({"id": question_id})

    async def update_question(
        self, question_id: QuestionId | None, payload: dict,
    ) -> dict | None:
        """Update question fields, variant and option set; restore snapshot on failure.

        `payload` holds only the keys the client sent.
        """
        if question_id is None:
            raise MissingIdentifierError("Question")
        variant_name = validate_question_update(payload)
        store = self._store

        current = await store.select_one(
            Table.QUESTIONS, {"id": question_id, "deleted_at": None},
        )
        if current is None:
            raise ResourceNotFoundError("Question", str(question_id))
        variant = await store.select_one(
            Table.QUESTION_VARIANT, {"question_id": question_id},
        )
        if variant is None:
            raise ResourceNotFoundError("QuestionVariant", str(question_id))
        variant_id = variant["id"]
        previous_options = await store.select(
            Table.OPTIONS, {"question_variant_id": variant_id},
        )

        now = _now()
        fields = {k: payload[k] for k in QUESTION_FIELDS if k in payload}
        fields["updated_at"] = now
        by_id = {"id": question_id}
        by_variant = {"id": variant_id}
        by_owner = {"question_variant_id": variant_id}

        stack = CompensationStack(self._rollback_max_attempts)
        try:
            await store.update(Table.QUESTIONS, fields, by_id)
            stack.push(
                "update_question", Table.QUESTIONS, by_id,
                partial(
                    store.update, Table.QUESTIONS,
                    {k: current[k] for k in fields}, by_id,
                ),
            )

            await store.update(
                Table.QUESTION_VARIANT,
                {"name": variant_name.value, "updated_at": now}, by_variant,
            )
            stack.push(
                "update_variant", Table.QUESTION_VARIANT, by_variant,
                partial(
                    store.update, Table.QUESTION_VARIANT,
                    {"name": variant["name"], "updated_at": variant["updated_at"]},
                    by_variant,
                ),
            )

            await store.delete(Table.OPTIONS, by_owner)
            stack.push(
                "replace_options", Table.OPTIONS, by_owner,
                partial(self._restore_options, variant_id, previous_options),
            )

            if variant_name is VariantName.MULTIPLE_CHOICE:
                await store.insert(
                    Table.OPTIONS,
                    option_rows(payload["question_variant_options"], variant_id, now),
                )
        except StoreError as e:
            raise await stack.abort(e) from e

        logger.info("Question updated", extra={"question_id": str(question_id)})
        return await self._read_nested(by_id)

    async def delete_question(self, question_id: QuestionId | None) -> None:
        """Soft delete: stamp deleted_at on the visible row."""
        if question_id is None:
            raise MissingIdentifierError("Question")
        rows = await self._store.update(
            Table.QUESTIONS, {"deleted_at": _now()},
            {"id": question_id, "deleted_at": None},
        )
        if not rows:
            raise ResourceNotFoundError("Question", str(question_id))
        logger.info("Question soft-deleted", extra={"question_id": str(question_id)})

    # ─── Helpers ────────────────────────────────────────────────

    async def _restore_options(
        self, variant_id: UUID, previous: list[dict],
    ) -> None:
        """Put back the option rows that existed before the update. Idempotent."""
        await self._store.delete(Table.OPTIONS, {"question_variant_id": variant_id})
        await self._store.insert(Table.OPTIONS, [dict(row) for row in previous])

    async def _read_nested(self, filters: dict) -> dict | None:
        questions = await self._store.select(Table.QUESTIONS, filters)
        if not questions:
            return None
        return (await self._nest(questions[:1]))[0]

    async def _nest(self, questions: list[dict]) -> list[dict]:
        if not questions:
            return []
        variants = await self._store.select(
            Table.QUESTION_VARIANT,
            {"question_id": [q["id"] for q in questions]},
        )
        options = []
        if variants:
            options = await self._store.select(
                Table.OPTIONS,
                {"question_variant_id": [v["id"] for v in variants]},
            )
        return nest_questions(questions, variants, options)
