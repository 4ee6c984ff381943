"""Questions Resource - single path, dispatch on method, `id` query parameter.

Invariants:
    - GET without id lists visible questions; with id returns one (404 if absent)
    - POST creates the nested question and answers 201
    - PUT/DELETE without id answer 400 "Question ID is required" before any store call
    - Non-UUID id or malformed body answer 400 via RequestValidationError
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from question_bank.api.respond import preflight_ok, respond
from question_bank.config import get_settings
from question_bank.core.domain_types import QuestionId
from question_bank.infrastructure.record_store import SqlRecordStore, get_record_store
from question_bank.schemas.question import QuestionPayload
from question_bank.services.question_writer import QuestionWriter

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/questions", tags=["questions"])


def get_question_writer(
    store: SqlRecordStore = Depends(get_record_store),
) -> QuestionWriter:
    return QuestionWriter(store, get_settings().rollback_max_attempts)


def _as_id(value: UUID | None) -> QuestionId | None:
    return QuestionId(value) if value is not None else None


@router.options("")
async def questions_options():
    return preflight_ok()


@router.get("")
async def read_questions(
    question_id: UUID | None = Query(None, alias="id"),
    writer: QuestionWriter = Depends(get_question_writer),
):
    """List visible questions, or fetch one by id."""
    if question_id is None:
        questions = await writer.list_questions()
        return respond("Questions retrieved successfully", data=questions)
    question = await writer.get_question(QuestionId(question_id))
    return respond("Question retrieved successfully", data=question)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_question(
    body: QuestionPayload,
    writer: QuestionWriter = Depends(get_question_writer),
):
    question = await writer.create_question(body.model_dump())
    return respond(
        "Question created successfully", data=question,
        status_code=status.HTTP_201_CREATED,
    )


@router.put("")
async def update_question(
    body: QuestionPayload | None = None,
    question_id: UUID | None = Query(None, alias="id"),
    writer: QuestionWriter = Depends(get_question_writer),
):
    """Replace variant/options and patch the fields the client sent."""
    payload = body.model_dump(exclude_unset=True) if body else {}
    question = await writer.update_question(_as_id(question_id), payload)
    return respond("Question updated successfully", data=question)


@router.delete("")
async def delete_question(
    question_id: UUID | None = Query(None, alias="id"),
    writer: QuestionWriter = Depends(get_question_writer),
):
    await writer.delete_question(_as_id(question_id))
    return respond("Question deleted successfully")
