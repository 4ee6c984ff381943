"""Topics Resource - flat CRUD for categories on a single path.

Invariants:
    - Same dispatch and envelope rules as the questions resource
    - PUT/DELETE without id answer 400 "Topic ID is required"
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from question_bank.api.respond import preflight_ok, respond
from question_bank.core.domain_types import TopicId
from question_bank.infrastructure.record_store import SqlRecordStore, get_record_store
from question_bank.schemas.topic import TopicPayload
from question_bank.services.topic_writer import TopicWriter

router = APIRouter(prefix="/api/v1/topics", tags=["topics"])


def get_topic_writer(
    store: SqlRecordStore = Depends(get_record_store),
) -> TopicWriter:
    return TopicWriter(store)


def _as_id(value: UUID | None) -> TopicId | None:
    return TopicId(value) if value is not None else None


@router.options("")
async def topics_options():
    return preflight_ok()


@router.get("")
async def read_topics(
    topic_id: UUID | None = Query(None, alias="id"),
    writer: TopicWriter = Depends(get_topic_writer),
):
    if topic_id is None:
        return respond("Topics retrieved successfully", data=await writer.list_topics())
    topic = await writer.get_topic(TopicId(topic_id))
    return respond("Topic retrieved successfully", data=topic)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_topic(
    body: TopicPayload,
    writer: TopicWriter = Depends(get_topic_writer),
):
    topic = await writer.create_topic(body.model_dump())
    return respond(
        "Topic created successfully", data=topic,
        status_code=status.HTTP_201_CREATED,
    )


@router.put("")
async def update_topic(
    body: TopicPayload | None = None,
    topic_id: UUID | None = Query(None, alias="id"),
    writer: TopicWriter = Depends(get_topic_writer),
):
    payload = body.model_dump(exclude_unset=True) if body else {}
    topic = await writer.update_topic(_as_id(topic_id), payload)
    return respond("Topic updated successfully", data=topic)


@router.delete("")
async def delete_topic(
    topic_id: UUID | None = Query(None, alias="id"),
    writer: TopicWriter = Depends(get_topic_writer),
):
    await writer.delete_topic(_as_id(topic_id))
    return respond("Topic deleted successfully")
