"""Topic Writer - flat CRUD with soft delete for topics (categories).

Invariants:
    - Reads only see rows with deleted_at IS NULL, newest first
    - Create requires name_en and name_vi; update is partial
    - Delete stamps deleted_at; a missing or already-deleted topic is a 404
"""

import logging
from datetime import datetime, timezone

from question_bank.core.domain_types import TOPIC_FIELDS, Table, TopicId
from question_bank.core.errors import MissingIdentifierError, ResourceNotFoundError
from question_bank.core.repository_protocols import RecordStore
from question_bank.core.validate_payload import validate_topic_create

logger = logging.getLogger(__name__)

_VISIBLE = {"deleted_at": None}


class TopicWriter:
    """Entity writer for topics."""

    def __init__(self, store: RecordStore):
        self._store = store

    async def list_topics(self) -> list[dict]:
        return await self._store.select(
            Table.TOPICS, _VISIBLE, order=(("created_at", True),),
        )

    async def get_topic(self, topic_id: TopicId) -> dict:
        topic = await self._store.select_one(
            Table.TOPICS, {"id": topic_id, **_VISIBLE},
        )
        if topic is None:
            raise ResourceNotFoundError("Topic", str(topic_id))
        return topic

    async def create_topic(self, payload: dict) -> dict:
        validate_topic_create(payload)
        topic = (await self._store.insert(Table.TOPICS, [{
            "name_en": payload["name_en"],
            "name_vi": payload["name_vi"],
        }]))[0]
        logger.info("Topic created", extra={"topic_id": str(topic["id"])})
        return topic

    async def update_topic(self, topic_id: TopicId | None, payload: dict) -> dict:
        """Partial update of the bilingual name; returns the re-read row."""
        if topic_id is None:
            raise MissingIdentifierError("Topic")
        fields = {k: payload[k] for k in TOPIC_FIELDS if k in payload}
        fields["updated_at"] = datetime.now(timezone.utc)
        rows = await self._store.update(
            Table.TOPICS, fields, {"id": topic_id, **_VISIBLE},
        )
        if not rows:
            raise ResourceNotFoundError("Topic", str(topic_id))
        logger.info("Topic updated", extra={"topic_id": str(topic_id)})
        return await self._store.select_one(Table.TOPICS, {"id": topic_id})

    async def delete_topic(self, topic_id: TopicId | None) -> None:
        if topic_id is None:
            raise MissingIdentifierError("Topic")
        rows = await self._store.update(
            Table.TOPICS, {"deleted_at": datetime.now(timezone.utc)},
            {"id": topic_id, **_VISIBLE},
        )
        if not rows:
            raise ResourceNotFoundError("Topic", str(topic_id))
        logger.info("Topic soft-deleted", extra={"topic_id": str(topic_id)})
