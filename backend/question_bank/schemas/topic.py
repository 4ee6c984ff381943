"""Topic Schemas - create/update body for the topics endpoint."""

from pydantic import BaseModel


class TopicPayload(BaseModel):
    name_en: str | None = None
    name_vi: str | None = None
