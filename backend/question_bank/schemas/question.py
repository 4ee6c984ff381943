"""Question Schemas - create/update body for the questions endpoint.

Invariants:
    - Every field optional at the type level; POST and PUT share one shape and
      differ only in which validator runs and in exclude_unset handling
"""

from pydantic import BaseModel


class OptionPayload(BaseModel):
    """One answer choice; is_correct omitted means False."""
    text_en: str | None = None
    text_vi: str | None = None
    is_correct: bool | None = None


class QuestionPayload(BaseModel):
    """Question body - create requires question_en/question_vi and a variant."""
    question_en: str | None = None
    question_vi: str | None = None
    is_active: bool | None = None
    example_en: str | None = None
    example_vi: str | None = None
    question_variant_name: str | None = None
    question_variant_options: list[OptionPayload] | None = None
