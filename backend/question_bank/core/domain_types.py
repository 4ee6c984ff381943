"""Domain Types - identifiers, table names and enums shared across layers.

Invariants:
    - Variant names are a closed set: open_ended, multiple_choice
    - Table names used by the record store live here and nowhere else
    - RollbackOutcome is always set on a PartialWriteError
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

QuestionId = NewType("QuestionId", UUID)
VariantId = NewType("VariantId", UUID)
TopicId = NewType("TopicId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class VariantName(str, Enum):
    """Answer format of a question."""
    OPEN_ENDED = "open_ended"
    MULTIPLE_CHOICE = "multiple_choice"


class Table(str, Enum):
    """Record store tables."""
    QUESTIONS = "questions"
    QUESTION_VARIANT = "question_variant"
    OPTIONS = "options"
    TOPICS = "topics"


class RollbackOutcome(str, Enum):
    """Result of running compensating actions after a partial write."""
    NOT_NEEDED = "not_needed"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


VARIANT_NAMES = frozenset(v.value for v in VariantName)

# Columns a client may write on a question row
QUESTION_FIELDS = (
    "question_en", "question_vi", "is_active", "example_en", "example_vi",
)
TOPIC_FIELDS = ("name_en", "name_vi")
