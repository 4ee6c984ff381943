"""ORM Models - SQLAlchemy declarative models for the question bank tables.

Invariants:
    - All models inherit from Base (db/base.py)
    - Question is the aggregate root for question_variant and options
    - Topic is independent of the question aggregate

Design Decisions:
    - One file per entity
    - All models imported here so Base.metadata holds every table before the
      record store or Alembic looks tables up by name
"""

from question_bank.models.question import Question  # noqa: F401
from question_bank.models.question_variant import QuestionVariant  # noqa: F401
from question_bank.models.option import Option  # noqa: F401
from question_bank.models.topic import Topic  # noqa: F401
