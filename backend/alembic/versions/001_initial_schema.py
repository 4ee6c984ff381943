"""Initial schema - questions, question_variant, options, topics.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

Child foreign keys carry ON DELETE CASCADE so a hard delete of a question
removes its variant and options at the database level. The API itself only
soft-deletes (deleted_at).
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "questions",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("question_en", sa.Text, nullable=False),
        sa.Column("question_vi", sa.Text, nullable=False),
        sa.Column("example_en", sa.Text, nullable=True),
        sa.Column("example_vi", sa.Text, nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "question_variant",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column(
            "question_id", UUID(as_uuid=True),
            sa.ForeignKey("questions.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("name", sa.String(20), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "name IN ('open_ended', 'multiple_choice')",
            name="question_variant_name_check",
        ),
    )
    op.create_index("ix_question_variant_question_id", "question_variant", ["question_id"])

    op.create_table(
        "options",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column(
            "question_variant_id", UUID(as_uuid=True),
            sa.ForeignKey("question_variant.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("text_en", sa.Text, nullable=True),
        sa.Column("text_vi", sa.Text, nullable=True),
        sa.Column("is_correct", sa.Boolean, nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index("ix_options_question_variant_id", "options", ["question_variant_id"])

    op.create_table(
        "topics",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("name_en", sa.Text, nullable=False),
        sa.Column("name_vi", sa.Text, nullable=False),
        *_timestamps(),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    )


def downgrade() -> None:
    op.drop_table("topics")
    op.drop_index("ix_options_question_variant_id", table_name="options")
    op.drop_table("options")
    op.drop_index("ix_question_variant_question_id", table_name="question_variant")
    op.drop_table("question_variant")
    op.drop_table("questions")
