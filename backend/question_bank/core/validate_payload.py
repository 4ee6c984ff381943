"""Payload Validation - ordered rules checked before any record store mutation.

Invariants:
    - Rules run in a fixed order; the first violated rule raises
    - Never touches the record store (pure functions over mappings)
    - Only required fields and enumerations are checked; option text is not

Rule order:
    1. bilingual text fields are non-empty strings
    2. question_variant_name is one of VARIANT_NAMES
    3. multiple_choice requires a non-empty question_variant_options list
"""

from collections.abc import Mapping

from question_bank.core.domain_types import VARIANT_NAMES, VariantName
from question_bank.core.errors import PayloadValidationError


def _is_filled(value: object) -> bool:
    return isinstance(value, str) and value != ""


def check_bilingual_text(payload: Mapping, en_field: str, vi_field: str) -> None:
    """Rule 1: both language variants present and non-empty."""
    for name in (en_field, vi_field):
        if not _is_filled(payload.get(name)):
            raise PayloadValidationError(
                f"{en_field} and {vi_field} are required", field=name,
            )


def check_variant(payload: Mapping) -> VariantName:
    """Rules 2 and 3. Returns the validated variant name."""
    name = payload.get("question_variant_name")
    if name not in VARIANT_NAMES:
        raise PayloadValidationError(
            "question_variant_name is required and must be "
            "open_ended or multiple_choice",
            field="question_variant_name",
        )
    variant = VariantName(name)
    if variant is VariantName.MULTIPLE_CHOICE and not payload.get(
        "question_variant_options",
    ):
        raise PayloadValidationError(
            "question_variant_options is required when "
            "question_variant_name is multiple_choice",
            field="question_variant_options",
        )
    return variant


def validate_question_create(payload: Mapping) -> VariantName:
    """Full create check: rules 1-3."""
    check_bilingual_text(payload, "question_en", "question_vi")
    return check_variant(payload)


def validate_question_update(payload: Mapping) -> VariantName:
    """Update check: rules 2-3 only (question text is a partial update)."""
    return check_variant(payload)


def validate_topic_create(payload: Mapping) -> None:
    check_bilingual_text(payload, "name_en", "name_vi")
