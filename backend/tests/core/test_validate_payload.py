"""Payload Validation - rule order, messages, and first-failure-wins.

Tests cover:
    - bilingual text must be non-empty strings (questions and topics)
    - variant name must be open_ended or multiple_choice
    - multiple_choice requires a non-empty option list
    - update skips the text rule
"""

import pytest

from question_bank.core.domain_types import VariantName
from question_bank.core.errors import PayloadValidationError
from question_bank.core.validate_payload import (
    validate_question_create,
    validate_question_update,
    validate_topic_create,
)


def _valid(**overrides) -> dict:
    payload = {
        "question_en": "What is 2+2?",
        "question_vi": "2+2 là gì?",
        "question_variant_name": "open_ended",
    }
    payload.update(overrides)
    return payload


def test_open_ended_passes_without_options():
    assert validate_question_create(_valid()) is VariantName.OPEN_ENDED


def test_multiple_choice_passes_with_options():
    variant = validate_question_create(_valid(
        question_variant_name="multiple_choice",
        question_variant_options=[{"text_en": "4", "text_vi": "4"}],
    ))
    assert variant is VariantName.MULTIPLE_CHOICE


@pytest.mark.parametrize("field", ["question_en", "question_vi"])
@pytest.mark.parametrize("value", [None, "", 42])
def test_missing_or_empty_text_rejected(field, value):
    with pytest.raises(PayloadValidationError) as exc:
        validate_question_create(_valid(**{field: value}))
    assert exc.value.message == "question_en and question_vi are required"
    assert exc.value.field == field
    assert exc.value.http_status == 400


@pytest.mark.parametrize("name", [None, "", "essay", "MULTIPLE_CHOICE"])
def test_invalid_variant_name_rejected(name):
    with pytest.raises(PayloadValidationError) as exc:
        validate_question_create(_valid(question_variant_name=name))
    assert exc.value.field == "question_variant_name"
    assert "open_ended or multiple_choice" in exc.value.message


@pytest.mark.parametrize("options", [None, []])
def test_multiple_choice_without_options_rejected(options):
    with pytest.raises(PayloadValidationError) as exc:
        validate_question_create(_valid(
            question_variant_name="multiple_choice",
            question_variant_options=options,
        ))
    assert exc.value.field == "question_variant_options"
    assert exc.value.message == (
        "question_variant_options is required when "
        "question_variant_name is multiple_choice"
    )


def test_text_rule_wins_over_variant_rule():
    with pytest.raises(PayloadValidationError) as exc:
        validate_question_create({"question_variant_name": "bogus"})
    assert exc.value.field == "question_en"


def test_option_text_is_not_checked():
    variant = validate_question_create(_valid(
        question_variant_name="multiple_choice",
        question_variant_options=[{"text_en": "", "text_vi": None}],
    ))
    assert variant is VariantName.MULTIPLE_CHOICE


def test_update_does_not_require_question_text():
    assert validate_question_update(
        {"question_variant_name": "open_ended"},
    ) is VariantName.OPEN_ENDED


def test_update_still_requires_variant():
    with pytest.raises(PayloadValidationError):
        validate_question_update({"question_en": "changed"})


def test_topic_requires_both_names():
    validate_topic_create({"name_en": "Math", "name_vi": "Toán"})
    with pytest.raises(PayloadValidationError) as exc:
        validate_topic_create({"name_en": "Math"})
    assert exc.value.message == "name_en and name_vi are required"
    assert exc.value.field == "name_vi"
