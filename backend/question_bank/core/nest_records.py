"""Record Nesting - assembles flat rows into the question read shape.

Shape:
    question columns + {"question_variant": [variant columns + {"options": [...]}]}

Invariants:
    - Input question order is preserved (callers order by created_at/updated_at)
    - Options keep the order the store returned them in
    - A question with no variant rows gets an empty question_variant list
"""

from collections import defaultdict


def nest_questions(
    questions: list[dict], variants: list[dict], options: list[dict],
) -> list[dict]:
    """Attach variants to questions and options to variants."""
    options_by_variant: dict = defaultdict(list)
    for option in options:
        options_by_variant[option["question_variant_id"]].append(dict(option))

    variants_by_question: dict = defaultdict(list)
    for variant in variants:
        nested = dict(variant)
        nested["options"] = options_by_variant.get(variant["id"], [])
        variants_by_question[variant["question_id"]].append(nested)

    result = []
    for question in questions:
        nested = dict(question)
        nested["question_variant"] = variants_by_question.get(question["id"], [])
        result.append(nested)
    return result


def option_rows(options: list[dict], variant_id, now=None) -> list[dict]:
    """Map request options to option rows; is_correct defaults to False."""
    rows = []
    for option in options:
        row = {
            "text_en": option.get("text_en"),
            "text_vi": option.get("text_vi"),
            "is_correct": option.get("is_correct") or False,
            "question_variant_id": variant_id,
        }
        if now is not None:
            row["created_at"] = now
            row["updated_at"] = now
        rows.append(row)
    return rows
