"""Structured Logging - JSON formatter surfaces extra fields."""

import json
import logging

from question_bank.infrastructure.observability import (
    JSONFormatter, TextFormatter, setup_logging,
)


def _record(msg="hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord("question_bank.test", logging.ERROR, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_base_fields_present():
    out = json.loads(JSONFormatter().format(_record()))
    assert out["level"] == "ERROR"
    assert out["logger"] == "question_bank.test"
    assert out["message"] == "hello"
    assert "timestamp" in out


def test_extra_fields_surface_when_set():
    out = json.loads(JSONFormatter().format(_record(
        table="options", rollback="failed", attempt=3, question_id="abc",
    )))
    assert out["table"] == "options"
    assert out["rollback"] == "failed"
    assert out["attempt"] == 3
    assert out["question_id"] == "abc"


def test_unset_extras_are_omitted():
    out = json.loads(JSONFormatter().format(_record()))
    assert "table" not in out
    assert "rollback" not in out


def test_text_formatter_appends_extras():
    line = TextFormatter().format(_record(table="topics", operation="insert"))
    assert line.endswith("[table=topics operation=insert]")
    assert "hello" in line


def test_setup_logging_is_idempotent():
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    try:
        setup_logging("DEBUG", "text")
        setup_logging("DEBUG", "json")
        ours = [h for h in root.handlers if h.get_name() == "question_bank"]
        assert len(ours) == 1
        assert isinstance(ours[0].formatter, JSONFormatter)
        assert root.level == logging.DEBUG
    finally:
        root.handlers[:] = before
        root.setLevel(level)
