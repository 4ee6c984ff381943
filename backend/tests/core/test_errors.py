"""Error Hierarchy - status codes, envelope shape, partial-write wrapping."""

from question_bank.core.domain_types import RollbackOutcome
from question_bank.core.errors import (
    ErrorCategory,
    MethodNotAllowedError,
    MissingIdentifierError,
    PartialWriteError,
    PayloadValidationError,
    ResourceNotFoundError,
    StoreError,
    StoreTimeoutError,
)


def test_missing_identifier_message_and_status():
    err = MissingIdentifierError("Question")
    assert err.http_status == 400
    assert err.to_response() == {
        "success": False, "error": "Question ID is required",
    }


def test_status_codes_per_class():
    assert PayloadValidationError("bad", field="x").http_status == 400
    assert ResourceNotFoundError("Topic", "abc").http_status == 404
    assert MethodNotAllowedError("PATCH").http_status == 405
    assert StoreError("boom", "insert", "questions").http_status == 500


def test_store_error_falls_back_to_generic_message():
    err = StoreError("", "select", "questions")
    assert err.message == "Internal server error"
    assert err.context.table == "questions"
    assert err.context.operation == "select"


def test_timeout_is_a_store_error():
    err = StoreTimeoutError("select", "topics", 1.5)
    assert isinstance(err, StoreError)
    assert err.category is ErrorCategory.TIMEOUT
    assert err.http_status == 500
    assert "timed out" in err.message


def test_partial_write_keeps_cause_message_and_rollback():
    cause = StoreError("insert failed", "insert", "options")
    err = PartialWriteError(cause, RollbackOutcome.FAILED, ["insert_question"])
    assert isinstance(err, StoreError)
    assert err.message == "insert failed"
    assert err.table == "options"
    assert err.rollback is RollbackOutcome.FAILED
    assert err.completed_steps == ["insert_question"]
    assert err.code == "PARTIAL_WRITE"
    assert err.to_response() == {"success": False, "error": "insert failed"}
