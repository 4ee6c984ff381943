"""Error Hierarchy - typed, categorized exceptions for every failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Request errors are 400/404/405; record store failures are 500
    - to_response() produces the uniform envelope {"success": false, "error": message}
    - PartialWriteError always carries the outcome of its compensating actions

Design Decisions:
    - Single hierarchy with QuestionBankError base: one global handler renders all of them
    - ErrorContext as dataclass: observability fields without coupling to logging
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from question_bank.core.domain_types import RollbackOutcome


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    METHOD = "method"
    DATABASE = "database"
    TIMEOUT = "timeout"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    resource_id: str | None = None
    table: str | None = None
    operation: str | None = None
    debug_info: dict[str, Any] | None = None


class QuestionBankError(Exception):
    """Base exception for all question bank errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to the standard error envelope."""
        return {"success": False, "error": self.message}


# ─── Request Errors (400-level) ─────────────────────────────────

class PayloadValidationError(QuestionBankError):
    """Required field missing or enumerated value invalid."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.field = field


class MissingIdentifierError(QuestionBankError):
    """id query parameter required but absent."""
    def __init__(self, resource_type: str, context: ErrorContext | None = None):
        super().__init__(
            f"{resource_type} ID is required",
            "MISSING_IDENTIFIER", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.resource_type = resource_type


class ResourceNotFoundError(QuestionBankError):
    """Requested resource does not exist or is soft-deleted."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.resource_id = resource_id
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, ctx, 404,
        )


class MethodNotAllowedError(QuestionBankError):
    """HTTP method not handled by the resource."""
    def __init__(self, method: str, context: ErrorContext | None = None):
        super().__init__(
            "Method not allowed", "METHOD_NOT_ALLOWED", ErrorCategory.METHOD,
            ErrorSeverity.WARNING, context, 405,
        )
        self.method = method


# ─── Record Store Errors (500-level) ────────────────────────────

class StoreError(QuestionBankError):
    """Record store call failed (constraint, connectivity, driver)."""
    def __init__(
        self,
        message: str,
        operation: str,
        table: str | None = None,
        context: ErrorContext | None = None,
        category: ErrorCategory = ErrorCategory.DATABASE,
        code: str = "STORE_ERROR",
    ):
        ctx = context or ErrorContext()
        ctx.operation = operation
        ctx.table = table
        super().__init__(
            message or "Internal server error", code, category,
            ErrorSeverity.CRITICAL, ctx, 500,
        )
        self.operation = operation
        self.table = table


class StoreTimeoutError(StoreError):
    """Record store call exceeded store_timeout_seconds."""
    def __init__(
        self, operation: str, table: str | None, timeout_seconds: float,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Record store {operation} on {table} timed out after {timeout_seconds}s",
            operation, table, context,
            category=ErrorCategory.TIMEOUT, code="STORE_TIMEOUT",
        )
        self.timeout_seconds = timeout_seconds


class PartialWriteError(StoreError):
    """StoreError raised after at least one write of a multi-step sequence succeeded."""
    def __init__(
        self, cause: StoreError, rollback: RollbackOutcome,
        completed_steps: list[str],
    ):
        super().__init__(
            cause.message, cause.operation, cause.table, cause.context,
            category=cause.category, code="PARTIAL_WRITE",
        )
        self.cause = cause
        self.rollback = rollback
        self.completed_steps = completed_steps
