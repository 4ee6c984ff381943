"""Error Handlers - global exception handlers rendering the error envelope.

Invariants:
    - QuestionBankError -> its http_status + {"success": false, "error": message}
    - RequestValidationError (malformed JSON, wrong types, bad UUID) -> 400
    - Starlette HTTP errors (405 wrong method, 404 unknown path) -> same envelope
    - Any other exception -> 500 "Internal server error", no internal details,
      rendered by an http middleware so CORSMiddleware still wraps the response
    - register_error_handlers() must run before CORSMiddleware is added

Design Decisions:
    - Extracted from main.py: one register function per layer
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from question_bank.core.errors import MethodNotAllowedError, QuestionBankError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_domain_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)
    _register_unhandled_error_middleware(app)


def _register_domain_error_handler(app: FastAPI) -> None:

    @app.exception_handler(QuestionBankError)
    async def domain_error_handler(request: Request, exc: QuestionBankError):
        """Handle all question bank request and store errors."""
        log = logger.error if exc.http_status >= 500 else logger.warning
        log(
            f"QuestionBankError: {exc.message}",
            extra={
                "error_code": exc.code,
                "path": request.url.path,
                "method": request.method,
                "table": exc.context.table,
                "operation": exc.context.operation,
                "rollback": getattr(getattr(exc, "rollback", None), "value", None),
            },
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_http_error_handler(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
            content = MethodNotAllowedError(request.method).to_response()
        else:
            content = {"success": False, "error": str(exc.detail)}
        return JSONResponse(
            status_code=exc.status_code, content=content,
            headers=getattr(exc, "headers", None),
        )


def _register_unhandled_error_middleware(app: FastAPI) -> None:

    @app.middleware("http")
    async def unhandled_error_middleware(request: Request, call_next):
        """Catch-all - never leaks internal details."""
        try:
            return await call_next(request)
        except Exception as exc:
            logger.error(
                f"Unhandled exception on {request.url.path}: {exc}",
                exc_info=True,
                extra={"path": request.url.path, "method": request.method},
            )
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"success": False, "error": "Internal server error"},
            )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Envelope naming the first invalid field."""
    errors = exc.errors()
    if not errors:
        return {"success": False, "error": "Invalid request data"}
    first = errors[0]
    field = ".".join(str(loc) for loc in first["loc"])
    return {"success": False, "error": f"Invalid request data: {field}: {first['msg']}"}
