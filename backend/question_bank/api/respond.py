"""Responder - success envelope for route handlers.

Error envelopes come from QuestionBankError.to_response() via error_handlers.py.
"""

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, PlainTextResponse

_OMIT = object()


def respond(
    message: str, data: object = _OMIT, status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    """Build {"success": true, "data": ..., "message": ...}; data omitted when not given."""
    content: dict = {"success": True}
    if data is not _OMIT:
        content["data"] = jsonable_encoder(data)
    content["message"] = message
    return JSONResponse(status_code=status_code, content=content)


def preflight_ok() -> PlainTextResponse:
    """Answer to a bare OPTIONS request (CORS middleware handles real preflights)."""
    return PlainTextResponse("ok")
