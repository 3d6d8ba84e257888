"""HTTP mapping for the service error taxonomy."""

import logging

from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request
from starlette.responses import JSONResponse

from chaingate.exceptions import (
    ChainConnectionError,
    ChainGateError,
    ConfigurationError,
    ExternalServiceError,
    InvalidFormatError,
    InvalidStateError,
    NotFoundError,
    SubmissionError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# First match wins, so subclasses must precede their bases.
STATUS_CODES: list[tuple[type[ChainGateError], int]] = [
    (ValidationError, 400),
    (NotFoundError, 404),
    (InvalidStateError, 409),
    (ConfigurationError, 422),
    (SubmissionError, 502),
    (ChainConnectionError, 502),
    (ExternalServiceError, 502),
    (InvalidFormatError, 502),
]


def status_code_for(exc: ChainGateError) -> int:
    for error_type, code in STATUS_CODES:
        if isinstance(exc, error_type):
            return code
    return 500


def error_body(error_type: str, message: str) -> dict:
    return {"error": {"type": error_type, "message": message}}


async def chaingate_error_handler(request: Request, exc: ChainGateError) -> JSONResponse:
    code = status_code_for(exc)
    if code >= 500:
        logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc)
    return JSONResponse(status_code=code, content=error_body(type(exc).__name__, str(exc)))


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body("HTTPException", str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ChainGateError, chaingate_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
