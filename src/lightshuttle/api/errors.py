"""
Mapping of core failures onto structured API error bodies.

Every error body looks like::

    {"trace_id": "...", "code": 404, "message": "Container not found", "details": "..."}

``details`` is omitted when the failure carries no diagnostic text.
"""

from __future__ import annotations

import uuid
from typing import Any, Dict, Optional, Tuple, Type

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from lightshuttle.core.errors import (
    BadRequest,
    ContainerNotFound,
    Forbidden,
    InvalidRequest,
    LightShuttleError,
    Misconfigured,
    OutputParseError,
    RuntimeCommandFailed,
    Unauthorized,
    Unexpected,
)
from lightshuttle.utils.logger import get_logger

logger = get_logger("lightshuttle.api")

ERROR_TABLE: Dict[Type[LightShuttleError], Tuple[int, str]] = {
    ContainerNotFound: (404, "Container not found"),
    RuntimeCommandFailed: (500, "Runtime command execution failed"),
    OutputParseError: (500, "Runtime output parsing failed"),
    Unexpected: (500, "Unexpected error"),
    InvalidRequest: (400, "Invalid request"),
    BadRequest: (400, "Invalid input"),
    Unauthorized: (401, "Unauthorized"),
    Misconfigured: (500, "Server misconfigured"),
    Forbidden: (403, "Forbidden"),
}

TRACE_HEADER = "X-Trace-Id"


def new_trace_id() -> str:
    return uuid.uuid4().hex


def trace_id_for(request: Request) -> str:
    """The request's trace id, assigned on first use."""
    trace_id = getattr(request.state, "trace_id", None)
    if not trace_id:
        trace_id = new_trace_id()
        request.state.trace_id = trace_id
    return trace_id


def status_and_message(error: LightShuttleError) -> Tuple[int, str]:
    for kind in type(error).__mro__:
        if kind in ERROR_TABLE:
            return ERROR_TABLE[kind]
    return ERROR_TABLE[Unexpected]


def error_body(trace_id: str, code: int, message: str, details: Optional[str] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"trace_id": trace_id, "code": code, "message": message}
    if details:
        body["details"] = details
    return body


def error_response(request: Request, error: LightShuttleError) -> JSONResponse:
    status_code, message = status_and_message(error)
    trace_id = trace_id_for(request)
    return JSONResponse(
        status_code=status_code,
        content=error_body(trace_id, status_code, message, error.detail),
        headers={TRACE_HEADER: trace_id},
    )


async def lightshuttle_error_handler(request: Request, exc: LightShuttleError) -> JSONResponse:
    status_code, _ = status_and_message(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc!r}")
    return error_response(request, exc)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()))
        problems.append(f"{loc}: {err.get('msg', 'invalid')}")
    return error_response(request, InvalidRequest("; ".join(problems) or None))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=True)
    return error_response(request, Unexpected())


__all__ = [
    "ERROR_TABLE",
    "TRACE_HEADER",
    "error_body",
    "error_response",
    "lightshuttle_error_handler",
    "new_trace_id",
    "status_and_message",
    "trace_id_for",
    "unhandled_error_handler",
    "validation_error_handler",
]
