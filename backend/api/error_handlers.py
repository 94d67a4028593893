"""
Centralized error handling.

Maps exception kinds to HTTP status codes in one place and renders every
failure in the error envelope ``{success: false, error, code, details?}``.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DatabaseError,
    ExternalServiceError,
    NotFoundError,
    RequestTimeoutError,
    TaskboardError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# First match wins, so subclasses must come before their bases.
STATUS_CODES: list[tuple[type[TaskboardError], int]] = [
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (RequestTimeoutError, 408),
    (ConflictError, 409),
    (DatabaseError, 500),
    (ExternalServiceError, 503),
]

# Request locations that are not part of a field name.
_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}


def status_code_for(error: Exception) -> int:
    """HTTP status for an exception; anything unrecognized is a 500."""
    for kind, status_code in STATUS_CODES:
        if isinstance(error, kind):
            return status_code
    return 500


def error_response(error: TaskboardError, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=error.to_dict())


def _log(request: Request, status_code: int, message: str, exc: Exception) -> None:
    if status_code >= 500:
        logger.error(
            f"{request.method} {request.url.path} -> {status_code}: {message}",
            exc_info=exc,
        )
    else:
        logger.warning(f"{request.method} {request.url.path} -> {status_code}: {message}")


async def taskboard_error_handler(request: Request, exc: TaskboardError) -> JSONResponse:
    status_code = status_code_for(exc)
    _log(request, status_code, f"{exc.code}: {exc.message}", exc)
    return error_response(exc, status_code)


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Turn FastAPI's validation errors into a field -> messages map."""
    details: dict[str, list[str]] = {}
    for error in exc.errors():
        parts = [str(p) for p in error.get("loc", ()) if p not in _LOCATION_PREFIXES]
        field = ".".join(parts) or "body"
        details.setdefault(field, []).append(error.get("msg", "Invalid value"))

    error = ValidationError("Validation failed", code="VALIDATION_ERROR", details=details)
    _log(request, 400, f"VALIDATION_ERROR: {', '.join(details)}", exc)
    return error_response(error, 400)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        message = f"Route {request.method} {request.url.path} not found"
        code = "NOT_FOUND"
    else:
        message = str(exc.detail)
        code = f"HTTP_{exc.status_code}"

    error = TaskboardError(message, code=code)
    _log(request, exc.status_code, message, exc)
    return JSONResponse(
        status_code=exc.status_code,
        content=error.to_dict(),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    _log(request, 500, f"Unhandled {type(exc).__name__}: {exc}", exc)
    error = TaskboardError("Internal server error", code="INTERNAL_ERROR")
    return error_response(error, 500)


def register_error_handlers(app: FastAPI) -> None:
    """Install the handlers on an application."""
    app.add_exception_handler(TaskboardError, taskboard_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
