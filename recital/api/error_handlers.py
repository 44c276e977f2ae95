"""Error Handlers — every failure leaves the API as the RecitalError envelope.

Invariants:
    - Body shape is always {"error": {code, message, category, severity, ...}}
    - 401 responses carry WWW-Authenticate: Bearer
    - A constraint violation that escapes a service is a 409 CONFLICT, not a 500:
      the unique queue position and recording_id indexes are the last line
      against concurrent curators
    - Unknown routes and methods use the same envelope as domain errors
    - Catch-all 500 never leaks exception text

Design Decisions:
    - Non-domain exceptions are converted into RecitalError subclasses and
      rendered by the same function, so the envelope has one source
    - Queue ids from ErrorContext go into the log record: the JSON formatter
      surfaces them for tracing a failed shift back to its entry
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from recital.core.errors import (
    ConflictError, ErrorCategory, ErrorSeverity, RecitalError,
    ResourceNotFoundError,
)

logger = logging.getLogger(__name__)

_HTTP_CODES: dict[int, str] = {
    status.HTTP_404_NOT_FOUND: "RESOURCE_NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
}


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    app.add_exception_handler(RecitalError, recital_error_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)


def render_error(request: Request, exc: RecitalError) -> JSONResponse:
    log = logger.error if exc.http_status >= 500 else logger.warning
    log(
        f"{exc.code} on {request.method} {request.url.path}: {exc.message}",
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "entry_id": exc.context.entry_id,
            "recording_id": exc.context.recording_id,
            "user_id": exc.context.user_id,
        },
    )
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_response(),
        headers=exc.headers,
    )


async def recital_error_handler(request: Request, exc: RecitalError):
    return render_error(request, exc)


async def integrity_error_handler(request: Request, exc: IntegrityError):
    """Constraint violation outside a service transaction guard."""
    logger.warning(f"Integrity error: {exc.orig}")
    return render_error(request, ConflictError(
        "Request conflicts with the current state; reload and retry",
    ))


async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.warning(
        f"Validation error on {request.url.path}: {exc.errors()}",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Invalid request data",
                "category": ErrorCategory.VALIDATION.value,
                "severity": ErrorSeverity.ERROR.value,
                "details": [_detail(e) for e in exc.errors()],
            },
        },
    )


def _detail(error: dict) -> dict:
    location, *field = error["loc"] or ("body",)
    return {
        "location": str(location),
        "field": ".".join(str(part) for part in field),
        "message": error["msg"],
        "type": error["type"],
    }


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """Router-level errors (unknown path, wrong method)."""
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return render_error(request, ResourceNotFoundError("Route", request.url.path))
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "code": _HTTP_CODES.get(exc.status_code, f"HTTP_{exc.status_code}"),
                "message": str(exc.detail),
                "category": ErrorCategory.VALIDATION.value,
                "severity": ErrorSeverity.WARNING.value,
            },
        },
        headers=getattr(exc, "headers", None),
    )


async def generic_error_handler(request: Request, exc: Exception):
    logger.error(
        f"Unhandled exception on {request.url.path}: {exc}",
        exc_info=True,
        extra={"path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "category": ErrorCategory.INTERNAL.value,
                "severity": ErrorSeverity.CRITICAL.value,
            },
        },
    )
