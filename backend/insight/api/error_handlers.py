"""Error Handlers: global exception handlers for the Insight API.

Invariants:
    - InsightError → its own envelope and http_status (404 unknown domain,
      409 generation in flight, 503 persistence)
    - RequestValidationError → 400 with one detail per offending form field
    - Exception (catch-all) → 500, never leaks internal details
    - Log level follows error severity: WARNING-severity errors never page

Design Decisions:
    - Generation failures do not reach these handlers: the store absorbs them
      and the route answers with the store's last_failure envelope
    - Extracted from main.py to keep its import fan-out small
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from insight.core.errors import InsightError, ErrorSeverity

logger = logging.getLogger(__name__)

_SEVERITY_LOG_LEVELS = {
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    app.add_exception_handler(InsightError, insight_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)


async def insight_error_handler(request: Request, exc: InsightError):
    logger.log(
        _SEVERITY_LOG_LEVELS[exc.severity],
        f"{exc.code}: {exc.message}",
        extra={
            "error_code": exc.code,
            "domain": exc.context.domain,
            "path": request.url.path,
        },
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Form body rejected before any generation was attempted."""
    details = [
        {
            "field": ".".join(str(loc) for loc in e["loc"] if loc != "body"),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
    logger.warning(
        f"Invalid request body on {request.url.path}: "
        f"{', '.join(d['field'] or '<body>' for d in details)}",
        extra={"path": request.url.path, "error_code": "VALIDATION_ERROR"},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Invalid request data",
                "category": "validation",
                "severity": ErrorSeverity.ERROR.value,
                "details": details,
            },
        },
    )


async def generic_error_handler(request: Request, exc: Exception):
    """Catch-all: never leaks internal details."""
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
                "category": "internal",
                "severity": ErrorSeverity.CRITICAL.value,
            },
        },
    )
