"""Error Handlers: map editor errors and malformed input to the JSON error envelope.

Invariants:
    - Every error body has the shape {"error": {code, message, category, severity, recoverable}}
    - Errors raised inside EditorSession.operation() are already in the notification feed,
      so recoverable ones are only logged at DEBUG here
    - PersistenceFailure -> 503 with Retry-After: the in-memory workspace is still authoritative
    - An unknown table kind in the path names the valid kinds instead of a pydantic enum message
    - Unhandled exceptions never leak internals

Design Decisions:
    - Validation details are keyed by the editor field (body.title -> "title"); the input
      location (body, path, query) is reported separately
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from reqdeck.core.domain_types import TableKind
from reqdeck.core.errors import ErrorCategory, ErrorSeverity, PersistenceFailure, ReqDeckError

logger = logging.getLogger(__name__)

PERSISTENCE_RETRY_SECONDS = 5
_LOCATIONS = ("body", "path", "query")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ReqDeckError, reqdeck_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)


# ─── Editor errors ───────────────────────────────────────────────

async def reqdeck_error_handler(request: Request, exc: ReqDeckError) -> JSONResponse:
    logger.log(
        logging.DEBUG if exc.recoverable else logging.ERROR,
        f"{request.method} {request.url.path} rejected: {exc.message}",
        extra={
            "error_code": exc.code,
            "request_id": exc.context.request_id,
            "collection_id": exc.context.collection_id,
            "table_kind": exc.context.table_kind,
        },
    )
    headers = None
    if isinstance(exc, PersistenceFailure):
        headers = {"Retry-After": str(PERSISTENCE_RETRY_SECONDS)}
    return JSONResponse(
        status_code=exc.http_status, content=exc.to_response(), headers=headers,
    )


# ─── Malformed input ─────────────────────────────────────────────

def _field_detail(error: dict) -> dict:
    loc = [str(part) for part in error["loc"]]
    location = loc[0] if loc and loc[0] in _LOCATIONS else "body"
    field = ".".join(loc[1:] if loc and loc[0] in _LOCATIONS else loc)
    message = error["msg"]
    if location == "path" and field == "kind":
        valid = ", ".join(k.value for k in TableKind)
        message = f"Unknown table kind {error.get('input')!r} (expected {valid})"
    return {"field": field, "location": location, "message": message, "type": error["type"]}


async def validation_error_handler(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    details = [_field_detail(e) for e in exc.errors()]
    logger.info(
        f"Invalid input on {request.url.path}: "
        + ", ".join(d["field"] for d in details),
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": details[0]["message"] if details else "Invalid request data",
                "category": ErrorCategory.VALIDATION.value,
                "severity": ErrorSeverity.WARNING.value,
                "recoverable": True,
                "details": details,
            },
        },
    )


# ─── Everything else ─────────────────────────────────────────────

async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "The editor hit an unexpected error",
                "category": ErrorCategory.INTERNAL.value,
                "severity": ErrorSeverity.CRITICAL.value,
                "recoverable": False,
            },
        },
    )
