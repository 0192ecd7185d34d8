"""Map domain errors to HTTP responses with a stable error kind.

Every error body is ``{"error": <kind>, "message": <text>, "details": ...}``
where ``kind`` is one of InvalidArgument, NotFound, Forbidden, InvalidState
or Conflict.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.integrations.fastapi import register_exception_handlers

from marketplace.exceptions import ConflictError, ForbiddenError, InvalidStateError, MarketplaceError

logger = structlog.get_logger(__name__)

_STATUS_CODES = {
    ForbiddenError: 403,
    InvalidStateError: 409,
    ConflictError: 409,
}


def _field_messages(messages) -> dict[str, list[str]]:
    details = {}
    for field, value in (messages or {}).items():
        values = value if isinstance(value, (list, tuple)) else [value]
        details[str(field)] = [str(v) for v in values]
    return details


def _summary(details: dict[str, list[str]], fallback: str) -> str:
    parts = [message for messages in details.values() for message in messages]
    return "; ".join(parts) if parts else fallback


def _error_response(status_code: int, kind: str, message: str, details=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": kind, "message": message, "details": details},
    )


async def _invalid_argument(request: Request, exc: ValidationError) -> JSONResponse:
    details = _field_messages(getattr(exc, "messages", None))
    return _error_response(400, "InvalidArgument", _summary(details, "Invalid request"), details)


async def _request_invalid(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        details.setdefault(field or "body", []).append(str(error.get("msg", "Invalid value")))
    return _error_response(400, "InvalidArgument", _summary(details, "Invalid request"), details)


async def _not_found(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    messages = getattr(exc, "messages", None)
    if isinstance(messages, dict):
        message = _summary(_field_messages(messages), "Not found")
    else:
        message = str(exc) or "Not found"
    return _error_response(404, "NotFound", message)


async def _marketplace_error(request: Request, exc: MarketplaceError) -> JSONResponse:
    status_code = next(
        (code for cls, code in _STATUS_CODES.items() if isinstance(exc, cls)),
        400,
    )
    logger.info(
        "Request rejected",
        path=request.url.path,
        error=exc.kind,
        reason=exc.message,
    )
    return _error_response(status_code, exc.kind, exc.message)


def register_error_handlers(app: FastAPI) -> None:
    """Install protean's default handlers, then the marketplace error contract on top."""
    register_exception_handlers(app)

    app.add_exception_handler(ValidationError, _invalid_argument)
    app.add_exception_handler(RequestValidationError, _request_invalid)
    app.add_exception_handler(ObjectNotFoundError, _not_found)
    app.add_exception_handler(MarketplaceError, _marketplace_error)
