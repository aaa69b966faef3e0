"""Exception handlers mapping domain failures onto the response envelope.

| Exception                         | Status |
|-----------------------------------|--------|
| ValidationError / request schema  | 400    |
| HTTPException (authentication)    | as set |
| AccessDenied                      | 403    |
| ObjectNotFoundError               | 404    |
| InvalidOperationError             | 409    |
| InvalidBookingState               | 409    |
| anything else                     | 500    |
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from consulting.api.schemas import ApiResponse, FieldError
from consulting.errors import AccessDenied, InvalidBookingState

logger = structlog.get_logger(__name__)


def _field_errors(messages) -> list[FieldError]:
    if isinstance(messages, dict):
        return [
            FieldError(field=str(field), message=str(message))
            for field, field_messages in messages.items()
            for message in (field_messages if isinstance(field_messages, list | tuple) else [field_messages])
        ]
    return [FieldError(field="_entity", message=str(messages))]


def _payload(exc):
    """Error payload of a protean exception.

    Only ``ProteanExceptionWithMessage`` subclasses carry ``messages``; plain
    ones such as ``InvalidOperationError`` keep the payload in ``args``.
    """
    messages = getattr(exc, "messages", None)
    if messages is None and exc.args:
        messages = exc.args[0]
    return messages


def _first_message(exc, default) -> str:
    messages = _payload(exc)
    if isinstance(messages, dict):
        for field_messages in messages.values():
            if isinstance(field_messages, list | tuple) and field_messages:
                return str(field_messages[0])
            if field_messages:
                return str(field_messages)
    elif messages:
        return str(messages)
    return default


def _envelope(status_code, message, errors=None) -> JSONResponse:
    body = ApiResponse(success=False, message=message, errors=errors)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", by_alias=True, exclude_none=True),
    )


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        errors = [
            FieldError(
                field=".".join(str(part) for part in error["loc"] if part not in ("body", "query", "path")),
                message=error["msg"],
            )
            for error in exc.errors()
        ]
        return _envelope(400, "Validation error", errors)

    @app.exception_handler(ValidationError)
    async def domain_validation_error(request: Request, exc: ValidationError):
        return _envelope(400, "Validation error", _field_errors(exc.messages))

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return _envelope(exc.status_code, str(exc.detail))

    @app.exception_handler(AccessDenied)
    async def access_denied(request: Request, exc: AccessDenied):
        return _envelope(403, _first_message(exc, "Access denied"))

    @app.exception_handler(ObjectNotFoundError)
    async def not_found(request: Request, exc: ObjectNotFoundError):
        return _envelope(404, _first_message(exc, "Resource not found"))

    @app.exception_handler(InvalidOperationError)
    async def conflict(request: Request, exc: InvalidOperationError):
        return _envelope(409, _first_message(exc, "Conflict"), _field_errors(_payload(exc)))

    @app.exception_handler(InvalidBookingState)
    async def invalid_state(request: Request, exc: InvalidBookingState):
        return _envelope(409, _first_message(exc, "Invalid booking state"))

    @app.exception_handler(Exception)
    async def internal_error(request: Request, exc: Exception):
        logger.exception("Unhandled error", path=request.url.path, method=request.method)
        return _envelope(500, "Internal server error")
