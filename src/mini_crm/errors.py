"""Domain errors and the handlers that render them as JSON envelopes.

Every failure leaves the service as ``{"code", "message", "details"}`` where
``details`` always carries the request id of the failing call.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any, Mapping, Sequence

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request

from .core.context import REQUEST_ID_HEADER, bind_request_id, reset_request_id
from .schemas.system import ErrorResponse

logger = logging.getLogger(__name__)

_LOCATION_PREFIXES = frozenset({"body", "query", "path", "header", "cookie"})


class ApplicationError(Exception):
    """Base class for domain errors; subclasses fix the code and HTTP status."""

    default_message = "Application error."
    default_code = "application_error"
    default_status_code = status.HTTP_400_BAD_REQUEST

    def __init__(
        self,
        message: str | None = None,
        *,
        code: str | None = None,
        status_code: int | None = None,
        details: Any | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        message = message or self.default_message
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.status_code = status_code or self.default_status_code
        self.details = details
        self.headers = dict(headers) if headers else None


class InvalidInputError(ApplicationError):
    """A payload or parameter failed schema validation."""

    default_message = "Invalid input."
    default_code = "invalid_input"
    default_status_code = status.HTTP_400_BAD_REQUEST


class UnauthenticatedError(ApplicationError):
    """Credentials are missing, invalid or expired."""

    default_message = "Could not validate credentials."
    default_code = "unauthenticated"
    default_status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str | None = None, **kwargs: Any) -> None:
        kwargs.setdefault("headers", {"WWW-Authenticate": "Bearer"})
        super().__init__(message, **kwargs)


class ForbiddenError(ApplicationError):
    """The caller's role or ownership does not permit the operation."""

    default_message = "Forbidden: insufficient permissions."
    default_code = "forbidden"
    default_status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(ApplicationError):
    default_message = "Resource not found."
    default_code = "not_found"
    default_status_code = status.HTTP_404_NOT_FOUND


class ConflictError(ApplicationError):
    """A uniqueness constraint would be violated."""

    default_message = "Resource already exists."
    default_code = "conflict"
    default_status_code = status.HTTP_409_CONFLICT


class ServerError(ApplicationError):
    default_message = "Internal server error."
    default_code = "server_error"
    default_status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


_STARLETTE_CODES: dict[int, str] = {
    status.HTTP_400_BAD_REQUEST: "bad_request",
    status.HTTP_401_UNAUTHORIZED: UnauthenticatedError.default_code,
    status.HTTP_403_FORBIDDEN: ForbiddenError.default_code,
    status.HTTP_404_NOT_FOUND: NotFoundError.default_code,
    status.HTTP_405_METHOD_NOT_ALLOWED: "method_not_allowed",
    status.HTTP_409_CONFLICT: ConflictError.default_code,
}


_UNIQUE_VIOLATION_SQLSTATE = "23505"
_SQLITE_UNIQUE_MARKERS = ("UNIQUE constraint failed", "SQLITE_CONSTRAINT_UNIQUE", "SQLITE_CONSTRAINT_PRIMARYKEY")
MALFORMED_BODY_MESSAGE = "Request body is not valid JSON."


def is_unique_violation(exc: IntegrityError) -> bool:
    """Tell a unique-constraint violation apart from other integrity failures.

    PostgreSQL drivers report SQLSTATE 23505 (directly or on the wrapped
    asyncpg error); SQLite only reports it in the error text or name.
    """
    orig = exc.orig
    for candidate in (orig, getattr(orig, "__cause__", None)):
        if candidate is None:
            continue
        sqlstate = getattr(candidate, "sqlstate", None) or getattr(candidate, "pgcode", None)
        if sqlstate == _UNIQUE_VIOLATION_SQLSTATE:
            return True
    text = f"{getattr(orig, 'sqlite_errorname', '')} {orig}"
    return any(marker in text for marker in _SQLITE_UNIQUE_MARKERS)


def describe_first_error(errors: Sequence[Mapping[str, Any]]) -> tuple[str | None, str]:
    """Return the field name and a readable message for the first validation error."""
    if not errors:
        return None, InvalidInputError.default_message
    first = errors[0]
    if first.get("type") == "json_invalid":
        return None, MALFORMED_BODY_MESSAGE
    location = [str(part) for part in first.get("loc", ()) if part not in _LOCATION_PREFIXES]
    field_name = ".".join(location) or None
    message = str(first.get("msg") or "Invalid value.")
    if field_name:
        message = f"{field_name}: {message}"
    return field_name, message


@dataclass(slots=True)
class ErrorEnvelope:
    """What a handler wants rendered: status, code, message and extras."""

    status_code: int
    code: str
    message: str
    details: Any | None = None
    headers: Mapping[str, str] | None = None
    log_extra: dict[str, Any] = field(default_factory=dict)
    exc_info: BaseException | None = None


def _with_request_id(request_id: str | None, details: Any | None) -> Any | None:
    if not request_id:
        return details
    if details is None:
        return {"request_id": request_id}
    if isinstance(details, dict):
        return details if "request_id" in details else {**details, "request_id": request_id}
    return {"request_id": request_id, "detail": details}


def _render(request_id: str | None, envelope: ErrorEnvelope) -> JSONResponse:
    body = ErrorResponse(
        code=envelope.code,
        message=envelope.message,
        details=_with_request_id(request_id, envelope.details),
    )
    response = JSONResponse(status_code=envelope.status_code, content=body.model_dump())
    if envelope.headers:
        response.headers.update(envelope.headers)
    if request_id:
        response.headers.setdefault(REQUEST_ID_HEADER, request_id)
    return response


def _from_application_error(exc: ApplicationError) -> ErrorEnvelope:
    return ErrorEnvelope(
        status_code=exc.status_code,
        code=exc.code,
        message=exc.message,
        details=exc.details,
        headers=exc.headers,
    )


def _from_validation_error(exc: RequestValidationError) -> ErrorEnvelope:
    field_name, message = describe_first_error(exc.errors())
    return ErrorEnvelope(
        status_code=status.HTTP_400_BAD_REQUEST,
        code=InvalidInputError.default_code,
        message=message,
        details={"field": field_name},
        log_extra={"field": field_name},
    )


def _from_integrity_error(exc: IntegrityError) -> ErrorEnvelope:
    if not is_unique_violation(exc):
        return _from_unhandled(exc)
    return ErrorEnvelope(
        status_code=status.HTTP_409_CONFLICT,
        code=ConflictError.default_code,
        message=ConflictError.default_message,
        exc_info=exc,
    )


def _from_http_exception(exc: StarletteHTTPException) -> ErrorEnvelope:
    if isinstance(exc.detail, str) and exc.detail:
        message = exc.detail
    else:
        try:
            message = HTTPStatus(exc.status_code).phrase
        except ValueError:
            message = "Error"
    return ErrorEnvelope(
        status_code=exc.status_code,
        code=_STARLETTE_CODES.get(exc.status_code, "http_error"),
        message=message,
        headers=exc.headers or None,
    )


def _from_unhandled(exc: Exception) -> ErrorEnvelope:
    return ErrorEnvelope(
        status_code=ServerError.default_status_code,
        code=ServerError.default_code,
        message=ServerError.default_message,
        exc_info=exc,
    )


def _install(
    app: FastAPI,
    exc_type: type[Exception],
    translate: Callable[[Any], ErrorEnvelope],
) -> None:
    async def _handler(request: Request, exc: Exception) -> JSONResponse:
        envelope = translate(exc)
        request_id = getattr(request.state, "request_id", None)
        token = bind_request_id(request_id) if request_id else None
        try:
            level = logging.ERROR if envelope.status_code >= 500 else logging.WARNING
            logger.log(
                level,
                "%s -> %s %s",
                request.url.path,
                envelope.status_code,
                envelope.code,
                exc_info=envelope.exc_info,
                extra={"code": envelope.code, "status_code": envelope.status_code, **envelope.log_extra},
            )
            return _render(request_id, envelope)
        finally:
            if token is not None:
                reset_request_id(token)

    handler: Callable[[Request, Exception], Awaitable[JSONResponse]] = _handler
    app.add_exception_handler(exc_type, handler)


def register_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers with the provided FastAPI app."""
    _install(app, ApplicationError, _from_application_error)
    _install(app, RequestValidationError, _from_validation_error)
    _install(app, IntegrityError, _from_integrity_error)
    _install(app, StarletteHTTPException, _from_http_exception)
    _install(app, Exception, _from_unhandled)


__all__ = [
    "ApplicationError",
    "ConflictError",
    "ErrorEnvelope",
    "ForbiddenError",
    "InvalidInputError",
    "NotFoundError",
    "ServerError",
    "UnauthenticatedError",
    "describe_first_error",
    "is_unique_violation",
    "register_exception_handlers",
]
