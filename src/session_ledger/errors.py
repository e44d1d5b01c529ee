"""Application errors and the single JSON error envelope they render to.

Every failure, whether raised by the ledger, by FastAPI request parsing, by
the database or by Starlette routing, is first converted into an
``ApplicationError`` and then rendered as ``{"code", "message", "details"}``
with the request id merged into ``details``.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any, Iterable, Mapping

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request

from .core.context import REQUEST_ID_HEADER, bind_request_id, reset_request_id
from .schemas.system import ErrorResponse

logger = logging.getLogger(__name__)

HTTP_422 = 422


class ApplicationError(Exception):
    """Base class for errors rendered through the error envelope."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "application_error",
        status_code: int = status.HTTP_400_BAD_REQUEST,
        details: dict[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        self.headers = headers


class UnauthorizedError(ApplicationError):
    """Raised when a guarded operation is called without a session."""

    def __init__(self, message: str = "Unauthorized.", *, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message,
            code="unauthorized",
            status_code=status.HTTP_401_UNAUTHORIZED,
            details=details,
        )


class ValidationError(ApplicationError):
    """Raised when a path parameter or body fails validation.

    ``errors`` are pydantic error entries; both the ledger's own validators and
    FastAPI's request parsing produce them.
    """

    def __init__(
        self,
        errors: Iterable[Mapping[str, Any]],
        message: str = "Request validation failed.",
    ) -> None:
        super().__init__(
            message,
            code="validation_error",
            status_code=HTTP_422,
            details={"errors": _plain_errors(errors)},
        )


_HTTP_STATUS_CODE_MAP: dict[int, str] = {
    status.HTTP_401_UNAUTHORIZED: "unauthorized",
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "method_not_allowed",
}


def _plain_errors(errors: Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
    """Keep the JSON-safe part of each entry: ``type``, ``loc`` and ``msg``."""
    return [
        {"type": error["type"], "loc": list(error["loc"]), "msg": error["msg"]}
        for error in errors
    ]


def _as_application_error(exc: Exception) -> ApplicationError:
    if isinstance(exc, ApplicationError):
        return exc
    if isinstance(exc, RequestValidationError):
        return ValidationError(exc.errors())
    if isinstance(exc, IntegrityError):
        return ApplicationError(
            "Database integrity violation.",
            code="db_integrity_error",
            status_code=status.HTTP_409_CONFLICT,
        )
    if isinstance(exc, StarletteHTTPException):
        message = exc.detail if isinstance(exc.detail, str) else HTTPStatus(exc.status_code).phrase
        return ApplicationError(
            message,
            code=_HTTP_STATUS_CODE_MAP.get(exc.status_code, "http_error"),
            status_code=exc.status_code,
            headers=exc.headers,
        )
    return ApplicationError(
        "Internal server error.",
        code="server_error",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def _render(request: Request, error: ApplicationError) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None)
    details = error.details
    if request_id:
        details = {**(details or {}), "request_id": request_id}
    payload = ErrorResponse(code=error.code, message=error.message, details=details)
    response = JSONResponse(status_code=error.status_code, content=payload.model_dump(mode="json"))
    if error.headers:
        response.headers.update(error.headers)
    if request_id:
        response.headers.setdefault(REQUEST_ID_HEADER, request_id)
    return response


async def _handle_error(request: Request, exc: Exception) -> JSONResponse:
    error = _as_application_error(exc)
    request_id = getattr(request.state, "request_id", None)
    token = bind_request_id(request_id) if request_id else None
    try:
        extra = {"code": error.code, "status_code": error.status_code, "path": request.url.path}
        if error.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR or isinstance(exc, IntegrityError):
            logger.error("Request failed", extra=extra, exc_info=exc)
        else:
            logger.warning("Request rejected", extra=extra)
        return _render(request, error)
    finally:
        if token is not None:
            reset_request_id(token)


def register_exception_handlers(app: FastAPI) -> None:
    """Route every error the ledger can raise through ``_handle_error``."""

    for exc_type in (
        ApplicationError,
        RequestValidationError,
        IntegrityError,
        StarletteHTTPException,
        Exception,
    ):
        app.add_exception_handler(exc_type, _handle_error)


__all__ = [
    "ApplicationError",
    "UnauthorizedError",
    "ValidationError",
    "register_exception_handlers",
]
