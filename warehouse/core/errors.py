from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class NotFoundError(ValueError):
    """A referenced row does not exist."""


class ConflictError(ValueError):
    """A uniqueness or state rule would be broken (duplicate code, stock still on hand...)."""


class InsufficientStockError(ValueError):
    """An outbound or transfer would take stock below zero."""

    def __init__(self, available: int, requested: int) -> None:
        super().__init__("Insufficient inventory quantity")
        self.available = available
        self.requested = requested


class ErrorEnvelope(JSONResponse):
    def __init__(
        self,
        *,
        status_code: int,
        code: str,
        message: str,
        details: Any | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        payload: dict[str, Any] = {"code": code, "message": message}
        if details is not None:
            payload["details"] = details
        super().__init__(payload, status_code=status_code, headers=headers)


def _reason(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    detail = exc.detail
    message = detail if isinstance(detail, str) else _reason(exc.status_code)
    details = detail if isinstance(detail, dict) else None
    return ErrorEnvelope(
        status_code=exc.status_code,
        code="http_error",
        message=message,
        details=details,
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return ErrorEnvelope(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        code="validation_error",
        message="Validation errors",
        details={"errors": jsonable_errors(exc)},
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(
        "request.failed",
        extra={"extra_data": {"method": request.method, "path": request.url.path}},
    )
    return ErrorEnvelope(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        code="internal_error",
        message="Something went wrong!",
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    # ``ctx`` may hold the raw exception object, which JSON cannot encode.
    errors: list[dict[str, Any]] = []
    for error in exc.errors():
        cleaned = {key: value for key, value in error.items() if key not in ("ctx", "input", "url")}
        errors.append(cleaned)
    return errors


def as_http_error(exc: ValueError) -> StarletteHTTPException:
    """Translate a domain ``ValueError`` into the matching HTTP error."""

    if isinstance(exc, NotFoundError):
        return StarletteHTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    return StarletteHTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
