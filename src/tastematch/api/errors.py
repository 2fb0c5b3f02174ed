"""
Unified error handling for consistent API error responses.

All API errors use this format:
{
    "error": {
        "code": "ERROR_CODE",
        "message": "Human-readable message",
        "detail": "Optional additional context"
    }
}

Domain errors raised by the ranker are translated here, so routers can let
them propagate.
"""

from typing import Any

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from ..core.errors import (
    InvalidArgumentError,
    MissingDataError,
    PreconditionViolationError,
    StorageTimeoutError,
    TasteMatchError,
)


class APIError(HTTPException):
    """Base API error class for consistent error responses."""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        detail: str | None = None,
        headers: dict[str, str] | None = None,
    ):
        self.code = code
        self.message = message
        self.error_detail = detail
        super().__init__(
            status_code=status_code,
            detail={"code": code, "message": message, "detail": detail},
            headers=headers,
        )


class NotFoundError(APIError):
    """Resource not found (404)."""

    def __init__(self, resource: str, identifier: Any, context: str | None = None):
        message = f"{resource} not found"
        detail = f"{resource} with ID {identifier}"
        if context:
            detail = f"{detail} {context}"
        super().__init__(
            status_code=404,
            code="NOT_FOUND",
            message=message,
            detail=detail,
        )


class ValidationError(APIError):
    """Invalid input (400)."""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(
            status_code=400,
            code="VALIDATION_ERROR",
            message=message,
            detail=detail,
        )


class ServiceUnavailableError(APIError):
    """Backing service unavailable (503)."""

    def __init__(self, service: str, message: str | None = None):
        super().__init__(
            status_code=503,
            code="SERVICE_UNAVAILABLE",
            message=message or f"{service} is currently unavailable",
            detail=f"The {service} did not answer in time",
        )


def to_api_error(exc: TasteMatchError) -> APIError:
    """Map a domain error onto its HTTP counterpart."""
    if isinstance(exc, MissingDataError):
        return NotFoundError(
            resource="Preference vector",
            identifier=exc.entity_id,
            context="(complete the taste profile first)",
        )
    if isinstance(exc, (InvalidArgumentError, PreconditionViolationError)):
        return ValidationError(message=exc.message, detail=exc.code)
    if isinstance(exc, StorageTimeoutError):
        return ServiceUnavailableError(service="database", message=exc.message)
    return APIError(status_code=500, code=exc.code, message=exc.message)


def _render(exc: APIError) -> JSONResponse:
    content = {
        "error": {
            "code": exc.code,
            "message": exc.message,
        }
    }
    if exc.error_detail:
        content["error"]["detail"] = exc.error_detail

    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=exc.headers,
    )


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """
    FastAPI exception handler for APIError.

    Converts APIError exceptions to consistent JSON responses.
    """
    return _render(exc)


async def domain_error_handler(request: Request, exc: TasteMatchError) -> JSONResponse:
    """FastAPI exception handler for errors raised below the API layer."""
    return _render(to_api_error(exc))
