"""Error responses for the HTTP API."""

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """A request the API rejects with a ``{"success": false}`` body."""

    def __init__(
        self, message: str, status_code: int = 400, details: list[str] | None = None
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details


def error_body(message: str, details: list[str] | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"success": False, "error": message}
    if details:
        body["details"] = details
    return body


def format_validation_errors(exc: RequestValidationError) -> str:
    """One line per failed field, e.g. ``body.issueNumber: Field required``."""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        messages.append(f"{location}: {error.get('msg', 'Invalid value')}")
    return "; ".join(messages) or "Invalid request"


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code, content=error_body(exc.message, exc.details)
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    message = format_validation_errors(exc)
    logger.info(f"Rejected {request.method} {request.url.path}: {message}")
    return JSONResponse(status_code=400, content=error_body(message))


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled error in {request.method} {request.url.path}: {exc}",
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content=error_body("Internal server error"))
