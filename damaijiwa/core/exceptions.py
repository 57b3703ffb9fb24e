"""Application errors and their HTTP translation.

Every error raised by repositories and services derives from ``AppError`` and
carries the status code it maps to. The handlers below are registered on the
FastAPI app in ``main.py`` and render ``{"error": ..., "details": ...}``.
"""
import logging
from typing import Any, Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger("exceptions")


class AppError(Exception):
    status_code: int = 500
    message: str = "Internal Server Error"

    def __init__(self, message: Optional[str] = None, details: Any = None):
        self.message = message or self.message
        self.details = details
        super().__init__(self.message)


class UnauthorizedError(AppError):
    """No session, or the session points at a user that no longer exists."""

    status_code = 401
    message = "Unauthorized"


class UpstreamError(AppError):
    """An external call (generator or identity provider) failed."""

    message = "Upstream service failed"


class AuthenticationError(UpstreamError):
    """The identity provider refused or failed the code exchange."""

    message = "Authentication failed"


class PersistenceError(AppError):
    """A read or write against the store failed."""

    message = "Database operation failed"


def error_body(message: str, details: Any = None) -> dict:
    body = {"error": message}
    if details is not None:
        body["details"] = details
    return body


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message} ({exc.details})")
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message, exc.details))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {"loc": list(err.get("loc", [])), "msg": err.get("msg")}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=422, content=error_body("Invalid request", details))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content=error_body("Internal Server Error", str(exc)))
