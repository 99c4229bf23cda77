"""Error taxonomy for the forum moderation API.

Services raise these exceptions; the handler registered by
``register_exception_handlers`` turns them into JSON responses with the
matching HTTP status.
"""

import logging

from fastapi import FastAPI
from fastapi import Request
from fastapi import status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ForumError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class AuthenticationError(ForumError):
    """Missing or invalid credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED
    code = "AUTHENTICATION_REQUIRED"


class AuthorizationError(ForumError):
    """Authenticated, but lacking the required role."""

    status_code = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"


class NotFoundError(ForumError):
    """Unknown topic, rule, content or notification."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"


class ValidationError(ForumError):
    """Malformed request payload."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "VALIDATION_ERROR"


class ConflictError(ForumError):
    """Illegal state transition or duplicate."""

    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"


class InternalError(ForumError):
    """Unexpected failure."""


class AuditLogError(InternalError):
    """A moderation log entry could not be written."""

    code = "AUDIT_LOG_FAILED"


async def forum_error_handler(request: Request, exc: ForumError) -> JSONResponse:
    """Render a ForumError as a structured JSON response."""
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(f"Internal error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render a malformed request body or query as a 400 ValidationError."""
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        problems.append(f"{location}: {error.get('msg', 'invalid')}")
    message = "; ".join(problems) or "Invalid request"
    logger.debug(f"Rejected {request.method} {request.url.path}: {message}")
    return JSONResponse(
        status_code=ValidationError.status_code,
        content={"detail": message, "code": ValidationError.code},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the ForumError and request validation handlers."""
    app.add_exception_handler(ForumError, forum_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(
        RequestValidationError,
        request_validation_handler,  # type: ignore[arg-type]
    )
