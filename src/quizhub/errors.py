"""Error taxonomy and the HTTP boundary translator.

Services and guards raise the typed errors below. install_error_handlers()
registers one handler per failure family on the app, so every error leaves
the service in the same body shape:

    {"status": 404, "message": "Quiz not found",
     "timestamp": "2026-01-01T12:00:00+00:00", "code": "NOT_FOUND"}

Unexpected exceptions are logged with their traceback and answered with a
generic message; internal detail never reaches the client.
"""

from datetime import datetime, timezone
from typing import Any, Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = structlog.get_logger()

INTERNAL_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."
INVALID_TOKEN_MESSAGE = "Invalid or expired token"


class QuizHubError(Exception):
    """Base class for failures that map to a fixed HTTP status and code."""

    status_code = 500
    code = "INTERNAL_ERROR"
    default_message = INTERNAL_ERROR_MESSAGE

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class BadRequest(QuizHubError):
    status_code = 400
    code = "BAD_REQUEST"
    default_message = "Bad request"


class Unauthorized(QuizHubError):
    status_code = 401
    code = "UNAUTHORIZED"
    default_message = "Authentication required"


class InvalidToken(Unauthorized):
    """Collapsed token failure: malformed, tampered and expired look the same."""

    code = "INVALID_TOKEN"
    default_message = INVALID_TOKEN_MESSAGE


class Forbidden(QuizHubError):
    status_code = 403
    code = "FORBIDDEN"
    default_message = "You do not have permission to access this resource"


class ResourceNotFound(QuizHubError):
    status_code = 404
    code = "NOT_FOUND"
    default_message = "Resource not found"


class Conflict(QuizHubError):
    status_code = 409
    code = "CONFLICT"
    default_message = "Resource already exists"


class InternalError(QuizHubError):
    pass


def error_body(
    status: int,
    message: str,
    code: str,
    errors: Optional[dict[str, str]] = None,
) -> dict[str, Any]:
    body: dict[str, Any] = {
        "status": status,
        "message": message,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "code": code,
    }
    if errors:
        body["errors"] = errors
    return body


def error_response(
    status: int,
    message: str,
    code: str,
    errors: Optional[dict[str, str]] = None,
) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if status == 401 else None
    return JSONResponse(
        status_code=status,
        content=error_body(status, message, code, errors),
        headers=headers,
    )


# ─── Handlers ────────────────────────────────────────────


async def handle_quizhub_error(request: Request, exc: QuizHubError) -> JSONResponse:
    if isinstance(exc, InternalError):
        logger.error("request.internal_error", path=request.url.path, error=exc.message)
        return error_response(500, INTERNAL_ERROR_MESSAGE, exc.code)

    logger.warning(
        "request.rejected",
        path=request.url.path,
        method=request.method,
        code=exc.code,
        message=exc.message,
    )
    return error_response(exc.status_code, exc.message, exc.code)


async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors: dict[str, str] = {}
    for err in exc.errors():
        # loc is ("body", "field", ...); drop the location prefix
        field = ".".join(str(part) for part in err["loc"][1:]) or str(err["loc"][0])
        errors[field] = err["msg"]

    logger.warning("request.validation_failed", path=request.url.path, fields=list(errors))
    return error_response(400, "Validation failed", "VALIDATION_ERROR", errors)


async def handle_http_exception(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    if exc.status_code == 404:
        return error_response(404, "The requested endpoint does not exist", "ENDPOINT_NOT_FOUND")
    if exc.status_code == 405:
        return error_response(405, "Method not allowed for this endpoint", "METHOD_NOT_ALLOWED")
    return error_response(exc.status_code, str(exc.detail), "HTTP_ERROR")


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("request.unhandled_exception", path=request.url.path)
    return error_response(500, INTERNAL_ERROR_MESSAGE, "INTERNAL_ERROR")


def install_error_handlers(app: FastAPI) -> None:
    """Register the boundary translator on the app."""
    app.add_exception_handler(QuizHubError, handle_quizhub_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected)
