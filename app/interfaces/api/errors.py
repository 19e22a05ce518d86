"""Render errors as ``{"error": message}`` JSON responses.

Status code mapping:
- ``ValidationError`` and request validation failures -> 400
- ``UnauthorizedError`` -> 401
- ``NotFoundError`` -> 404
- ``PushConfigurationError`` -> 503
- Any other exception -> 500 with a generic message
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from app.domain.exceptions import (
    NotFoundError,
    PushConfigurationError,
    UnauthorizedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def _error(status_code: int, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


async def _handle_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    logger.info("Validation error on %s %s: %s", request.method, request.url.path, exc.message)
    return _error(400, exc.message)


async def _handle_unauthorized(request: Request, exc: UnauthorizedError) -> JSONResponse:
    return _error(401, exc.message, headers={"WWW-Authenticate": "Bearer"})


async def _handle_not_found(request: Request, exc: NotFoundError) -> JSONResponse:
    return _error(404, exc.message)


async def _handle_push_configuration(request: Request, exc: PushConfigurationError) -> JSONResponse:
    logger.warning("Push requested but not configured: %s", exc)
    return _error(503, str(exc))


async def _handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return _error(400, "; ".join(messages) or "Invalid request")


async def _handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


class CatchAllErrorMiddleware(BaseHTTPMiddleware):
    """Turn any unhandled exception into a generic 500 response."""

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception:
            logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
            return _error(500, INTERNAL_ERROR_MESSAGE)


def register_error_handlers(app: FastAPI) -> None:
    """Attach the exception handlers and the catch-all middleware to ``app``."""

    app.add_exception_handler(ValidationError, _handle_validation_error)
    app.add_exception_handler(UnauthorizedError, _handle_unauthorized)
    app.add_exception_handler(NotFoundError, _handle_not_found)
    app.add_exception_handler(PushConfigurationError, _handle_push_configuration)
    app.add_exception_handler(RequestValidationError, _handle_request_validation)
    app.add_exception_handler(StarletteHTTPException, _handle_http_exception)
    app.add_middleware(CatchAllErrorMiddleware)


__all__ = ["CatchAllErrorMiddleware", "register_error_handlers"]
