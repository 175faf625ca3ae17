"""
Global error handlers for the University Search Portal API.

Translates exceptions into the uniform {"status": "error", "message": ...}
envelope. Internal details are only exposed when APP_ENV=development.
"""
import os
import traceback

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from slowapi.errors import RateLimitExceeded

from ..rate_limit import seconds_until_reset

logger = structlog.get_logger("uniportal.api.errors")


class DomainError(Exception):
    """Base class for domain-level errors."""
    status_code: int = 400
    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class InvalidParameterError(DomainError):
    """A query parameter failed validation before reaching the store."""
    status_code = 400
    error_code = "INVALID_PARAMETER"


class NotFoundError(DomainError):
    """Resource not found."""
    status_code = 404
    error_code = "NOT_FOUND"


def is_development() -> bool:
    return os.environ.get("APP_ENV", "production").lower() == "development"


def error_body(message: str, **extra) -> dict:
    return {"status": "error", "message": message, **extra}


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the FastAPI app."""

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("domain_error", code=exc.error_code, error=exc.message)
        return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = exc.errors()
        if errors:
            first = errors[0]
            field = ".".join(str(part) for part in first.get("loc", ()) if part != "query")
            message = f"Invalid parameter '{field}': {first.get('msg', 'invalid value')}"
        else:
            message = "Invalid request parameters"
        logger.warning("validation_error", error=message, path=request.url.path)
        return JSONResponse(status_code=400, content=error_body(message))

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
        window = exc.limit.limit.get_expiry() if exc.limit is not None else 1
        retry_after = seconds_until_reset(request, fallback=window)
        logger.warning("rate_limited", path=request.url.path, limit=str(exc.detail))
        return JSONResponse(
            status_code=429,
            content=error_body("Too many requests", retryAfter=retry_after),
            headers={"Retry-After": str(retry_after)},
        )

    @app.exception_handler(PyMongoError)
    async def database_error_handler(request: Request, exc: PyMongoError) -> JSONResponse:
        logger.error(
            "database_error",
            error_type=type(exc).__name__,
            error=str(exc),
            path=request.url.path,
        )
        extra = {}
        if is_development():
            extra = {"error": str(exc)}
        return JSONResponse(
            status_code=503,
            content=error_body("Database temporarily unavailable", **extra),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "unhandled_error",
            error_type=type(exc).__name__,
            error=str(exc),
            path=request.url.path,
            exc_info=exc,
        )
        extra = {}
        if is_development():
            extra = {
                "error": str(exc),
                "stack": "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
            }
        return JSONResponse(status_code=500, content=error_body("Internal server error", **extra))
