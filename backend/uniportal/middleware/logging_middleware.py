"""
Request logging middleware with structured output.

One request_completed event per request with status and duration. An
incoming X-Request-ID is reused (truncated), otherwise a short id is minted;
either way it is echoed back with X-Response-Time.
"""
import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.get_logger("uniportal.api")

QUIET_PATHS = ("/api/health", "/", "/docs", "/openapi.json", "/metrics")
MAX_REQUEST_ID_LENGTH = 64


def request_id_for(request: Request) -> str:
    incoming = request.headers.get("x-request-id", "").strip()
    if incoming:
        return incoming[:MAX_REQUEST_ID_LENGTH]
    return uuid.uuid4().hex[:8]


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log all API requests with timing and tracing."""

    SLOW_THRESHOLD_MS = 1000

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request_id_for(request)
        start_time = time.perf_counter()

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        try:
            response = await call_next(request)
        except Exception:
            elapsed = round((time.perf_counter() - start_time) * 1000, 1)
            logger.error("request_failed", duration_ms=elapsed, status=500)
            raise

        elapsed = round((time.perf_counter() - start_time) * 1000, 1)
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{elapsed}ms"

        if request.url.path in QUIET_PATHS and response.status_code < 400:
            logger.debug("request_completed", duration_ms=elapsed, status=response.status_code)
            return response

        event = {"duration_ms": elapsed, "status": response.status_code}
        if request.query_params:
            event["query_params"] = dict(request.query_params)

        if response.status_code >= 500:
            logger.error("request_completed", **event)
        elif elapsed > self.SLOW_THRESHOLD_MS:
            logger.warning("slow_request", **event)
        elif response.status_code >= 400:
            logger.warning("request_completed", **event)
        else:
            logger.info("request_completed", **event)

        return response
