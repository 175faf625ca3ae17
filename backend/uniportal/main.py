"""
University Search Portal API

Search and browse API over a MongoDB collection of university records.

Run with: uvicorn uniportal.main:app --port 3000 --reload
"""
import os
import time as _time_module
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.collection import Collection
from pymongo.errors import PyMongoError
from starlette.middleware.gzip import GZipMiddleware

# Configure structured logging FIRST (before any logger calls)
from .middleware.structlog_config import configure as configure_logging
configure_logging()

import structlog

from .cache import ResponseCache, get_response_cache
from .dependencies import (
    ENSURE_INDEXES,
    close_client,
    ensure_indexes,
    get_collection,
    verify_database_reachable,
)
from .middleware import RequestLoggingMiddleware, register_error_handlers
from .rate_limit import limiter
from .routers import catalog_router, stats_router, universities_router

logger = structlog.get_logger("uniportal.api")


# Track server start time for uptime reporting
_server_start_time = _time_module.time()

API_TITLE = "University Search Portal API"
API_DESCRIPTION = """
Search and browse a collection of university records.

### Core Endpoints

- **Search** - Filter, sort and paginate universities
- **Suggest** - Type-ahead by name or short name
- **Detail** - Full record by native id or IAU id
- **Catalog** - Country and city lists
- **Statistics** - Counts by country and institution type
"""
API_VERSION = "1.0.0"
API_PREFIX = "/api"


def _startup_checks() -> None:
    """Verify the store is reachable and the search indexes exist."""
    collection = get_collection()
    if not verify_database_reachable(collection):
        logger.warning("startup_check_warning", issue="database unreachable")
        return
    try:
        ensure_indexes(collection)
    except PyMongoError as e:
        logger.warning("startup_check_warning", issue=f"index creation failed: {e}")
        return
    logger.info("startup_checks_passed")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: check the store and build indexes. Shutdown: close the client."""
    if ENSURE_INDEXES:
        _startup_checks()
    yield
    logger.info("Shutting down.")
    close_client()


_docs_enabled = os.environ.get("ENABLE_DOCS", "true").lower() == "true"
app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    docs_url="/docs" if _docs_enabled else None,
    redoc_url="/redoc" if _docs_enabled else None,
    lifespan=lifespan,
)

register_error_handlers(app)

app.state.limiter = limiter

app.add_middleware(RequestLoggingMiddleware)

DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]


def cors_origins_from_env() -> list[str]:
    """Explicit origin list from CORS_ORIGINS; a wildcard is never honoured."""
    raw = os.environ.get("CORS_ORIGINS", "")
    origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
    if "*" in origins:
        logger.warning("cors_wildcard_rejected", fallback=DEFAULT_CORS_ORIGINS)
        return list(DEFAULT_CORS_ORIGINS)
    return origins or list(DEFAULT_CORS_ORIGINS)


app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins_from_env(),
    allow_credentials=False,
    allow_methods=["GET"],
    allow_headers=["Content-Type", "Accept", "Accept-Language", "X-Request-ID"],
    expose_headers=["X-Request-ID", "X-Response-Time"],
)


@app.middleware("http")
async def security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    response.headers["X-XSS-Protection"] = "0"
    if request.headers.get("x-forwarded-proto") == "https":
        response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
    return response


# GZip compression for responses > 1KB
app.add_middleware(GZipMiddleware, minimum_size=1000)

app.include_router(universities_router, prefix=API_PREFIX)
app.include_router(catalog_router, prefix=API_PREFIX)
app.include_router(stats_router, prefix=API_PREFIX)


@app.get("/", tags=["root"])
async def root():
    """API root - returns basic info and links."""
    return {
        "name": API_TITLE,
        "version": API_VERSION,
        "docs": "/docs",
        "endpoints": {
            "health": f"{API_PREFIX}/health",
            "search": f"{API_PREFIX}/universities/search",
            "suggest": f"{API_PREFIX}/universities/suggest",
            "detail": f"{API_PREFIX}/universities/{{id}}",
            "countries": f"{API_PREFIX}/countries",
            "cities": f"{API_PREFIX}/cities",
            "stats": f"{API_PREFIX}/stats",
            "stats_countries_all": f"{API_PREFIX}/stats/countries/all",
        },
    }


@app.get(f"{API_PREFIX}/health", tags=["root"])
def health_check(request: Request, collection: Collection = Depends(get_collection)):
    """Health check with database reachability and uptime."""
    db_reachable = verify_database_reachable(collection)
    uptime_seconds = round(_time_module.time() - _server_start_time)

    return JSONResponse(
        status_code=200 if db_reachable else 503,
        content={
            "status": "success" if db_reachable else "error",
            "message": (
                "University Search Portal API is running"
                if db_reachable
                else "Database unavailable"
            ),
            "version": API_VERSION,
            "database": "connected" if db_reachable else "unavailable",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime": uptime_seconds,
        },
    )


@app.get("/metrics", tags=["root"])
async def metrics(request: Request, cache: ResponseCache = Depends(get_response_cache)):
    """Application metrics for monitoring."""
    uptime_seconds = round(_time_module.time() - _server_start_time)
    return {
        "uptime_seconds": uptime_seconds,
        "cache": cache.stats(),
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", "3000")))
