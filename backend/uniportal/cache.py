"""
Thread-safe response caching for the University Search Portal API.

The cache is injected into routers through the get_response_cache dependency,
so tests can override it or swap in NullCache without touching query logic.
All caches are size-bounded (maxsize) and time-bounded (ttl seconds).
"""
import os
import threading
from typing import Any, Callable

import structlog
from cachetools import TTLCache
from pydantic import BaseModel
from starlette.requests import Request

logger = structlog.get_logger("uniportal.cache")

CACHE_ENABLED = os.environ.get("CACHE_ENABLED", "true").lower() == "true"
CACHE_TTL = int(os.environ.get("CACHE_TTL", "300"))
CACHE_MAXSIZE = int(os.environ.get("CACHE_MAXSIZE", "512"))


class ResponseCache:
    """Namespaced TTL cache for response envelopes. Thread-safe."""

    def __init__(self, default_ttl: int = CACHE_TTL, maxsize: int = CACHE_MAXSIZE):
        self.default_ttl = default_ttl
        self.maxsize = maxsize
        self._lock = threading.Lock()
        self._caches: dict[str, TTLCache] = {}

    def _namespace(self, namespace: str, ttl: int | None) -> TTLCache:
        with self._lock:
            if namespace not in self._caches:
                self._caches[namespace] = TTLCache(
                    maxsize=self.maxsize, ttl=ttl or self.default_ttl
                )
            return self._caches[namespace]

    def get(self, namespace: str, key: str) -> Any | None:
        """Return a cached value, or None if missing or expired."""
        cache = self._caches.get(namespace)
        if cache is None:
            return None
        with self._lock:
            value = cache.get(key)
        if value is not None:
            logger.debug("cache_hit", namespace=namespace, key=key)
        return value

    def set(self, namespace: str, key: str, value: Any, ttl: int | None = None) -> None:
        """Store a value. The namespace TTL is fixed by its first set()."""
        cache = self._namespace(namespace, ttl)
        with self._lock:
            cache[key] = value
        logger.debug("cache_set", namespace=namespace, key=key)

    def evict(self, namespace: str | None = None, key: str | None = None) -> None:
        """Evict one key, one namespace, or everything."""
        with self._lock:
            if namespace is None:
                for cache in self._caches.values():
                    cache.clear()
                return
            cache = self._caches.get(namespace)
            if cache is None:
                return
            if key is None:
                cache.clear()
            else:
                cache.pop(key, None)

    def stats(self) -> dict:
        """Return cache statistics for monitoring."""
        with self._lock:
            return {
                name: {"size": len(cache), "maxsize": cache.maxsize, "ttl": cache.ttl}
                for name, cache in self._caches.items()
            }


class NullCache(ResponseCache):
    """Cache that never stores anything."""

    def get(self, namespace: str, key: str) -> Any | None:
        return None

    def set(self, namespace: str, key: str, value: Any, ttl: int | None = None) -> None:
        return None


def request_cache_key(request: Request) -> str:
    """Cache key from method, path and sorted query string."""
    params = "&".join(f"{k}={v}" for k, v in sorted(request.query_params.multi_items()))
    return f"{request.method}:{request.url.path}?{params}"


response_cache: ResponseCache = ResponseCache() if CACHE_ENABLED else NullCache()


def get_response_cache() -> ResponseCache:
    """FastAPI dependency returning the app-wide response cache."""
    return response_cache


def cached_envelope(
    cache: ResponseCache,
    namespace: str,
    request: Request,
    ttl: int,
    producer: Callable[[], BaseModel],
) -> dict:
    """Serve a response envelope from cache, or build, cache and return it.

    Only success envelopes are stored.
    """
    key = request_cache_key(request)
    cached = cache.get(namespace, key)
    if cached is not None:
        return cached
    payload = producer().model_dump(by_alias=True, mode="json", exclude_none=True)
    if payload.get("status") == "success":
        cache.set(namespace, key, payload, ttl=ttl)
    return payload
