"""
Per-IP rate limiting with slowapi.

Limits are attached to each data endpoint with @rate_limit(); the limit string
is looked up per request from RATE_LIMIT. Root, health and metrics carry no
limit.
"""
import math
import os
import time
from typing import Callable, Optional

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

RATE_LIMIT_ENABLED = os.environ.get("RATE_LIMIT_ENABLED", "true").lower() == "true"
RATE_LIMIT = os.environ.get("RATE_LIMIT", "100/15minutes")

limiter = Limiter(
    key_func=get_remote_address,
    enabled=RATE_LIMIT_ENABLED,
)


def current_limit() -> str:
    return RATE_LIMIT


def rate_limit(limit_value: Optional[str] = None) -> Callable:
    """Decorator factory; the endpoint must accept a ``request`` argument."""
    return limiter.limit(limit_value or current_limit)


def seconds_until_reset(request: Request, fallback: int = 1) -> int:
    """Seconds until the limit that rejected this request resets."""
    view_limit = getattr(request.state, "view_rate_limit", None)
    if view_limit is None:
        return fallback
    item, args = view_limit
    reset_time, _ = limiter.limiter.get_window_stats(item, *args)
    return max(1, math.ceil(reset_time - time.time()))
