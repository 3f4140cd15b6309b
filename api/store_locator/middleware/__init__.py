"""Middleware for FastAPI application."""
from __future__ import annotations

from store_locator.middleware.rate_limit import (
    RateLimitExceeded,
    SlowAPIMiddleware,
    _rate_limit_exceeded_handler,
    get_limiter,
)
from store_locator.middleware.security import SecurityHeadersMiddleware

__all__ = [
    "SecurityHeadersMiddleware",
    "SlowAPIMiddleware",
    "get_limiter",
    "RateLimitExceeded",
    "_rate_limit_exceeded_handler",
]
