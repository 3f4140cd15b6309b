"""Rate limiting middleware for FastAPI application."""
from __future__ import annotations

from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from store_locator.core.config import get_settings


def get_limiter() -> Limiter:
    """
    Create and configure the per-IP rate limiter.

    Storage:
    - Production: Redis, shared between API replicas
    - Otherwise: in-memory
    """
    settings = get_settings()

    if settings.environment == "production":
        storage_uri = str(settings.redis_url)
    else:
        storage_uri = "memory://"

    return Limiter(
        key_func=get_remote_address,
        default_limits=[settings.rate_limit_default],
        storage_uri=storage_uri,
    )


__all__ = ["get_limiter", "RateLimitExceeded", "SlowAPIMiddleware", "_rate_limit_exceeded_handler"]
