from __future__ import annotations

import functools

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_name: str = "Store Locator API"
    environment: str = "development"

    database_url: str = "postgresql+psycopg://postgres:postgres@db:5432/store_locator"
    redis_url: str = "redis://redis:6379/0"

    api_cache_ttl_seconds: int = 300

    nearest_stores_limit: int = 5
    max_stores_limit: int = 50

    # CORS configuration
    cors_origins: str = "*"

    rate_limit_default: str = "60/minute"

    db_pool_size: int = 10
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 1800

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
    }

    @field_validator("nearest_stores_limit", "max_stores_limit")
    @classmethod
    def validate_positive_limit(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Store limits must be at least 1")
        return v

    @field_validator("api_cache_ttl_seconds")
    @classmethod
    def validate_cache_ttl(cls, v: int) -> int:
        if v < 0:
            raise ValueError("API_CACHE_TTL_SECONDS cannot be negative (use 0 to disable caching)")
        return v

    @model_validator(mode="after")
    def validate_limit_ordering(self) -> "Settings":
        if self.nearest_stores_limit > self.max_stores_limit:
            raise ValueError(
                f"NEAREST_STORES_LIMIT ({self.nearest_stores_limit}) cannot exceed "
                f"MAX_STORES_LIMIT ({self.max_stores_limit})"
            )
        return self


@functools.lru_cache()
def get_settings() -> Settings:
    return Settings()


__all__ = ["Settings", "get_settings"]
