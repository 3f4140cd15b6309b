from __future__ import annotations

import logging
import re
from dataclasses import asdict
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from store_locator.core.config import get_settings
from store_locator.db.models import Store
from store_locator.services.cache import cached_json, invalidate
from store_locator.services.geospatial import InvalidCoordinate, validate_coordinate
from store_locator.services.nearest import RankedStore, StoreRecord, find_nearest

logger = logging.getLogger(__name__)

settings = get_settings()

CANDIDATES_CACHE_KEY = "store_locator:candidates"

_WHITESPACE_RE = re.compile(r"\s+")


def format_address(
    address_line1: Optional[str] = None,
    address_line2: Optional[str] = None,
    locality: Optional[str] = None,
    administrative_area: Optional[str] = None,
    postal_code: Optional[str] = None,
    country_code: Optional[str] = None,
) -> Optional[str]:
    """Render a postal address as a single line.

    Street lines are joined with a space, the remaining parts with ``", "``.
    Empty parts are dropped, so a store with only a street and locality
    renders as ``"12 Anna Salai, Chennai"``. Returns None when every part is
    empty.
    """
    street = " ".join(part.strip() for part in (address_line1, address_line2) if part and part.strip())
    parts = [street, locality, administrative_area, postal_code, country_code]
    address = ", ".join(part.strip() for part in parts if part and part.strip())
    return _WHITESPACE_RE.sub(" ", address) or None


def store_to_record(store: Store) -> Optional[StoreRecord]:
    """Convert a database row to a StoreRecord, or None if it has no usable coordinate."""
    try:
        lat, lon = validate_coordinate(store.lat, store.lon)
    except InvalidCoordinate as exc:
        logger.warning("Skipping store %s (%s): %s", store.id, store.title, exc.reason)
        return None

    return StoreRecord(
        id=store.id,
        title=store.title,
        address=format_address(
            store.address_line1,
            store.address_line2,
            store.locality,
            store.administrative_area,
            store.postal_code,
            store.country_code,
        ),
        lat=lat,
        lon=lon,
    )


async def load_store_records(session: AsyncSession) -> list[StoreRecord]:
    result = await session.execute(select(Store).order_by(Store.id))
    records = [store_to_record(store) for store in result.scalars().all()]
    valid = [record for record in records if record is not None]
    if len(valid) != len(records):
        logger.info("Loaded %d stores, skipped %d without a valid location", len(valid), len(records) - len(valid))
    return valid


async def get_candidate_stores(session: AsyncSession) -> list[StoreRecord]:
    """Return every locatable store, served from Redis when a snapshot is cached."""

    async def producer() -> list[dict]:
        return [asdict(record) for record in await load_store_records(session)]

    rows = await cached_json(CANDIDATES_CACHE_KEY, settings.api_cache_ttl_seconds, producer)
    return [StoreRecord(**row) for row in rows]


async def invalidate_candidate_stores() -> None:
    """Forget the cached snapshot so the next lookup reloads stores from the database."""
    await invalidate(CANDIDATES_CACHE_KEY)


async def nearest_stores(
    session: AsyncSession,
    *,
    lat: float,
    lon: float,
    limit: int,
) -> list[RankedStore]:
    # Reject a bad query point before touching the database or cache.
    validate_coordinate(lat, lon)
    candidates = await get_candidate_stores(session)
    ranked = find_nearest(lat, lon, candidates, limit)
    logger.debug("Ranked %d of %d stores for (%s, %s)", len(ranked), len(candidates), lat, lon)
    return ranked


__all__ = [
    "format_address",
    "get_candidate_stores",
    "invalidate_candidate_stores",
    "load_store_records",
    "nearest_stores",
    "store_to_record",
]
