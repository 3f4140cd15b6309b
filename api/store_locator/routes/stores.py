from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Path, Query

from store_locator.core.config import get_settings
from store_locator.db.session import get_async_session
from store_locator.schemas.stores import NearestStoreSchema
from store_locator.services.geospatial import InvalidCoordinate
from store_locator.services.stores import nearest_stores

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/store-locator", tags=["stores"])
settings = get_settings()


@router.get("/stores/{lat}/{lon}")
async def get_nearest_stores(
    lat: float = Path(...),
    lon: float = Path(...),
    limit: int | None = Query(None, ge=1),
) -> list[NearestStoreSchema]:
    """Nearest stores to (lat, lon), nearest first, as a flat JSON array."""
    count = limit if limit is not None else settings.nearest_stores_limit
    if count > settings.max_stores_limit:
        raise HTTPException(status_code=422, detail=f"limit cannot exceed {settings.max_stores_limit}")

    try:
        async with get_async_session() as session:
            ranked = await nearest_stores(session, lat=lat, lon=lon, limit=count)
    except InvalidCoordinate as exc:
        logger.info("Rejected store lookup: %s", exc)
        raise HTTPException(status_code=400, detail=exc.reason) from exc

    return [NearestStoreSchema.from_ranked(item) for item in ranked]
