"""Nearest-store ranking.

Pure functions over in-memory store records: no I/O, no shared state, safe to
call from any number of concurrent requests.
"""
from __future__ import annotations

import heapq
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from store_locator.services.geospatial import haversine_distance, is_valid_coordinate, validate_coordinate

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 5


@dataclass(frozen=True)
class StoreRecord:
    id: int
    title: str
    address: Optional[str]
    lat: float
    lon: float


@dataclass(frozen=True)
class RankedStore:
    store: StoreRecord
    distance: float

    def to_dict(self) -> dict[str, Any]:
        """Wire representation used by the store locator endpoint."""
        return {
            "id": self.store.id,
            "title": self.store.title,
            "address": self.store.address,
            "lat": self.store.lat,
            "lon": self.store.lon,
            "distance": self.distance,
        }


def find_nearest(
    query_lat: float,
    query_lon: float,
    candidates: Iterable[StoreRecord],
    limit: int = DEFAULT_LIMIT,
) -> list[RankedStore]:
    """Return the ``limit`` stores closest to the query point, nearest first.

    Raises InvalidCoordinate for a bad query point and ValueError for a
    non-positive limit. Candidates with an unusable coordinate are skipped.
    Equal distances keep their input order.
    """
    lat, lon = validate_coordinate(query_lat, query_lon)
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise ValueError(f"limit must be a positive integer, got {limit!r}")

    scored: list[tuple[float, int, StoreRecord]] = []
    for index, store in enumerate(candidates):
        if not is_valid_coordinate(store.lat, store.lon):
            logger.debug("Skipping store %s with invalid coordinate (%r, %r)", store.id, store.lat, store.lon)
            continue
        scored.append((haversine_distance(lat, lon, store.lat, store.lon), index, store))

    nearest = heapq.nsmallest(limit, scored, key=lambda item: (item[0], item[1]))
    return [RankedStore(store=store, distance=distance) for distance, _, store in nearest]


__all__ = ["DEFAULT_LIMIT", "RankedStore", "StoreRecord", "find_nearest"]
