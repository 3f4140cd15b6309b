from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from store_locator.services.nearest import RankedStore


class NearestStoreSchema(BaseModel):
    id: int
    title: str
    address: Optional[str]
    lat: float
    lon: float
    distance: float = Field(..., ge=0, description="Great-circle distance from the query point in kilometres")

    @classmethod
    def from_ranked(cls, ranked: RankedStore) -> "NearestStoreSchema":
        return cls(**ranked.to_dict())


__all__ = ["NearestStoreSchema"]
