"""Seed the stores table with sample locations.

Usage:
    python -m store_locator.db.seed
"""
from __future__ import annotations

import asyncio
import logging
import random

from sqlalchemy import delete

from store_locator.core.logging import configure_logging
from store_locator.db.models import Store
from store_locator.db.session import async_transaction, create_all, dispose_engine
from store_locator.services.stores import invalidate_candidate_stores

logger = logging.getLogger(__name__)

# Default map center used by the locator front-end (Chennai)
CENTER_LAT = 13.0843
CENTER_LON = 80.2705

LOCALITIES = ["Chennai", "Egmore", "T. Nagar", "Adyar", "Mylapore", "Velachery", "Anna Nagar", "Guindy"]
STREETS = ["Anna Salai", "Mount Road", "Poonamallee High Road", "GST Road", "Cathedral Road", "ECR"]


def build_stores(count: int = 20, *, seed: int | None = None) -> list[Store]:
    rng = random.Random(seed)
    stores: list[Store] = []
    for index in range(count):
        locality = rng.choice(LOCALITIES)
        stores.append(
            Store(
                id=index + 1,
                title=f"{locality} Store {index + 1}",
                address_line1=f"{rng.randint(1, 400)} {rng.choice(STREETS)}",
                address_line2=None,
                locality=locality,
                administrative_area="Tamil Nadu",
                postal_code=f"600{rng.randint(0, 120):03d}",
                country_code="IN",
                lat=CENTER_LAT + rng.uniform(-0.15, 0.15),
                lon=CENTER_LON + rng.uniform(-0.15, 0.15),
            )
        )
    return stores


async def seed(count: int = 20) -> None:
    await create_all()
    async with async_transaction() as session:
        await session.execute(delete(Store))
        session.add_all(build_stores(count))
    # Must run after the transaction commits.
    await invalidate_candidate_stores()
    logger.info("Seeded %d stores around (%s, %s)", count, CENTER_LAT, CENTER_LON)


async def main() -> None:
    configure_logging()
    try:
        await seed()
    finally:
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
