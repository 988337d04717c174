"""Sample data for local development."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError
from app.services.store import DatabaseStore

logger = logging.getLogger(__name__)

SAMPLE_LANDLORDS = (
    {
        "name": "Frederick Property Management",
        "location": "Frederick, MD",
        "address": "123 Main Street, Frederick, MD 21701",
    },
    {
        "name": "Potomac Rentals LLC",
        "location": "Frederick, MD",
        "address": "456 Market Street, Frederick, MD 21702",
    },
    {
        "name": "Carroll Creek Properties",
        "location": "Frederick, MD",
        "address": "789 Baker Street, Frederick, MD 21703",
    },
)


async def seed_database(db: AsyncSession) -> int:
    """Insert the sample landlords, skipping any that already exist.

    Returns the number created.
    """
    store = DatabaseStore(db)
    created = 0
    for data in SAMPLE_LANDLORDS:
        if await store.get_landlord_by_name(data["name"]):
            continue
        try:
            await store.create_landlord(**data)
            await db.commit()
            created += 1
        except ConflictError:
            logger.info(f"[SEED] Landlord {data['name']!r} already exists")
    logger.info(f"[SEED] Seeding completed, {created} landlords created")
    return created
