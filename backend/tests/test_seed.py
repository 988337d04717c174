"""Sample data seeding."""

from app.services.seed import SAMPLE_LANDLORDS, seed_database
from app.services.store import DatabaseStore


class TestSeedDatabase:
    async def test_seeds_sample_landlords(self, db):
        assert await seed_database(db) == len(SAMPLE_LANDLORDS)

        landlords = await DatabaseStore(db).search_landlords("", "Frederick, MD")
        assert len(landlords) == len(SAMPLE_LANDLORDS)

    async def test_reseeding_skips_existing(self, db):
        await seed_database(db)

        assert await seed_database(db) == 0
        assert len(await DatabaseStore(db).list_landlords()) == len(SAMPLE_LANDLORDS)
