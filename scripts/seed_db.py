import asyncio

from sqlalchemy import insert

from rental_availability.api.deps import engine
from rental_availability.infrastructure.db.tables import listings, metadata

SAMPLE_LISTINGS = [
    {"id": "listing-beach-house", "owner_id": "owner-1", "advance_notice_hours": 0},
    {"id": "listing-city-loft", "owner_id": "owner-1", "advance_notice_hours": 48},
    {"id": "listing-mountain-cabin", "owner_id": "owner-2", "advance_notice_hours": 24},
]


async def seed():
    async with engine.begin() as conn:
        await conn.run_sync(metadata.drop_all)
        await conn.run_sync(metadata.create_all)
        print("Recreated all tables.")

        await conn.execute(insert(listings), SAMPLE_LISTINGS)
        print(f"Seeded {len(SAMPLE_LISTINGS)} listings.")

    await engine.dispose()

if __name__ == "__main__":
    asyncio.run(seed())
