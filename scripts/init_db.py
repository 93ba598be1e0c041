# scripts/init_db.py
import asyncio

from fleetdesk.crud.route_status import seed_default_statuses
from fleetdesk.db import async_session, create_db_and_tables


async def init_db():
    await create_db_and_tables()
    print("All missing tables created.")
    async with async_session() as db:
        added = await seed_default_statuses(db)
    print(f"Route statuses seeded: {added}")

if __name__ == "__main__":
    asyncio.run(init_db())
