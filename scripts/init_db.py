# scripts/init_db.py
import argparse
import asyncio

from baytkom.db import async_session, create_db_and_tables, drop_db_and_tables
from baytkom.services.cleanup import run_cleanup


async def create_tables(reset: bool = False):
    if reset:
        await drop_db_and_tables()
        print("🗑️  Dropped all tables.")
    await create_db_and_tables()
    print("✅ All missing tables created.")


async def cleanup_now():
    async with async_session() as db:
        counts = await run_cleanup(db)
    print(f"🧹 Cleanup: {counts}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Baytkom database setup")
    parser.add_argument("--reset", action="store_true", help="Drop every table first")
    parser.add_argument("--cleanup", action="store_true", help="Run the retention sweep once")
    args = parser.parse_args()

    if args.cleanup:
        asyncio.run(cleanup_now())
    else:
        asyncio.run(create_tables(reset=args.reset))
