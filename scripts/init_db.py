#!/usr/bin/env python3
"""
Database Initialization Script
Creates the employees table and reports what is in it.
"""
import asyncio
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.config import settings
from app.database import Database
from app.services.employee_store import EmployeeStore


async def init_database(database: Database):
    """Create tables (if missing) and print the current row count."""
    print("=" * 50)
    print("Employee Masterdata Database Initialization")
    print("=" * 50)

    print("\n[1/2] Creating database tables...")
    await database.create_all()
    print("      Tables created successfully!")

    print("\n[2/2] Verifying database structure...")
    async with database.session() as session:
        count = await EmployeeStore(session).count()
    print(f"      employees: {count} rows")

    print("\n" + "=" * 50)
    print("Database initialization complete!")
    print("=" * 50)


async def reset_database(database: Database):
    """Drop all tables and recreate them (USE WITH CAUTION!)."""
    print("WARNING: This will delete all data!")
    confirm = input("Type 'RESET' to confirm: ")

    if confirm != "RESET":
        print("Aborted.")
        return

    print("\nDropping all tables...")
    await database.drop_all()

    print("Recreating tables...")
    await init_database(database)


async def main(reset: bool):
    database = Database(
        settings.database_url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
    )
    await database.init(create_tables=False)
    try:
        if reset:
            await reset_database(database)
        else:
            await init_database(database)
    finally:
        await database.close()


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Database initialization script")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Drop and recreate all tables (destructive!)"
    )
    args = parser.parse_args()

    asyncio.run(main(args.reset))
