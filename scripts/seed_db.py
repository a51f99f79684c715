"""Database seeding script for development environment.

Creates the tables and the demo instruments:
- Instrument 1
- Instrument 2
- Instrument 3

Usage:
    python scripts/seed_db.py            # create tables and seed instruments
    python scripts/seed_db.py --clear    # drop and recreate all tables
"""

import asyncio
import sys
from pathlib import Path

# Add src to Python path
project_dir = Path(__file__).parent.parent
src_dir = project_dir / "src"
sys.path.insert(0, str(src_dir))

from labrun.db import DatabaseConfig
from labrun.db.repositories import InstrumentRepository


def _database_config() -> tuple[DatabaseConfig, Path]:
    db_path = project_dir / "lab.db"
    db_config = DatabaseConfig(
        database_url=f"sqlite+aiosqlite:///{db_path}",
        echo=True,
    )
    return db_config, db_path


async def seed_database() -> None:
    """Seed the database with initial development data."""
    db_config, db_path = _database_config()

    print(f"Seeding database at: {db_path}")

    # Create tables if they don't exist
    await db_config.create_tables()

    async with db_config.session() as session:
        created = await InstrumentRepository(session).seed_reference_data()

    if not created:
        print("Database already seeded. Skipping...")
    else:
        print("\nDatabase seeded successfully!")
        print("\n=== Seed Summary ===")
        for instrument in created:
            print(f"Instrument {instrument.instrument_id}: {instrument.description}")

    await db_config.dispose()


async def clear_database() -> None:
    """Clear all data from the database."""
    db_config, db_path = _database_config()

    print(f"Clearing database at: {db_path}")
    await db_config.drop_tables()
    await db_config.create_tables()
    print("Database cleared successfully!")

    await db_config.dispose()


def main() -> None:
    """Main entry point."""
    if len(sys.argv) > 1 and sys.argv[1] == "--clear":
        asyncio.run(clear_database())
    else:
        asyncio.run(seed_database())


if __name__ == "__main__":
    main()
