#!/usr/bin/env python3
"""
Initialize the listing database.

Creates the tables behind every listing, reports their row counts, and can
load a small demo data set for local development.

Usage:
    python scripts/init_database.py              # create tables
    python scripts/init_database.py status       # tables and row counts
    python scripts/init_database.py seed         # create tables and load demo rows
    python scripts/init_database.py drop         # drop all tables (asks first)

    # With environment file
    ENV_FILE=.env.production python scripts/init_database.py

Environment Variables:
    DATABASE_URL - Full SQLAlchemy async URL (e.g. sqlite+aiosqlite:///./dev.db)
    DATABASE_HOST, DATABASE_PORT, DATABASE_NAME, DATABASE_USER, DATABASE_PASSWORD
"""

import asyncio
import logging
import os
import random
import sys
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

# Configure logging for CLI output
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Load environment variables
from dotenv import load_dotenv

env_file = os.environ.get("ENV_FILE", ".env")
env_path = project_root / env_file
if env_path.exists():
    load_dotenv(env_path)
    logger.info(f"Loaded environment from: {env_path}")
else:
    logger.warning(f"No environment file found at: {env_path}")
    logger.info("Using system environment variables")

DEMO_ORG_ID = "00000000-0000-0000-0000-000000000001"


async def init_tables(close: bool = True):
    """Create all database tables."""
    from sqlalchemy import inspect

    from listing_api.core.db_client import db

    logger.info("=== Database Initialization ===")

    logger.info("Testing database connection...")
    if not await db.test_connection():
        logger.error("Could not connect to database")
        logger.error("Check DATABASE_URL or the DATABASE_* connection settings")
        sys.exit(1)

    logger.info("Database connection successful!")

    logger.info("Creating tables...")
    try:
        await db.create_tables()
        logger.info("Tables created successfully!")
    except Exception as e:
        logger.error(f"Failed to create tables: {e}")
        sys.exit(1)

    engine = await db.get_engine_async()
    async with engine.connect() as conn:
        tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())

    if tables:
        logger.info("Tables:")
        for table_name in sorted(tables):
            logger.info(f"  - {table_name}")
    else:
        logger.warning("No tables found")

    if close:
        await db.close_all()
    logger.info("=== Initialization Complete ===")


async def drop_tables():
    """Drop all tables (use with caution!)."""
    from listing_api.core.db_client import db

    logger.warning("=== WARNING: Dropping All Tables ===")

    confirm = input("Are you sure you want to drop all tables? (type 'yes' to confirm): ")
    if confirm.lower() != "yes":
        logger.info("Aborted.")
        return

    await db.drop_tables()
    logger.info("All tables dropped.")
    await db.close_all()


async def show_status():
    """Show row counts for every listing's table."""
    from sqlalchemy import func, select

    from listing_api.catalog import LISTINGS
    from listing_api.core.db_client import db

    logger.info("=== Database Status ===")

    if not await db.test_connection():
        logger.error("Could not connect to database")
        sys.exit(1)

    engine = await db.get_engine_async()
    logger.info(f"Dialect: {engine.dialect.name}")

    async with db.session() as session:
        for name, listing in sorted(LISTINGS.items()):
            model = listing.model
            total = await session.scalar(select(func.count()).select_from(model))
            live = await session.scalar(
                select(func.count()).select_from(model).where(model.deleted_at.is_(None))
            )
            logger.info(f"  {name:<26} {model.__tablename__:<42} rows={total} live={live}")

    await db.close_all()


def _demo_rows():
    from listing_api.models import (
        AnnouncementModel,
        AppointmentModel,
        InsurancePolicyModel,
        StoreIngredientPriceModel,
        TaskModel,
    )

    rng = random.Random(42)
    now = datetime.now(timezone.utc)
    patients = [f"patient-{i}" for i in range(1, 6)]
    providers = [f"provider-{i}" for i in range(1, 4)]
    payers = ["Blue Shield", "Aetna", "Cigna", "UnitedHealthcare"]

    for i in range(1, 31):
        start = date(2024, 1, 1) + timedelta(days=rng.randint(0, 365))
        yield InsurancePolicyModel(
            organization_id=DEMO_ORG_ID,
            patient_id=rng.choice(patients),
            policy_number=f"POL-{i:05d}",
            payer_name=rng.choice(payers),
            coverage_start_date=start,
            coverage_end_date=start + timedelta(days=365),
            plan_type=rng.choice(["hmo", "ppo", "epo"]),
            policy_status=rng.choice(["active", "inactive", "pending"]),
            created_at=now - timedelta(hours=i),
        )

    for i in range(1, 41):
        start = now + timedelta(days=rng.randint(-30, 30), hours=rng.randint(8, 17))
        yield AppointmentModel(
            organization_id=DEMO_ORG_ID,
            patient_id=rng.choice(patients),
            provider_id=rng.choice(providers),
            status=rng.choice(["scheduled", "confirmed", "completed", "cancelled"]),
            appointment_type=rng.choice(["consultation", "follow_up", "procedure"]),
            start_time=start,
            end_time=start + timedelta(minutes=30),
            created_at=now - timedelta(hours=i),
        )

    for i in range(1, 16):
        yield AnnouncementModel(
            tenant_id=DEMO_ORG_ID,
            creator_id="instructor-1",
            title=f"Course update #{i}",
            body=f"Module {i} materials are now available.",
            status=rng.choice(["draft", "published", "archived"]),
            created_at=now - timedelta(days=i),
        )

    for i in range(1, 26):
        yield TaskModel(
            status_id=rng.choice(["todo", "in_progress", "done"]),
            priority_id=rng.choice(["low", "medium", "high"]),
            creator_id="pm-1",
            project_id="project-1",
            board_id=rng.choice(["board-1", "board-2"]),
            title=f"Task {i}",
            description=f"Demo task number {i}",
            due_date=now + timedelta(days=rng.randint(1, 60)),
            created_at=now - timedelta(hours=i),
        )

    for i in range(1, 21):
        yield StoreIngredientPriceModel(
            grocery_store_id=f"store-{rng.randint(1, 3)}",
            ingredient_id=f"ingredient-{i}",
            price=round(rng.uniform(0.5, 25.0), 2),
            available=rng.random() > 0.2,
            created_at=now - timedelta(hours=i),
        )


async def seed_demo_data():
    """Create tables and insert demo rows for every listing."""
    from listing_api.core.db_client import db

    await init_tables(close=False)

    rows = list(_demo_rows())
    async with db.session() as session:
        session.add_all(rows)

    logger.info(f"Inserted {len(rows)} demo rows (organization {DEMO_ORG_ID})")
    await db.close_all()


def main():
    """Main entry point."""
    if len(sys.argv) > 1:
        command = sys.argv[1].lower()
        if command == "drop":
            asyncio.run(drop_tables())
        elif command == "status":
            asyncio.run(show_status())
        elif command == "seed":
            asyncio.run(seed_demo_data())
        elif command in ("init", "create"):
            asyncio.run(init_tables())
        else:
            print(f"Unknown command: {command}")
            print("Usage: python scripts/init_database.py [init|drop|status|seed]")
            sys.exit(1)
    else:
        asyncio.run(init_tables())


if __name__ == "__main__":
    main()
