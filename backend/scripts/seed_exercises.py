#!/usr/bin/env python3
"""Seed the exercise catalog with the default exercises.

Runs the same guarded procedure as application startup: the persisted
seed flag short-circuits repeat runs, and a non-empty catalog is never
re-seeded.

Usage:
    # Seed if the catalog was never seeded
    python scripts/seed_exercises.py

    # Check the catalog even if the seed flag is already set
    python scripts/seed_exercises.py --force-check

    # Show the catalog
    python scripts/seed_exercises.py --list
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import gymlog.models  # noqa: F401,E402
from gymlog.core.database import get_db_context, init_db  # noqa: E402
from gymlog.core.exceptions import PersistenceError  # noqa: E402
from gymlog.observability import configure_logging  # noqa: E402
from gymlog.services.catalog import ExerciseCatalog  # noqa: E402
from gymlog.services.seeding import seed_if_empty  # noqa: E402


async def list_exercises() -> None:
    async with get_db_context() as session:
        exercises = await ExerciseCatalog(session).list_all()

    if not exercises:
        print("No exercises found")
        return
    print(f"\n{len(exercises)} exercises:")
    print("-" * 50)
    for exercise in exercises:
        sub_category = f" / {exercise.sub_category}" if exercise.sub_category else ""
        print(f"  {exercise.name} ({exercise.category}{sub_category})")


async def main() -> None:
    """Main entry point for the seed script."""
    parser = argparse.ArgumentParser(description="Seed the gymlog exercise catalog")
    parser.add_argument(
        "--force-check",
        action="store_true",
        help="Check the catalog even if it was already marked as seeded",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List catalog exercises after seeding",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override the configured log level",
    )
    args = parser.parse_args()

    configure_logging(args.log_level)
    await init_db()

    try:
        async with get_db_context() as session:
            inserted = await seed_if_empty(session, ignore_flag=args.force_check)
    except PersistenceError as e:
        print(f"\nError: {e}")
        print("\nMake sure the database is reachable and migrations are applied.")
        sys.exit(1)

    if inserted:
        print(f"Inserted {inserted} default exercises")
    else:
        print("Catalog already seeded; nothing inserted")

    if args.list:
        await list_exercises()


if __name__ == "__main__":
    asyncio.run(main())
