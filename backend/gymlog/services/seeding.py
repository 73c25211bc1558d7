"""Default exercise catalog seeding."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gymlog.core.database import transaction
from gymlog.core.exceptions import PersistenceError
from gymlog.models import AppFlag, Exercise, ExerciseCategory, SubCategory

logger = logging.getLogger(__name__)

SEEDED_FLAG = "did_seed_exercises"

# -------------------------------------------------------------------------
# Default Exercises
# -------------------------------------------------------------------------

DEFAULT_EXERCISES = [
    # Chest
    {"name": "Bench Press", "sub_category": SubCategory.CHEST},
    {"name": "Bench Press - Incline", "sub_category": SubCategory.CHEST},
    {"name": "Bench Press - Decline", "sub_category": SubCategory.CHEST},
    {"name": "Dumbbell Bench Press", "sub_category": SubCategory.CHEST},
    {"name": "Dumbbell Bench Press - Incline", "sub_category": SubCategory.CHEST},
    {"name": "Dumbbell Bench Press - Decline", "sub_category": SubCategory.CHEST},
    # Shoulders
    {"name": "Overhead Press", "sub_category": SubCategory.SHOULDERS},
    {"name": "Dumbbell Overhead Press", "sub_category": SubCategory.SHOULDERS},
    {"name": "Lateral Raise", "sub_category": SubCategory.SHOULDERS},
    {"name": "Lateral Raise - Cable", "sub_category": SubCategory.SHOULDERS},
    # Legs
    {"name": "Bulgarian Split Squat", "sub_category": SubCategory.LEGS},
    {"name": "Deadlift", "sub_category": SubCategory.LEGS},
    {"name": "Leg Press", "sub_category": SubCategory.LEGS},
    {"name": "Lunge", "sub_category": SubCategory.LEGS},
    {"name": "RDL", "sub_category": SubCategory.LEGS},
    {"name": "Squat", "sub_category": SubCategory.LEGS},
    # Back
    {"name": "Back Extension", "sub_category": SubCategory.BACK},
    {"name": "Lat Pulldown", "sub_category": SubCategory.BACK},
    {"name": "Pull-up", "sub_category": SubCategory.BACK, "is_bodyweight": True},
    {"name": "Cable Row - Close Grip", "sub_category": SubCategory.BACK},
    # Biceps
    {"name": "Barbell Curl", "sub_category": SubCategory.BICEPS},
    {"name": "Dumbbell Curl", "sub_category": SubCategory.BICEPS},
    # Triceps
    {"name": "Tricep Pushdown", "sub_category": SubCategory.TRICEPS},
    {"name": "Overhead Tricep Extension", "sub_category": SubCategory.TRICEPS},
    {"name": "Tricep Rope Extension", "sub_category": SubCategory.TRICEPS},
    # Abs
    {"name": "Ab Wheel Weighted", "sub_category": SubCategory.ABS, "is_bodyweight": True},
    {"name": "Crunches", "sub_category": SubCategory.ABS, "is_bodyweight": True},
    {"name": "Plank", "sub_category": SubCategory.ABS, "is_bodyweight": True},
    # Cardio
    {"name": "Running", "category": ExerciseCategory.CARDIO},
    {"name": "Cycling", "category": ExerciseCategory.CARDIO},
    {"name": "Rowing", "category": ExerciseCategory.CARDIO},
]


def build_default_exercises() -> list[Exercise]:
    exercises = []
    for entry in DEFAULT_EXERCISES:
        sub_category = entry.get("sub_category")
        exercises.append(
            Exercise(
                name=entry["name"],
                category=entry.get("category", ExerciseCategory.RESISTANCE).value,
                sub_category=sub_category.value if sub_category else None,
                is_bodyweight=entry.get("is_bodyweight", False),
            )
        )
    return exercises


async def is_seeded(session: AsyncSession) -> bool:
    flag = await session.get(AppFlag, SEEDED_FLAG)
    return bool(flag and flag.value)


async def catalog_is_empty(session: AsyncSession) -> bool:
    """Existence check: fetch at most one exercise id."""
    result = await session.execute(select(Exercise.id).limit(1))
    return result.first() is None


async def seed_if_empty(session: AsyncSession, ignore_flag: bool = False) -> int:
    """Populate the catalog with the default exercises on first start.

    The persisted flag short-circuits repeat calls. When the flag is unset the
    catalog is checked; a non-empty catalog only sets the flag. The flag is
    written in the same transaction as the inserts, so a failed seed leaves
    it unset and the next start retries.

    Args:
        session: Database session.
        ignore_flag: Check the catalog even if the flag is already set.

    Returns:
        Number of exercises inserted.

    Raises:
        PersistenceError: If the inserts could not be committed.
    """
    if not ignore_flag and await is_seeded(session):
        return 0

    inserted = 0
    flag = await session.get(AppFlag, SEEDED_FLAG)
    empty = await catalog_is_empty(session)

    async with transaction(session, "catalog.seed"):
        if empty:
            exercises = build_default_exercises()
            session.add_all(exercises)
            inserted = len(exercises)
        if flag is None:
            session.add(AppFlag(key=SEEDED_FLAG, value=True))
        else:
            flag.value = True

    if inserted:
        logger.info(f"Seeded exercise catalog with {inserted} default exercises")
    else:
        logger.debug("Exercise catalog already populated; marked as seeded")
    return inserted


async def seed_on_startup(session: AsyncSession) -> int:
    """Run seeding at application start without letting failures escape."""
    try:
        return await seed_if_empty(session)
    except PersistenceError as e:
        logger.error(f"Default exercise seeding failed, will retry next start: {e}")
        return 0
