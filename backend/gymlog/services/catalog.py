"""Exercise catalog service."""

import logging
import uuid
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from gymlog.core.database import transaction
from gymlog.core.exceptions import DuplicateNameError, ExerciseInUseError, NotFoundError
from gymlog.models import Exercise, ExerciseCategory, SubCategory, WorkoutExercise
from gymlog.services.deletion import DeletionReport

logger = logging.getLogger(__name__)

_UNSET = object()


class ExerciseCatalog:
    """Registry of named, categorized exercises."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, exercise_id: uuid.UUID) -> Exercise:
        exercise = await self.session.get(Exercise, exercise_id)
        if exercise is None:
            raise NotFoundError("Exercise", exercise_id)
        return exercise

    async def get_by_name(self, name: str) -> Optional[Exercise]:
        result = await self.session.execute(select(Exercise).where(Exercise.name == name))
        return result.scalar_one_or_none()

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(Exercise))
        return result.scalar() or 0

    async def list_all(self, sorted_by_name: bool = True) -> list[Exercise]:
        query = select(Exercise)
        if sorted_by_name:
            query = query.order_by(Exercise.name.asc())
        else:
            query = query.order_by(Exercise.created_at.asc(), Exercise.name.asc())
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def list_by_category(self, category: ExerciseCategory | str) -> list[Exercise]:
        category = ExerciseCategory(category)
        result = await self.session.execute(
            select(Exercise)
            .where(Exercise.category == category.value)
            .order_by(Exercise.name.asc())
        )
        return list(result.scalars().all())

    async def list_by_sub_category(self, sub_category: SubCategory | str) -> list[Exercise]:
        sub_category = SubCategory(sub_category)
        result = await self.session.execute(
            select(Exercise)
            .where(Exercise.sub_category == sub_category.value)
            .order_by(Exercise.name.asc())
        )
        return list(result.scalars().all())

    async def create(
        self,
        name: str,
        category: ExerciseCategory | str = ExerciseCategory.RESISTANCE,
        sub_category: SubCategory | str | None = None,
        is_bodyweight: bool = False,
    ) -> Exercise:
        """Add an exercise to the catalog.

        Args:
            name: Display name; must not match an existing name exactly.
            category: Training modality.
            sub_category: Optional muscle group.
            is_bodyweight: Whether sets are logged without external load.

        Returns:
            The created exercise.

        Raises:
            DuplicateNameError: If the name is already taken (case-sensitive).
            ValueError: If the name is blank.
        """
        if not name or not name.strip():
            raise ValueError("Exercise name must not be blank")
        category = ExerciseCategory(category)
        sub_category = SubCategory(sub_category) if sub_category is not None else None

        if await self.get_by_name(name) is not None:
            raise DuplicateNameError(name)

        exercise = Exercise(
            name=name,
            category=category.value,
            sub_category=sub_category.value if sub_category else None,
            is_bodyweight=is_bodyweight,
        )
        async with transaction(self.session, "exercise.create"):
            self.session.add(exercise)

        logger.info(f"Created exercise '{name}' ({category.value})")
        return exercise

    async def update(
        self,
        exercise: Exercise,
        name: Optional[str] = None,
        category: ExerciseCategory | str | None = None,
        sub_category=_UNSET,
        is_bodyweight: Optional[bool] = None,
    ) -> Exercise:
        """Edit an exercise's name or classification.

        Pass ``sub_category=None`` to clear the muscle group.

        Raises:
            DuplicateNameError: If renaming onto another exercise's name.
        """
        if name is not None and name != exercise.name:
            if not name.strip():
                raise ValueError("Exercise name must not be blank")
            if await self.get_by_name(name) is not None:
                raise DuplicateNameError(name)
        category = ExerciseCategory(category) if category is not None else None
        if sub_category is not _UNSET and sub_category is not None:
            sub_category = SubCategory(sub_category)

        async with transaction(self.session, "exercise.update", restore=[exercise]):
            if name is not None:
                exercise.name = name
            if category is not None:
                exercise.category = category.value
            if sub_category is not _UNSET:
                exercise.sub_category = sub_category.value if sub_category else None
            if is_bodyweight is not None:
                exercise.is_bodyweight = is_bodyweight

        return exercise

    async def reference_count(self, exercise: Exercise) -> int:
        """Number of workout exercise links pointing at ``exercise``."""
        result = await self.session.execute(
            select(func.count())
            .select_from(WorkoutExercise)
            .where(WorkoutExercise.exercise_id == exercise.id)
        )
        return result.scalar() or 0

    async def delete(self, exercise: Exercise) -> DeletionReport:
        """Remove an exercise that no template or event uses.

        Raises:
            ExerciseInUseError: If any workout exercise link references it.
        """
        references = await self.reference_count(exercise)
        if references:
            raise ExerciseInUseError(exercise.name, references)

        report = DeletionReport()
        async with transaction(self.session, "exercise.delete", restore=[exercise]):
            await self.session.delete(exercise)
            report.exercises += 1

        logger.info(f"Deleted exercise '{exercise.name}'")
        return report
