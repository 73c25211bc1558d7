"""Exercise catalog endpoints."""

import uuid

from fastapi import APIRouter, HTTPException, Query, status

from gymlog.api.v1.deps import Catalog, DbSession, http_error
from gymlog.api.v1.schemas import (
    DeletionResponse,
    ExerciseCreateRequest,
    ExerciseResponse,
    ExerciseUpdateRequest,
    SeedResponse,
)
from gymlog.core.exceptions import GymlogError
from gymlog.models import ExerciseCategory, SubCategory
from gymlog.services.seeding import seed_if_empty

router = APIRouter()


@router.get("", response_model=list[ExerciseResponse])
async def list_exercises(
    catalog: Catalog,
    category: ExerciseCategory | None = Query(None, description="Filter by category"),
    sub_category: SubCategory | None = Query(None, description="Filter by muscle group"),
):
    """List catalog exercises sorted by name."""
    if category is not None:
        exercises = await catalog.list_by_category(category)
    elif sub_category is not None:
        exercises = await catalog.list_by_sub_category(sub_category)
    else:
        exercises = await catalog.list_all()

    if category is not None and sub_category is not None:
        exercises = [e for e in exercises if e.sub_category == sub_category.value]
    return exercises


@router.post("", response_model=ExerciseResponse, status_code=status.HTTP_201_CREATED)
async def create_exercise(data: ExerciseCreateRequest, catalog: Catalog):
    """Add an exercise; names are unique (case-sensitive)."""
    try:
        return await catalog.create(
            name=data.name,
            category=data.category,
            sub_category=data.sub_category,
            is_bodyweight=data.is_bodyweight,
        )
    except (GymlogError, ValueError) as e:
        raise http_error(e) from e


@router.post("/seed", response_model=SeedResponse)
async def seed_exercises(
    db: DbSession,
    force_check: bool = Query(False, description="Check the catalog even if already seeded"),
):
    """Insert the default exercises if the catalog has never been seeded."""
    try:
        inserted = await seed_if_empty(db, ignore_flag=force_check)
    except GymlogError as e:
        raise http_error(e) from e
    return {"inserted": inserted}


@router.get("/{exercise_id}", response_model=ExerciseResponse)
async def get_exercise(exercise_id: uuid.UUID, catalog: Catalog):
    try:
        return await catalog.get(exercise_id)
    except GymlogError as e:
        raise http_error(e) from e


@router.patch("/{exercise_id}", response_model=ExerciseResponse)
async def update_exercise(exercise_id: uuid.UUID, data: ExerciseUpdateRequest, catalog: Catalog):
    """Rename or reclassify an exercise."""
    values = data.model_dump(exclude_unset=True)
    if "name" in values and values["name"] is None:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="name must not be null")

    try:
        exercise = await catalog.get(exercise_id)
        return await catalog.update(exercise, **values)
    except (GymlogError, ValueError) as e:
        raise http_error(e) from e


@router.delete("/{exercise_id}", response_model=DeletionResponse)
async def delete_exercise(exercise_id: uuid.UUID, catalog: Catalog):
    """Delete an exercise no template or event references."""
    try:
        exercise = await catalog.get(exercise_id)
        report = await catalog.delete(exercise)
    except GymlogError as e:
        raise http_error(e) from e
    return report.to_dict()
