"""Workout template endpoints."""

import uuid

from fastapi import APIRouter, Query, status

from gymlog.api.v1.deps import Catalog, Workouts, http_error
from gymlog.api.v1.schemas import (
    DeletionResponse,
    LinkCreateRequest,
    LinkResponse,
    ReorderRequest,
    TemplateCreateRequest,
    TemplateReorderRequest,
    TemplateResponse,
    TemplateUpdateRequest,
)
from gymlog.core.exceptions import GymlogError
from gymlog.models import WorkoutCategory

router = APIRouter()


@router.get("", response_model=list[TemplateResponse])
async def list_templates(
    workouts: Workouts,
    category: WorkoutCategory | None = Query(None, description="Filter by category"),
):
    """List templates in their global order."""
    return await workouts.list_templates(category)


@router.post("", response_model=TemplateResponse, status_code=status.HTTP_201_CREATED)
async def create_template(data: TemplateCreateRequest, workouts: Workouts):
    try:
        return await workouts.create_template(data.title, data.category)
    except GymlogError as e:
        raise http_error(e) from e


@router.post("/reorder", response_model=list[TemplateResponse])
async def reorder_templates(data: TemplateReorderRequest, workouts: Workouts):
    """Move templates; with ``category`` other categories keep their slots."""
    try:
        return await workouts.reorder_templates(data.from_indices, data.to_index, data.category)
    except GymlogError as e:
        raise http_error(e) from e


@router.get("/{template_id}", response_model=TemplateResponse)
async def get_template(template_id: uuid.UUID, workouts: Workouts):
    try:
        return await workouts.get_template(template_id)
    except GymlogError as e:
        raise http_error(e) from e


@router.patch("/{template_id}", response_model=TemplateResponse)
async def update_template(template_id: uuid.UUID, data: TemplateUpdateRequest, workouts: Workouts):
    """Rename a template or change its category (locked once exercises exist)."""
    try:
        template = await workouts.get_template(template_id)
        return await workouts.update_template(template, title=data.title, category=data.category)
    except GymlogError as e:
        raise http_error(e) from e


@router.delete("/{template_id}", response_model=DeletionResponse)
async def delete_template(template_id: uuid.UUID, workouts: Workouts):
    """Delete a template and its exercises; scheduled events are kept."""
    try:
        template = await workouts.get_template(template_id)
        report = await workouts.delete_template(template)
    except GymlogError as e:
        raise http_error(e) from e
    return report.to_dict()


@router.post(
    "/{template_id}/exercises",
    response_model=LinkResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_template_exercise(
    template_id: uuid.UUID,
    data: LinkCreateRequest,
    workouts: Workouts,
    catalog: Catalog,
):
    """Append an exercise to the template."""
    try:
        template = await workouts.get_template(template_id)
        exercise = await catalog.get(data.exercise_id)
        return await workouts.add_exercise(
            template,
            exercise,
            notes=data.notes,
            target_note=data.target_note,
            target_mode=data.target_mode,
        )
    except GymlogError as e:
        raise http_error(e) from e


@router.post("/{template_id}/exercises/reorder", response_model=list[LinkResponse])
async def reorder_template_exercises(
    template_id: uuid.UUID,
    data: ReorderRequest,
    workouts: Workouts,
):
    try:
        template = await workouts.get_template(template_id)
        return await workouts.reorder_links(template, data.from_indices, data.to_index)
    except GymlogError as e:
        raise http_error(e) from e
