"""Workout event endpoints."""

import uuid

from fastapi import APIRouter, status

from gymlog.api.v1.deps import Catalog, Workouts, http_error
from gymlog.api.v1.schemas import (
    DeletionResponse,
    EventCreateRequest,
    EventReorderRequest,
    EventRescheduleRequest,
    EventResponse,
    EventScheduleRequest,
    EventUpdateRequest,
    LinkCreateRequest,
    LinkResponse,
    ReorderRequest,
)
from gymlog.core.exceptions import GymlogError

router = APIRouter()


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(data: EventCreateRequest, workouts: Workouts, catalog: Catalog):
    """Create an ad hoc event; exercises are linked in the given order."""
    try:
        exercises = [await catalog.get(exercise_id) for exercise_id in data.exercise_ids]
        return await workouts.create_event(
            data.date,
            title=data.title,
            exercises=exercises,
            start_time=data.start_time,
            notes=data.notes,
        )
    except GymlogError as e:
        raise http_error(e) from e


@router.post("/schedule", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def schedule_event(data: EventScheduleRequest, workouts: Workouts):
    """Schedule a template on a day, optionally copying its exercises."""
    try:
        template = await workouts.get_template(data.template_id)
        return await workouts.schedule_event(
            template,
            data.date,
            title=data.title,
            start_time=data.start_time,
            notes=data.notes,
            copy_exercises=data.copy_exercises,
        )
    except GymlogError as e:
        raise http_error(e) from e


@router.post("/reorder", response_model=list[EventResponse])
async def reorder_events(data: EventReorderRequest, workouts: Workouts):
    """Reorder the events of one day."""
    try:
        return await workouts.reorder_events(data.date, data.from_indices, data.to_index)
    except GymlogError as e:
        raise http_error(e) from e


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(event_id: uuid.UUID, workouts: Workouts):
    try:
        return await workouts.get_event(event_id)
    except GymlogError as e:
        raise http_error(e) from e


@router.patch("/{event_id}", response_model=EventResponse)
async def update_event(event_id: uuid.UUID, data: EventUpdateRequest, workouts: Workouts):
    try:
        event = await workouts.get_event(event_id)
        return await workouts.update_event(event, **data.model_dump(exclude_unset=True))
    except GymlogError as e:
        raise http_error(e) from e


@router.post("/{event_id}/reschedule", response_model=EventResponse)
async def reschedule_event(
    event_id: uuid.UUID,
    data: EventRescheduleRequest,
    workouts: Workouts,
):
    """Move an event to the end of another day."""
    try:
        event = await workouts.get_event(event_id)
        return await workouts.reschedule_event(event, data.date)
    except GymlogError as e:
        raise http_error(e) from e


@router.delete("/{event_id}", response_model=DeletionResponse)
async def delete_event(event_id: uuid.UUID, workouts: Workouts):
    try:
        event = await workouts.get_event(event_id)
        report = await workouts.delete_event(event)
    except GymlogError as e:
        raise http_error(e) from e
    return report.to_dict()


@router.post(
    "/{event_id}/exercises",
    response_model=LinkResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_event_exercise(
    event_id: uuid.UUID,
    data: LinkCreateRequest,
    workouts: Workouts,
    catalog: Catalog,
):
    try:
        event = await workouts.get_event(event_id)
        exercise = await catalog.get(data.exercise_id)
        return await workouts.add_exercise(
            event,
            exercise,
            notes=data.notes,
            target_note=data.target_note,
            target_mode=data.target_mode,
        )
    except GymlogError as e:
        raise http_error(e) from e


@router.post("/{event_id}/exercises/reorder", response_model=list[LinkResponse])
async def reorder_event_exercises(event_id: uuid.UUID, data: ReorderRequest, workouts: Workouts):
    try:
        event = await workouts.get_event(event_id)
        return await workouts.reorder_links(event, data.from_indices, data.to_index)
    except GymlogError as e:
        raise http_error(e) from e
