"""Workout exercise link endpoints (one exercise inside a template or event)."""

import uuid

from fastapi import APIRouter, status

from gymlog.api.v1.deps import Tracking, Workouts, http_error
from gymlog.api.v1.schemas import (
    DeletionResponse,
    LinkResponse,
    LinkUpdateRequest,
    ReorderRequest,
    SetRecordResponse,
    SyncResponse,
    TargetSetResponse,
)
from gymlog.core.exceptions import GymlogError

router = APIRouter()


@router.get("/{link_id}", response_model=LinkResponse)
async def get_link(link_id: uuid.UUID, workouts: Workouts):
    try:
        return await workouts.get_link(link_id)
    except GymlogError as e:
        raise http_error(e) from e


@router.patch("/{link_id}", response_model=LinkResponse)
async def update_link(link_id: uuid.UUID, data: LinkUpdateRequest, workouts: Workouts):
    """Edit notes, the free-text target or the target mode."""
    values = data.model_dump(exclude_unset=True)

    try:
        link = await workouts.get_link(link_id)
        return await workouts.update_link(link, **values)
    except GymlogError as e:
        raise http_error(e) from e


@router.delete("/{link_id}", response_model=DeletionResponse)
async def delete_link(link_id: uuid.UUID, workouts: Workouts):
    """Delete a link with its sets; the owner's remaining links are re-indexed."""
    try:
        link = await workouts.get_link(link_id)
        report = await workouts.delete_link(link)
    except GymlogError as e:
        raise http_error(e) from e
    return report.to_dict()


@router.post("/{link_id}/sync", response_model=SyncResponse)
async def sync_set_counts(link_id: uuid.UUID, workouts: Workouts, tracking: Tracking):
    """Append target sets or set records until both counts match."""
    try:
        link = await workouts.get_link(link_id)
        return await tracking.sync_set_counts(link)
    except GymlogError as e:
        raise http_error(e) from e


@router.post(
    "/{link_id}/sets",
    response_model=SetRecordResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_set(link_id: uuid.UUID, workouts: Workouts, tracking: Tracking):
    try:
        link = await workouts.get_link(link_id)
        return await tracking.add_set(link)
    except GymlogError as e:
        raise http_error(e) from e


@router.post(
    "/{link_id}/target-sets",
    response_model=TargetSetResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_target_set(link_id: uuid.UUID, workouts: Workouts, tracking: Tracking):
    try:
        link = await workouts.get_link(link_id)
        return await tracking.add_target_set(link)
    except GymlogError as e:
        raise http_error(e) from e


@router.post("/{link_id}/target-sets/reorder", response_model=list[TargetSetResponse])
async def reorder_target_sets(
    link_id: uuid.UUID,
    data: ReorderRequest,
    workouts: Workouts,
    tracking: Tracking,
):
    try:
        link = await workouts.get_link(link_id)
        return await tracking.reorder_target_sets(link, data.from_indices, data.to_index)
    except GymlogError as e:
        raise http_error(e) from e


@router.post("/{link_id}/toggle-completed", response_model=LinkResponse)
async def toggle_completed(link_id: uuid.UUID, workouts: Workouts, tracking: Tracking):
    try:
        link = await workouts.get_link(link_id)
        return await tracking.toggle_completed(link)
    except GymlogError as e:
        raise http_error(e) from e
