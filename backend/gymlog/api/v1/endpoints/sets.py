"""Performed set record endpoints."""

import uuid

from fastapi import APIRouter, status

from gymlog.api.v1.deps import Tracking, http_error
from gymlog.api.v1.schemas import SetRecordResponse, SetUpdateRequest
from gymlog.core.exceptions import GymlogError

router = APIRouter()


@router.get("/{set_id}", response_model=SetRecordResponse)
async def get_set(set_id: uuid.UUID, tracking: Tracking):
    try:
        return await tracking.get_set(set_id)
    except GymlogError as e:
        raise http_error(e) from e


@router.patch("/{set_id}", response_model=SetRecordResponse)
async def update_set(set_id: uuid.UUID, data: SetUpdateRequest, tracking: Tracking):
    """Write actual or target values; RPE is capped at 10."""
    try:
        record = await tracking.get_set(set_id)
        return await tracking.update_set(record, **data.model_dump(exclude_unset=True))
    except (GymlogError, ValueError) as e:
        raise http_error(e) from e


@router.post("/{set_id}/apply-targets", response_model=SetRecordResponse)
async def apply_targets(set_id: uuid.UUID, tracking: Tracking):
    """Copy the set's target values onto its actual values."""
    try:
        record = await tracking.get_set(set_id)
        return await tracking.apply_targets(record)
    except GymlogError as e:
        raise http_error(e) from e


@router.delete("/{set_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_set(set_id: uuid.UUID, tracking: Tracking) -> None:
    try:
        record = await tracking.get_set(set_id)
        await tracking.delete_set(record)
    except GymlogError as e:
        raise http_error(e) from e
