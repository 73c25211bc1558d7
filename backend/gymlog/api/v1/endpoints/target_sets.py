"""Target set endpoints."""

import uuid

from fastapi import APIRouter, status

from gymlog.api.v1.deps import Tracking, http_error
from gymlog.api.v1.schemas import SetValues, TargetSetResponse
from gymlog.core.exceptions import GymlogError

router = APIRouter()


@router.patch("/{target_set_id}", response_model=TargetSetResponse)
async def update_target_set(target_set_id: uuid.UUID, data: SetValues, tracking: Tracking):
    """Write planned values; the set record at the same position echoes them."""
    try:
        target = await tracking.get_target_set(target_set_id)
        return await tracking.update_target_set(target, **data.model_dump(exclude_unset=True))
    except (GymlogError, ValueError) as e:
        raise http_error(e) from e


@router.delete("/{target_set_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_target_set(target_set_id: uuid.UUID, tracking: Tracking) -> None:
    try:
        target = await tracking.get_target_set(target_set_id)
        await tracking.delete_target_set(target)
    except GymlogError as e:
        raise http_error(e) from e
