"""Endpoint dependencies and domain error translation."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from gymlog.core.database import get_db
from gymlog.core.exceptions import (
    CategoryLockedError,
    DuplicateNameError,
    ExerciseInUseError,
    GymlogError,
    InvalidReorderError,
    NotFoundError,
    OwnershipError,
    PersistenceError,
)
from gymlog.services import CalendarIndex, ExerciseCatalog, SetTrackingService, WorkoutService

DbSession = Annotated[AsyncSession, Depends(get_db)]

ERROR_STATUS = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    DuplicateNameError: status.HTTP_409_CONFLICT,
    CategoryLockedError: status.HTTP_409_CONFLICT,
    ExerciseInUseError: status.HTTP_409_CONFLICT,
    InvalidReorderError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    OwnershipError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    PersistenceError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def http_error(error: Exception) -> HTTPException:
    """Map a domain (or validation) error to the HTTP error the API returns."""
    if isinstance(error, GymlogError):
        for error_type, status_code in ERROR_STATUS.items():
            if isinstance(error, error_type):
                return HTTPException(status_code=status_code, detail=str(error))
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
    if isinstance(error, ValueError):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(error))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error")


def get_catalog(db: DbSession) -> ExerciseCatalog:
    return ExerciseCatalog(db)


def get_workout_service(db: DbSession) -> WorkoutService:
    return WorkoutService(db)


def get_tracking_service(db: DbSession) -> SetTrackingService:
    return SetTrackingService(db)


def get_calendar(db: DbSession) -> CalendarIndex:
    return CalendarIndex(db)


Catalog = Annotated[ExerciseCatalog, Depends(get_catalog)]
Workouts = Annotated[WorkoutService, Depends(get_workout_service)]
Tracking = Annotated[SetTrackingService, Depends(get_tracking_service)]
Calendar = Annotated[CalendarIndex, Depends(get_calendar)]
