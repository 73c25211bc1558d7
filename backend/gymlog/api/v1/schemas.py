"""Request/response schemas shared by the v1 endpoints."""

import uuid
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from gymlog.models import ExerciseCategory, SetType, SubCategory, TargetMode, WorkoutCategory


def _by_order(items: list) -> list:
    return sorted(items, key=lambda item: item.order)


# -------------------------------------------------------------------------
# Shared
# -------------------------------------------------------------------------


class ReorderRequest(BaseModel):
    """Move the items at ``from_indices`` as one block to ``to_index``."""

    from_indices: list[int]
    to_index: int


class DeletionResponse(BaseModel):
    templates: int = 0
    events: int = 0
    workout_exercises: int = 0
    target_sets: int = 0
    set_records: int = 0
    exercises: int = 0
    detached_events: int = 0
    total: int = 0


# -------------------------------------------------------------------------
# Exercises
# -------------------------------------------------------------------------


class ExerciseCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    category: ExerciseCategory = ExerciseCategory.RESISTANCE
    sub_category: Optional[SubCategory] = None
    is_bodyweight: bool = False


class ExerciseUpdateRequest(BaseModel):
    """Partial update; an explicit ``sub_category: null`` clears it."""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    category: Optional[ExerciseCategory] = None
    sub_category: Optional[SubCategory] = None
    is_bodyweight: Optional[bool] = None


class ExerciseResponse(BaseModel):
    id: uuid.UUID
    name: str
    category: ExerciseCategory
    sub_category: Optional[SubCategory] = None
    is_bodyweight: bool
    set_type: SetType

    model_config = {"from_attributes": True}


class SeedResponse(BaseModel):
    inserted: int


# -------------------------------------------------------------------------
# Sets
# -------------------------------------------------------------------------


class SetValues(BaseModel):
    weight: Optional[float] = Field(None, ge=0)
    reps: Optional[int] = Field(None, ge=0)
    rpe: Optional[float] = Field(None, ge=0)
    duration: Optional[float] = Field(None, ge=0)
    distance: Optional[float] = Field(None, ge=0)
    resistance: Optional[float] = Field(None, ge=0)
    heart_rate: Optional[int] = Field(None, ge=0)


class SetUpdateRequest(SetValues):
    target_weight: Optional[float] = Field(None, ge=0)
    target_reps: Optional[int] = Field(None, ge=0)
    target_rpe: Optional[float] = Field(None, ge=0)
    target_duration: Optional[float] = Field(None, ge=0)
    target_distance: Optional[float] = Field(None, ge=0)
    target_resistance: Optional[float] = Field(None, ge=0)
    target_heart_rate: Optional[int] = Field(None, ge=0)
    is_tracked: Optional[bool] = None


class TargetSetResponse(SetValues):
    id: uuid.UUID
    order: int

    model_config = {"from_attributes": True}


class SetRecordResponse(SetUpdateRequest):
    id: uuid.UUID
    type: SetType
    date: datetime
    order: int
    is_tracked: bool
    is_synced: bool

    model_config = {"from_attributes": True}


class SyncResponse(BaseModel):
    added_target_sets: int
    added_set_records: int

    model_config = {"from_attributes": True}


# -------------------------------------------------------------------------
# Workout exercise links
# -------------------------------------------------------------------------


class LinkCreateRequest(BaseModel):
    exercise_id: uuid.UUID
    notes: Optional[str] = None
    target_note: Optional[str] = None
    target_mode: TargetMode = TargetMode.SIMPLE


class LinkUpdateRequest(BaseModel):
    notes: Optional[str] = None
    target_note: Optional[str] = None
    target_mode: Optional[TargetMode] = None


class LinkResponse(BaseModel):
    id: uuid.UUID
    exercise: ExerciseResponse
    notes: Optional[str] = None
    target_note: Optional[str] = None
    target_mode: TargetMode
    order: int
    is_completed: bool
    workout_template_id: Optional[uuid.UUID] = None
    workout_event_id: Optional[uuid.UUID] = None
    target_sets: list[TargetSetResponse] = []
    sets: list[SetRecordResponse] = []

    model_config = {"from_attributes": True}

    @field_validator("target_sets", "sets")
    @classmethod
    def sort_by_order(cls, value: list) -> list:
        return _by_order(value)


# -------------------------------------------------------------------------
# Templates
# -------------------------------------------------------------------------


class TemplateCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    category: WorkoutCategory = WorkoutCategory.RESISTANCE


class TemplateUpdateRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    category: Optional[WorkoutCategory] = None


class TemplateReorderRequest(ReorderRequest):
    """Indices address only ``category``'s templates when it is set."""

    category: Optional[WorkoutCategory] = None


class TemplateResponse(BaseModel):
    id: uuid.UUID
    title: str
    order: int
    category: WorkoutCategory
    is_category_locked: bool
    workout_exercises: list[LinkResponse] = []

    model_config = {"from_attributes": True}

    @field_validator("workout_exercises")
    @classmethod
    def sort_by_order(cls, value: list) -> list:
        return _by_order(value)


# -------------------------------------------------------------------------
# Events
# -------------------------------------------------------------------------


class EventCreateRequest(BaseModel):
    date: date
    title: Optional[str] = Field(None, max_length=200)
    start_time: Optional[datetime] = None
    notes: Optional[str] = None
    exercise_ids: list[uuid.UUID] = []


class EventScheduleRequest(BaseModel):
    template_id: uuid.UUID
    date: date
    title: Optional[str] = Field(None, max_length=200)
    start_time: Optional[datetime] = None
    notes: Optional[str] = None
    copy_exercises: bool = False


class EventUpdateRequest(BaseModel):
    """Partial update; explicit nulls clear the field."""

    title: Optional[str] = Field(None, max_length=200)
    start_time: Optional[datetime] = None
    notes: Optional[str] = None


class EventRescheduleRequest(BaseModel):
    date: date


class EventReorderRequest(ReorderRequest):
    date: date


class EventResponse(BaseModel):
    id: uuid.UUID
    title: Optional[str] = None
    display_title: str
    date: date
    start_time: Optional[datetime] = None
    notes: Optional[str] = None
    order: int
    workout_template_id: Optional[uuid.UUID] = None
    workout_exercises: list[LinkResponse] = []

    model_config = {"from_attributes": True}

    @field_validator("workout_exercises")
    @classmethod
    def sort_by_order(cls, value: list) -> list:
        return _by_order(value)


# -------------------------------------------------------------------------
# Calendar
# -------------------------------------------------------------------------


class CalendarDayResponse(BaseModel):
    date: date
    events: list[EventResponse]


class CalendarRangeResponse(BaseModel):
    start: date
    end: date
    days: list[CalendarDayResponse]
