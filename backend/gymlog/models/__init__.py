"""Database models for gymlog."""

from gymlog.models.base import Base, BaseModel
from gymlog.models.app_flag import AppFlag
from gymlog.models.sets import SetRecord, SetType, TargetSet, WorkoutAttribute, relevant_attributes
from gymlog.models.exercise import Exercise, ExerciseCategory, SubCategory
from gymlog.models.workout import (
    EventOwner,
    Owner,
    TargetMode,
    TemplateOwner,
    WorkoutCategory,
    WorkoutEvent,
    WorkoutExercise,
    WorkoutTemplate,
)

__all__ = [
    # Base
    "Base",
    "BaseModel",
    "AppFlag",
    # Catalog
    "Exercise",
    "ExerciseCategory",
    "SubCategory",
    # Sets
    "SetRecord",
    "SetType",
    "TargetSet",
    "WorkoutAttribute",
    "relevant_attributes",
    # Workouts
    "EventOwner",
    "Owner",
    "TargetMode",
    "TemplateOwner",
    "WorkoutCategory",
    "WorkoutEvent",
    "WorkoutExercise",
    "WorkoutTemplate",
]
