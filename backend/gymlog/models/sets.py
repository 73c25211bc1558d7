"""Target set and performed set record models."""

import uuid
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gymlog.models.base import BaseModel, utcnow

if TYPE_CHECKING:
    from gymlog.models.workout import WorkoutExercise


class SetType(str, Enum):
    """Training modality of a logged set."""

    RESISTANCE = "resistance"
    CARDIO = "cardio"
    BODYWEIGHT = "bodyweight"


class WorkoutAttribute(str, Enum):
    """Numeric attribute a set can carry."""

    WEIGHT = "weight"
    REPS = "reps"
    RPE = "rpe"
    DURATION = "duration"
    DISTANCE = "distance"
    RESISTANCE = "resistance"
    HEART_RATE = "heart_rate"

    @property
    def label(self) -> str:
        return _ATTRIBUTE_LABELS[self]


_ATTRIBUTE_LABELS = {
    WorkoutAttribute.WEIGHT: "Weight",
    WorkoutAttribute.REPS: "Reps",
    WorkoutAttribute.RPE: "RPE",
    WorkoutAttribute.DURATION: "Duration",
    WorkoutAttribute.DISTANCE: "Distance",
    WorkoutAttribute.RESISTANCE: "Resistance",
    WorkoutAttribute.HEART_RATE: "Heart Rate",
}

_RELEVANT_ATTRIBUTES = {
    SetType.RESISTANCE: (
        WorkoutAttribute.WEIGHT,
        WorkoutAttribute.REPS,
        WorkoutAttribute.RPE,
    ),
    SetType.CARDIO: (
        WorkoutAttribute.DURATION,
        WorkoutAttribute.DISTANCE,
        WorkoutAttribute.HEART_RATE,
        WorkoutAttribute.RESISTANCE,
    ),
    SetType.BODYWEIGHT: (
        WorkoutAttribute.REPS,
        WorkoutAttribute.RPE,
    ),
}

# Attribute values that are stored as integers
INTEGER_ATTRIBUTES = frozenset({WorkoutAttribute.REPS, WorkoutAttribute.HEART_RATE})

MAX_RPE = 10.0


def relevant_attributes(set_type: SetType | str) -> list[WorkoutAttribute]:
    """Attributes an editor should surface for a set of the given type."""
    return list(_RELEVANT_ATTRIBUTES[SetType(set_type)])


class TargetSet(BaseModel):
    """Planned performance for one set position of a workout exercise."""

    __tablename__ = "target_sets"

    workout_exercise_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("workout_exercises.id", ondelete="CASCADE"),
        index=True,
    )
    order: Mapped[int] = mapped_column(Integer, default=0)

    weight: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    reps: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    rpe: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    duration: Mapped[Optional[float]] = mapped_column(Float, nullable=True)  # seconds
    distance: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    resistance: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    heart_rate: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    workout_exercise: Mapped["WorkoutExercise"] = relationship(
        "WorkoutExercise",
        back_populates="target_sets",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<TargetSet(id={self.id}, order={self.order})>"


class SetRecord(BaseModel):
    """One performed set, with the targets it was planned against."""

    __tablename__ = "set_records"

    workout_exercise_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("workout_exercises.id", ondelete="CASCADE"),
        index=True,
    )
    type: Mapped[str] = mapped_column(String(20), default=SetType.RESISTANCE.value)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    order: Mapped[int] = mapped_column(Integer, default=0)
    is_tracked: Mapped[bool] = mapped_column(Boolean, default=True)

    # Actual values
    weight: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    reps: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    rpe: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    duration: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    distance: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    resistance: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    heart_rate: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # Target echo values
    target_weight: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    target_reps: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    target_rpe: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    target_duration: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    target_distance: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    target_resistance: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    target_heart_rate: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    workout_exercise: Mapped["WorkoutExercise"] = relationship(
        "WorkoutExercise",
        back_populates="sets",
        lazy="selectin",
    )

    @property
    def set_type(self) -> SetType:
        return SetType(self.type)

    @property
    def is_synced(self) -> bool:
        """True when every actual value equals its target echo."""
        return all(
            getattr(self, attribute.value) == getattr(self, f"target_{attribute.value}")
            for attribute in WorkoutAttribute
        )

    def __repr__(self) -> str:
        return f"<SetRecord(id={self.id}, type={self.type}, order={self.order})>"
