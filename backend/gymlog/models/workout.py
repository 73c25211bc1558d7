"""Workout template, workout event and workout exercise link models."""

import datetime as dt
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional, Union

from sqlalchemy import Boolean, CheckConstraint, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gymlog.core.exceptions import OwnershipError
from gymlog.models.base import BaseModel
from gymlog.models.sets import SetRecord, TargetSet

if TYPE_CHECKING:
    from gymlog.models.exercise import Exercise

UNTITLED_WORKOUT = "Untitled Workout"


class WorkoutCategory(str, Enum):
    """Category of a workout template."""

    RESISTANCE = "resistance"
    CARDIO = "cardio"
    OTHER = "other"


class TargetMode(str, Enum):
    """How targets are tracked for a workout exercise."""

    SIMPLE = "simple"
    ADVANCED = "advanced"


@dataclass(frozen=True)
class TemplateOwner:
    id: uuid.UUID


@dataclass(frozen=True)
class EventOwner:
    id: uuid.UUID


Owner = Union[TemplateOwner, EventOwner]


class WorkoutTemplate(BaseModel):
    """Reusable, named workout definition."""

    __tablename__ = "workout_templates"

    title: Mapped[str] = mapped_column(String(200))
    order: Mapped[int] = mapped_column(Integer, default=0, index=True)
    category: Mapped[str] = mapped_column(
        String(20),
        default=WorkoutCategory.RESISTANCE.value,
        index=True,
    )

    workout_exercises: Mapped[list["WorkoutExercise"]] = relationship(
        "WorkoutExercise",
        back_populates="workout_template",
        cascade="all, delete-orphan",
        order_by="WorkoutExercise.order",
        lazy="selectin",
    )

    @property
    def is_category_locked(self) -> bool:
        return len(self.workout_exercises) > 0

    def __repr__(self) -> str:
        return f"<WorkoutTemplate(id={self.id}, title={self.title}, order={self.order})>"


class WorkoutEvent(BaseModel):
    """A workout occurring on a specific date."""

    __tablename__ = "workout_events"

    title: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    date: Mapped[dt.date] = mapped_column(Date, index=True)
    start_time: Mapped[Optional[dt.datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    order: Mapped[int] = mapped_column(Integer, default=0)

    workout_template_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("workout_templates.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    workout_template: Mapped[Optional["WorkoutTemplate"]] = relationship(
        "WorkoutTemplate",
        lazy="selectin",
    )
    workout_exercises: Mapped[list["WorkoutExercise"]] = relationship(
        "WorkoutExercise",
        back_populates="workout_event",
        cascade="all, delete-orphan",
        order_by="WorkoutExercise.order",
        lazy="selectin",
    )

    @property
    def display_title(self) -> str:
        if self.title:
            return self.title
        if self.workout_template is not None:
            return self.workout_template.title
        return UNTITLED_WORKOUT

    def __repr__(self) -> str:
        return f"<WorkoutEvent(id={self.id}, date={self.date}, order={self.order})>"


class WorkoutExercise(BaseModel):
    """Links one exercise to exactly one template or event."""

    __tablename__ = "workout_exercises"
    __table_args__ = (
        CheckConstraint(
            "(workout_template_id IS NULL) <> (workout_event_id IS NULL)",
            name="ck_workout_exercises_single_owner",
        ),
    )

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    target_note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    target_mode: Mapped[str] = mapped_column(String(20), default=TargetMode.SIMPLE.value)
    order: Mapped[int] = mapped_column(Integer, default=0)
    is_completed: Mapped[bool] = mapped_column(Boolean, default=False)

    exercise_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("exercises.id", ondelete="RESTRICT"),
        index=True,
    )
    workout_template_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("workout_templates.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    workout_event_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("workout_events.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    exercise: Mapped["Exercise"] = relationship("Exercise", lazy="selectin")
    workout_template: Mapped[Optional["WorkoutTemplate"]] = relationship(
        "WorkoutTemplate",
        back_populates="workout_exercises",
        lazy="selectin",
    )
    workout_event: Mapped[Optional["WorkoutEvent"]] = relationship(
        "WorkoutEvent",
        back_populates="workout_exercises",
        lazy="selectin",
    )
    target_sets: Mapped[list[TargetSet]] = relationship(
        TargetSet,
        back_populates="workout_exercise",
        cascade="all, delete-orphan",
        order_by=TargetSet.order,
        lazy="selectin",
    )
    sets: Mapped[list[SetRecord]] = relationship(
        SetRecord,
        back_populates="workout_exercise",
        cascade="all, delete-orphan",
        order_by=SetRecord.order,
        lazy="selectin",
    )

    @classmethod
    def for_owner(
        cls,
        owner: Union[WorkoutTemplate, WorkoutEvent],
        exercise: "Exercise",
        **fields,
    ) -> "WorkoutExercise":
        """Build a link attached to ``owner`` on both sides of the relationship."""
        if isinstance(owner, WorkoutTemplate):
            link = cls(exercise=exercise, workout_template=owner, workout_event=None, **fields)
        elif isinstance(owner, WorkoutEvent):
            link = cls(exercise=exercise, workout_template=None, workout_event=owner, **fields)
        else:
            raise OwnershipError(f"Cannot attach a workout exercise to {owner!r}")
        link.target_sets = []
        link.sets = []
        return link

    @property
    def owner(self) -> Owner:
        """The owning template or event as a tagged variant."""
        parent = self.owner_entity
        if isinstance(parent, WorkoutTemplate):
            return TemplateOwner(parent.id)
        return EventOwner(parent.id)

    @property
    def owner_entity(self) -> Union[WorkoutTemplate, WorkoutEvent]:
        has_template = self.workout_template is not None
        has_event = self.workout_event is not None
        if has_template == has_event:
            raise OwnershipError(
                f"Workout exercise {self.id} must belong to exactly one template or event"
            )
        return self.workout_template if has_template else self.workout_event

    @property
    def set_date(self) -> Optional[dt.date]:
        """Date new set records are stamped with, if the link belongs to an event."""
        if self.workout_event is not None:
            return self.workout_event.date
        return None

    def __repr__(self) -> str:
        return f"<WorkoutExercise(id={self.id}, exercise_id={self.exercise_id}, order={self.order})>"
