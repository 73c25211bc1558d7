"""Exercise catalog model."""

from enum import Enum
from typing import Optional

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from gymlog.models.base import BaseModel
from gymlog.models.sets import SetType


class ExerciseCategory(str, Enum):
    """Training modality of a catalog exercise."""

    RESISTANCE = "resistance"
    CARDIO = "cardio"
    BODYWEIGHT = "bodyweight"
    OTHER = "other"


class SubCategory(str, Enum):
    """Muscle group an exercise mainly trains."""

    CHEST = "chest"
    SHOULDERS = "shoulders"
    LEGS = "legs"
    BACK = "back"
    BICEPS = "biceps"
    TRICEPS = "triceps"
    ABS = "abs"


class Exercise(BaseModel):
    """A named movement in the exercise catalog."""

    __tablename__ = "exercises"

    # Uniqueness is an exact, case-sensitive match
    name: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    category: Mapped[str] = mapped_column(
        String(20),
        default=ExerciseCategory.RESISTANCE.value,
        index=True,
    )
    sub_category: Mapped[Optional[str]] = mapped_column(String(20), nullable=True, index=True)
    is_bodyweight: Mapped[bool] = mapped_column(Boolean, default=False)

    @property
    def set_type(self) -> SetType:
        """Set type used for records logged against this exercise."""
        if self.category == ExerciseCategory.CARDIO.value:
            return SetType.CARDIO
        if self.category == ExerciseCategory.BODYWEIGHT.value or self.is_bodyweight:
            return SetType.BODYWEIGHT
        return SetType.RESISTANCE

    def __repr__(self) -> str:
        return f"<Exercise(id={self.id}, name={self.name}, category={self.category})>"
