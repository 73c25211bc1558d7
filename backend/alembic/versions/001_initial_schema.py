"""Initial gymlog schema.

Revision ID: 001_initial
Revises:
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def _set_values(prefix: str = "") -> list[sa.Column]:
    return [
        sa.Column(f"{prefix}weight", sa.Float(), nullable=True),
        sa.Column(f"{prefix}reps", sa.Integer(), nullable=True),
        sa.Column(f"{prefix}rpe", sa.Float(), nullable=True),
        sa.Column(f"{prefix}duration", sa.Float(), nullable=True),
        sa.Column(f"{prefix}distance", sa.Float(), nullable=True),
        sa.Column(f"{prefix}resistance", sa.Float(), nullable=True),
        sa.Column(f"{prefix}heart_rate", sa.Integer(), nullable=True),
    ]


def upgrade() -> None:
    # -------------------------------------------------------------------------
    # App Flags
    # -------------------------------------------------------------------------
    op.create_table(
        "app_flags",
        sa.Column("key", sa.String(length=100), nullable=False),
        sa.Column("value", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("key"),
    )

    # -------------------------------------------------------------------------
    # Exercise Catalog
    # -------------------------------------------------------------------------
    op.create_table(
        "exercises",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("category", sa.String(length=20), nullable=False),
        sa.Column("sub_category", sa.String(length=20), nullable=True),
        sa.Column("is_bodyweight", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_exercises_name", "exercises", ["name"], unique=True)
    op.create_index("ix_exercises_category", "exercises", ["category"])
    op.create_index("ix_exercises_sub_category", "exercises", ["sub_category"])

    # -------------------------------------------------------------------------
    # Templates & Events
    # -------------------------------------------------------------------------
    op.create_table(
        "workout_templates",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.Column("category", sa.String(length=20), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_workout_templates_order", "workout_templates", ["order"])
    op.create_index("ix_workout_templates_category", "workout_templates", ["category"])

    op.create_table(
        "workout_events",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=True),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.Column("workout_template_id", sa.Uuid(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["workout_template_id"], ["workout_templates.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_workout_events_date", "workout_events", ["date"])
    op.create_index("ix_workout_events_workout_template_id", "workout_events", ["workout_template_id"])

    # -------------------------------------------------------------------------
    # Workout Exercise Links
    # -------------------------------------------------------------------------
    op.create_table(
        "workout_exercises",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("target_note", sa.Text(), nullable=True),
        sa.Column("target_mode", sa.String(length=20), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.Column("is_completed", sa.Boolean(), nullable=False),
        sa.Column("exercise_id", sa.Uuid(), nullable=False),
        sa.Column("workout_template_id", sa.Uuid(), nullable=True),
        sa.Column("workout_event_id", sa.Uuid(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "(workout_template_id IS NULL) <> (workout_event_id IS NULL)",
            name="ck_workout_exercises_single_owner",
        ),
        sa.ForeignKeyConstraint(["exercise_id"], ["exercises.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["workout_template_id"], ["workout_templates.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["workout_event_id"], ["workout_events.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_workout_exercises_exercise_id", "workout_exercises", ["exercise_id"])
    op.create_index("ix_workout_exercises_workout_template_id", "workout_exercises", ["workout_template_id"])
    op.create_index("ix_workout_exercises_workout_event_id", "workout_exercises", ["workout_event_id"])

    # -------------------------------------------------------------------------
    # Target Sets & Set Records
    # -------------------------------------------------------------------------
    op.create_table(
        "target_sets",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("workout_exercise_id", sa.Uuid(), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
        *_set_values(),
        *_timestamps(),
        sa.ForeignKeyConstraint(["workout_exercise_id"], ["workout_exercises.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_target_sets_workout_exercise_id", "target_sets", ["workout_exercise_id"])

    op.create_table(
        "set_records",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("workout_exercise_id", sa.Uuid(), nullable=False),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.Column("is_tracked", sa.Boolean(), nullable=False),
        *_set_values(),
        *_set_values("target_"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["workout_exercise_id"], ["workout_exercises.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_set_records_workout_exercise_id", "set_records", ["workout_exercise_id"])


def downgrade() -> None:
    op.drop_table("set_records")
    op.drop_table("target_sets")
    op.drop_table("workout_exercises")
    op.drop_table("workout_events")
    op.drop_table("workout_templates")
    op.drop_table("exercises")
    op.drop_table("app_flags")
