"""Explicit cascade-delete routines.

Each routine deletes owned children before the parent and only stages the
deletes on the session; callers wrap them in one ``transaction`` so a
cascade either commits completely or not at all.
"""

import logging
from dataclasses import asdict, dataclass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gymlog.core.database import load_relationships
from gymlog.models import WorkoutEvent, WorkoutExercise, WorkoutTemplate

logger = logging.getLogger(__name__)


@dataclass
class DeletionReport:
    """Number of entities removed (or detached) by one delete operation."""

    templates: int = 0
    events: int = 0
    workout_exercises: int = 0
    target_sets: int = 0
    set_records: int = 0
    exercises: int = 0
    detached_events: int = 0

    @property
    def total(self) -> int:
        return (
            self.templates
            + self.events
            + self.workout_exercises
            + self.target_sets
            + self.set_records
            + self.exercises
        )

    def to_dict(self) -> dict[str, int]:
        return {**asdict(self), "total": self.total}


async def stage_link_deletion(
    session: AsyncSession,
    link: WorkoutExercise,
    report: DeletionReport,
) -> None:
    """Stage deletion of a link, its target sets and its set records."""
    await load_relationships(session, link, "target_sets", "sets")
    for target in list(link.target_sets):
        await session.delete(target)
        report.target_sets += 1
    for record in list(link.sets):
        await session.delete(record)
        report.set_records += 1
    await session.delete(link)
    report.workout_exercises += 1


async def stage_template_deletion(
    session: AsyncSession,
    template: WorkoutTemplate,
    report: DeletionReport,
) -> None:
    """Stage deletion of a template and everything it owns.

    Events scheduled from the template are kept; their template reference
    is cleared so they fall back to their own title and exercises.
    """
    result = await session.execute(
        select(WorkoutEvent).where(WorkoutEvent.workout_template_id == template.id)
    )
    for event in result.scalars().all():
        event.workout_template = None
        report.detached_events += 1

    await load_relationships(session, template, "workout_exercises")
    for link in list(template.workout_exercises):
        await stage_link_deletion(session, link, report)
    await session.delete(template)
    report.templates += 1
    logger.debug(f"Staged deletion of template {template.id}: {report.to_dict()}")


async def stage_event_deletion(
    session: AsyncSession,
    event: WorkoutEvent,
    report: DeletionReport,
) -> None:
    """Stage deletion of an event and everything it owns."""
    await load_relationships(session, event, "workout_exercises")
    for link in list(event.workout_exercises):
        await stage_link_deletion(session, link, report)
    await session.delete(event)
    report.events += 1
    logger.debug(f"Staged deletion of event {event.id}: {report.to_dict()}")
