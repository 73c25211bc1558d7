"""Workout template, event and link authoring."""

import logging
import uuid
from datetime import date, datetime, timezone
from typing import Iterable, Optional, Sequence, Union

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from gymlog.core.database import load_relationships, transaction
from gymlog.core.exceptions import CategoryLockedError, NotFoundError, OwnershipError
from gymlog.models import (
    EventOwner,
    Exercise,
    Owner,
    TargetMode,
    TemplateOwner,
    WorkoutCategory,
    WorkoutEvent,
    WorkoutExercise,
    WorkoutTemplate,
)
from gymlog.services.calendar import CalendarIndex
from gymlog.services.deletion import (
    DeletionReport,
    stage_event_deletion,
    stage_link_deletion,
    stage_template_deletion,
)
from gymlog.services.ordering import move, move_within_scope, ordered, reindex
from gymlog.services.tracking import (
    ACTUAL_FIELDS,
    append_missing_entries,
    load_link,
    new_target_set,
)

logger = logging.getLogger(__name__)

_UNSET = object()

OwnerEntity = Union[WorkoutTemplate, WorkoutEvent]


class WorkoutService:
    """Create, reorder and delete templates, events and their exercise links."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.calendar = CalendarIndex(session)

    # -------------------------------------------------------------------------
    # Templates
    # -------------------------------------------------------------------------

    async def get_template(self, template_id: uuid.UUID) -> WorkoutTemplate:
        template = await self.session.get(WorkoutTemplate, template_id)
        if template is None:
            raise NotFoundError("WorkoutTemplate", template_id)
        return template

    async def list_templates(
        self,
        category: WorkoutCategory | str | None = None,
    ) -> list[WorkoutTemplate]:
        query = select(WorkoutTemplate)
        if category is not None:
            query = query.where(WorkoutTemplate.category == WorkoutCategory(category).value)
        query = query.order_by(WorkoutTemplate.order.asc(), WorkoutTemplate.created_at.asc())
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def count_templates(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(WorkoutTemplate))
        return result.scalar() or 0

    async def create_template(
        self,
        title: str,
        category: WorkoutCategory | str = WorkoutCategory.RESISTANCE,
    ) -> WorkoutTemplate:
        """Append a new template to the end of the global template order."""
        category = WorkoutCategory(category)
        position = await self.count_templates()
        template = WorkoutTemplate(
            title=title,
            category=category.value,
            order=position,
            workout_exercises=[],
        )

        async with transaction(self.session, "template.create"):
            self.session.add(template)

        logger.info(f"Created template '{title}' at position {position}")
        return template

    async def update_template(
        self,
        template: WorkoutTemplate,
        title: Optional[str] = None,
        category: WorkoutCategory | str | None = None,
    ) -> WorkoutTemplate:
        """Rename a template or change its category.

        Raises:
            CategoryLockedError: If the category changes while exercises are attached.
        """
        if category is not None:
            category = WorkoutCategory(category)
            if category.value != template.category and template.is_category_locked:
                raise CategoryLockedError(
                    f"Template '{template.title}' has exercises; its category is locked"
                )

        async with transaction(self.session, "template.update", restore=[template]):
            if title is not None:
                template.title = title
            if category is not None:
                template.category = category.value
        return template

    async def reorder_templates(
        self,
        from_indices: Iterable[int],
        to_index: int,
        category: WorkoutCategory | str | None = None,
    ) -> list[WorkoutTemplate]:
        """Move templates in the global order.

        With ``category`` the indices address only that category's templates;
        templates of other categories keep their positions.

        Returns:
            All templates in their new order.
        """
        from_indices = list(from_indices)
        templates = await self.list_templates()
        if category is None:
            reordered = move(templates, from_indices, to_index)
        else:
            scope = WorkoutCategory(category).value
            reordered = move_within_scope(
                templates, lambda t: t.category == scope, from_indices, to_index
            )

        async with transaction(self.session, "template.reorder", restore=templates):
            reindex(reordered)
        return reordered

    async def delete_template(self, template: WorkoutTemplate) -> DeletionReport:
        """Delete a template with its links; events made from it are detached."""
        remaining = [t for t in await self.list_templates() if t.id != template.id]
        report = DeletionReport()

        async with transaction(self.session, "template.delete", restore=[template, *remaining]):
            await stage_template_deletion(self.session, template, report)
            reindex(remaining)

        logger.info(f"Deleted template '{template.title}': {report.to_dict()}")
        return report

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    async def get_event(self, event_id: uuid.UUID) -> WorkoutEvent:
        event = await self.session.get(WorkoutEvent, event_id)
        if event is None:
            raise NotFoundError("WorkoutEvent", event_id)
        return event

    async def _count_events_on(self, day: date) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(WorkoutEvent).where(WorkoutEvent.date == day)
        )
        return result.scalar() or 0

    async def schedule_event(
        self,
        template: WorkoutTemplate,
        day: date,
        title: Optional[str] = None,
        start_time: Optional[datetime] = None,
        notes: Optional[str] = None,
        copy_exercises: bool = False,
    ) -> WorkoutEvent:
        """Put a template on the calendar.

        Args:
            template: Template the event is derived from.
            day: Calendar day of the event.
            title: Overrides the template title when set.
            start_time: Optional start timestamp.
            notes: Free-text notes.
            copy_exercises: Duplicate the template's links (with their target
                sets) onto the event and reconcile set records for each.

        Returns:
            The scheduled event, appended after the day's existing events.
        """
        position = await self._count_events_on(day)
        sources = []
        if copy_exercises:
            await load_relationships(self.session, template, "workout_exercises")
            sources = ordered(template.workout_exercises)
            for source in sources:
                await load_link(self.session, source)

        event = WorkoutEvent(
            title=title,
            date=day,
            start_time=start_time,
            notes=notes,
            order=position,
            workout_template=template,
            workout_exercises=[],
        )

        async with transaction(self.session, "event.schedule"):
            self.session.add(event)
            for source in sources:
                self._copy_link(source, event)

        logger.info(
            f"Scheduled '{template.title}' on {day.isoformat()} at position {position}"
            f"{' with exercises' if copy_exercises else ''}"
        )
        return event

    async def create_event(
        self,
        day: date,
        title: Optional[str] = None,
        exercises: Sequence[Exercise] = (),
        start_time: Optional[datetime] = None,
        notes: Optional[str] = None,
    ) -> WorkoutEvent:
        """Create an ad hoc event whose links follow the order of ``exercises``."""
        position = await self._count_events_on(day)
        event = WorkoutEvent(
            title=title,
            date=day,
            start_time=start_time,
            notes=notes,
            order=position,
            workout_template=None,
            workout_exercises=[],
        )

        async with transaction(self.session, "event.create"):
            self.session.add(event)
            for index, exercise in enumerate(exercises):
                self.session.add(WorkoutExercise.for_owner(event, exercise, order=index))

        logger.info(f"Created event on {day.isoformat()} with {len(exercises)} exercise(s)")
        return event

    async def update_event(
        self,
        event: WorkoutEvent,
        title=_UNSET,
        start_time=_UNSET,
        notes=_UNSET,
    ) -> WorkoutEvent:
        """Edit event details; pass ``None`` to clear a field."""
        async with transaction(self.session, "event.update", restore=[event]):
            if title is not _UNSET:
                event.title = title
            if start_time is not _UNSET:
                event.start_time = start_time
            if notes is not _UNSET:
                event.notes = notes
        return event

    async def reschedule_event(self, event: WorkoutEvent, new_day: date) -> WorkoutEvent:
        """Move an event to the end of another day and close the gap it leaves."""
        if event.date == new_day:
            return event

        source_day = await self.calendar.events_on(event.date)
        source_remaining = [e for e in source_day if e.id != event.id]
        destination = await self.calendar.events_on(new_day)
        old_day = event.date
        await load_relationships(self.session, event, "workout_exercises")
        for link in event.workout_exercises:
            await load_relationships(self.session, link, "sets")

        async with transaction(
            self.session, "event.reschedule", restore=[event, *source_remaining]
        ):
            event.date = new_day
            event.order = len(destination)
            reindex(source_remaining)
            for link in event.workout_exercises:
                for record in link.sets:
                    record.date = datetime.combine(new_day, record.date.time(), tzinfo=timezone.utc)

        logger.info(f"Rescheduled event {event.id} from {old_day} to {new_day}")
        return event

    async def reorder_events(
        self,
        day: date,
        from_indices: Iterable[int],
        to_index: int,
    ) -> list[WorkoutEvent]:
        from_indices = list(from_indices)
        events = await self.calendar.events_on(day)
        reordered = move(events, from_indices, to_index)

        async with transaction(self.session, "event.reorder", restore=events):
            reindex(reordered)
        return reordered

    async def delete_event(self, event: WorkoutEvent) -> DeletionReport:
        remaining = [
            e for e in await self.calendar.events_on(event.date) if e.id != event.id
        ]
        report = DeletionReport()

        async with transaction(self.session, "event.delete", restore=[event, *remaining]):
            await stage_event_deletion(self.session, event, report)
            reindex(remaining)

        logger.info(f"Deleted event {event.id} on {event.date}: {report.to_dict()}")
        return report

    # -------------------------------------------------------------------------
    # Links
    # -------------------------------------------------------------------------

    async def get_link(self, link_id: uuid.UUID) -> WorkoutExercise:
        link = await self.session.get(WorkoutExercise, link_id)
        if link is None:
            raise NotFoundError("WorkoutExercise", link_id)
        return link

    async def resolve_owner(self, owner: Owner) -> OwnerEntity:
        """Load the template or event a tagged owner points at."""
        if isinstance(owner, TemplateOwner):
            return await self.get_template(owner.id)
        if isinstance(owner, EventOwner):
            return await self.get_event(owner.id)
        raise OwnershipError(f"Unknown owner {owner!r}")

    async def add_exercise(
        self,
        owner: OwnerEntity,
        exercise: Exercise,
        notes: Optional[str] = None,
        target_note: Optional[str] = None,
        target_mode: TargetMode | str = TargetMode.SIMPLE,
    ) -> WorkoutExercise:
        """Append ``exercise`` to a template or event."""
        target_mode = TargetMode(target_mode)
        await load_relationships(self.session, owner, "workout_exercises")

        async with transaction(self.session, "link.create", restore=[owner]):
            link = WorkoutExercise.for_owner(
                owner,
                exercise,
                notes=notes,
                target_note=target_note,
                target_mode=target_mode.value,
                order=len(owner.workout_exercises),
            )
            self.session.add(link)

        logger.debug(f"Added '{exercise.name}' to {type(owner).__name__} {owner.id}")
        return link

    async def update_link(
        self,
        link: WorkoutExercise,
        notes=_UNSET,
        target_note=_UNSET,
        target_mode: TargetMode | str | None = None,
    ) -> WorkoutExercise:
        """Edit notes, the free-text target and the target mode in one commit."""
        if target_mode is not None:
            target_mode = TargetMode(target_mode)

        async with transaction(self.session, "link.update", restore=[link]):
            if notes is not _UNSET:
                link.notes = notes
            if target_note is not _UNSET:
                link.target_note = target_note
            if target_mode is not None:
                link.target_mode = target_mode.value
        return link

    async def reorder_links(
        self,
        owner: OwnerEntity,
        from_indices: Iterable[int],
        to_index: int,
    ) -> list[WorkoutExercise]:
        from_indices = list(from_indices)
        await load_relationships(self.session, owner, "workout_exercises")
        reordered = move(ordered(owner.workout_exercises), from_indices, to_index)

        async with transaction(self.session, "link.reorder", restore=[owner]):
            reindex(reordered)
        return reordered

    async def delete_link(self, link: WorkoutExercise) -> DeletionReport:
        """Delete a link with its sets and close the gap in its owner's order."""
        await load_link(self.session, link)
        owner = link.owner_entity
        await load_relationships(self.session, owner, "workout_exercises")
        report = DeletionReport()

        async with transaction(self.session, "link.delete", restore=[owner]):
            await stage_link_deletion(self.session, link, report)
            owner.workout_exercises.remove(link)
            reindex(ordered(owner.workout_exercises))

        logger.info(f"Deleted workout exercise {link.id}: {report.to_dict()}")
        return report

    def _copy_link(self, source: WorkoutExercise, event: WorkoutEvent) -> WorkoutExercise:
        link = WorkoutExercise.for_owner(
            event,
            source.exercise,
            notes=source.notes,
            target_note=source.target_note,
            target_mode=source.target_mode,
            order=source.order,
        )
        self.session.add(link)
        for target in ordered(source.target_sets):
            new_target_set(
                self.session,
                link,
                **{field: getattr(target, field) for field in ACTUAL_FIELDS},
            )
        append_missing_entries(self.session, link)
        return link
