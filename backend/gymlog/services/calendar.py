"""Calendar day index over workout events."""

from collections import defaultdict
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gymlog.models import WorkoutEvent


class CalendarIndex:
    """Read-only queries grouping events by their calendar day."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def events_on(self, day: date) -> list[WorkoutEvent]:
        """Events of one day in their per-day order."""
        result = await self.session.execute(
            select(WorkoutEvent)
            .where(WorkoutEvent.date == day)
            .order_by(WorkoutEvent.order.asc(), WorkoutEvent.created_at.asc())
        )
        return list(result.scalars().all())

    async def events_between(self, start: date, end: date) -> dict[date, list[WorkoutEvent]]:
        """Events in ``[start, end]`` keyed by day; days without events are absent.

        Raises:
            ValueError: If ``end`` is before ``start``.
        """
        if end < start:
            raise ValueError(f"Range end {end} is before start {start}")

        result = await self.session.execute(
            select(WorkoutEvent)
            .where(WorkoutEvent.date >= start, WorkoutEvent.date <= end)
            .order_by(
                WorkoutEvent.date.asc(),
                WorkoutEvent.order.asc(),
                WorkoutEvent.created_at.asc(),
            )
        )
        by_day: dict[date, list[WorkoutEvent]] = defaultdict(list)
        for event in result.scalars().all():
            by_day[event.date].append(event)
        return dict(by_day)

    async def days_with_events(self, start: date, end: date) -> list[date]:
        if end < start:
            raise ValueError(f"Range end {end} is before start {start}")
        result = await self.session.execute(
            select(WorkoutEvent.date)
            .where(WorkoutEvent.date >= start, WorkoutEvent.date <= end)
            .distinct()
            .order_by(WorkoutEvent.date.asc())
        )
        return list(result.scalars().all())
