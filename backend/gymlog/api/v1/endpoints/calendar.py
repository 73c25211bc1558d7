"""Calendar endpoints grouping events by day."""

from datetime import date

from fastapi import APIRouter, Query

from gymlog.api.v1.deps import Calendar, http_error
from gymlog.api.v1.schemas import CalendarRangeResponse, EventResponse

router = APIRouter()


@router.get("", response_model=CalendarRangeResponse)
async def get_calendar_range(
    calendar: Calendar,
    start: date = Query(..., description="First day (inclusive)"),
    end: date = Query(..., description="Last day (inclusive)"),
):
    """Days in the range that have events, each with its ordered events."""
    try:
        by_day = await calendar.events_between(start, end)
    except ValueError as e:
        raise http_error(e) from e

    return {
        "start": start,
        "end": end,
        "days": [{"date": day, "events": events} for day, events in sorted(by_day.items())],
    }


@router.get("/{day}", response_model=list[EventResponse])
async def get_calendar_day(day: date, calendar: Calendar):
    """Events of one day in their per-day order."""
    return await calendar.events_on(day)
