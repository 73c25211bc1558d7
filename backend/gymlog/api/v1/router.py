"""API v1 router aggregating all endpoint routers.

Catalog:
  /api/v1/exercises (list/filter, create, patch, delete, seed)

Workouts:
  /api/v1/templates (CRUD, reorder, exercises)
  /api/v1/events (ad hoc, schedule, patch, reschedule, reorder, exercises)

Tracking:
  /api/v1/links (sync, sets, target sets, toggle completed)
  /api/v1/sets (patch, apply targets, delete)
  /api/v1/target-sets (patch, delete)

Calendar:
  /api/v1/calendar (range, day)
"""

from fastapi import APIRouter

from gymlog.api.v1.endpoints import (
    calendar,
    events,
    exercises,
    links,
    sets,
    target_sets,
    templates,
)

api_router = APIRouter()

# -------------------------------------------------------------------------
# Exercise Catalog
# -------------------------------------------------------------------------
api_router.include_router(exercises.router, prefix="/exercises", tags=["exercises"])

# -------------------------------------------------------------------------
# Templates & Events
# -------------------------------------------------------------------------
api_router.include_router(templates.router, prefix="/templates", tags=["templates"])
api_router.include_router(events.router, prefix="/events", tags=["events"])

# -------------------------------------------------------------------------
# Set Tracking
# -------------------------------------------------------------------------
api_router.include_router(links.router, prefix="/links", tags=["links"])
api_router.include_router(sets.router, prefix="/sets", tags=["sets"])
api_router.include_router(target_sets.router, prefix="/target-sets", tags=["target-sets"])

# -------------------------------------------------------------------------
# Calendar
# -------------------------------------------------------------------------
api_router.include_router(calendar.router, prefix="/calendar", tags=["calendar"])
