"""Service layer for gymlog.

Services hold the workout logging rules and issue every mutation inside a
single store transaction.
"""

from gymlog.services.calendar import CalendarIndex
from gymlog.services.catalog import ExerciseCatalog
from gymlog.services.deletion import DeletionReport
from gymlog.services.seeding import seed_if_empty
from gymlog.services.tracking import SetTrackingService, SyncResult
from gymlog.services.workouts import WorkoutService

__all__ = [
    "CalendarIndex",
    "DeletionReport",
    "ExerciseCatalog",
    "SetTrackingService",
    "SyncResult",
    "WorkoutService",
    "seed_if_empty",
]
