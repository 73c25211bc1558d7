"""Set tracking for workout exercise links.

Covers reconciling target sets against performed set records, logging
sets, editing their values and keeping per-link ordering dense.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, time, timezone
from typing import Iterable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from gymlog.core.database import load_relationships, transaction
from gymlog.core.exceptions import NotFoundError
from gymlog.models import SetRecord, TargetMode, TargetSet, WorkoutAttribute, WorkoutExercise
from gymlog.models.base import utcnow
from gymlog.models.sets import INTEGER_ATTRIBUTES, MAX_RPE
from gymlog.services.ordering import move, ordered, reindex, validate_move

logger = logging.getLogger(__name__)

_UNSET = object()

ACTUAL_FIELDS = tuple(attribute.value for attribute in WorkoutAttribute)
TARGET_ECHO_FIELDS = tuple(f"target_{field}" for field in ACTUAL_FIELDS)
_RPE_FIELDS = frozenset({"rpe", "target_rpe"})
_INTEGER_FIELDS = frozenset(
    {attribute.value for attribute in INTEGER_ATTRIBUTES}
    | {f"target_{attribute.value}" for attribute in INTEGER_ATTRIBUTES}
)


@dataclass
class SyncResult:
    """Entries appended by one reconciliation pass."""

    added_target_sets: int = 0
    added_set_records: int = 0

    @property
    def changed(self) -> bool:
        return bool(self.added_target_sets or self.added_set_records)


def _record_date(link: WorkoutExercise) -> datetime:
    day = link.set_date
    if day is None:
        return utcnow()
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def echo_target(record: SetRecord, target: Optional[TargetSet]) -> None:
    """Copy a target set's planned values onto a record's target fields."""
    for field in ACTUAL_FIELDS:
        setattr(record, f"target_{field}", getattr(target, field) if target is not None else None)


def new_set_record(session: AsyncSession, link: WorkoutExercise) -> SetRecord:
    """Append a default set record to ``link`` at the next position."""
    position = len(link.sets)
    record = SetRecord(
        workout_exercise=link,
        type=link.exercise.set_type.value,
        date=_record_date(link),
        order=position,
        is_tracked=True,
    )
    targets = ordered(link.target_sets)
    echo_target(record, targets[position] if position < len(targets) else None)
    session.add(record)
    return record


def new_target_set(session: AsyncSession, link: WorkoutExercise, **values) -> TargetSet:
    """Append a target set to ``link`` at the next position."""
    target = TargetSet(workout_exercise=link, order=len(link.target_sets), **values)
    session.add(target)
    return target


def append_missing_entries(session: AsyncSession, link: WorkoutExercise) -> SyncResult:
    """Grow the shorter of target sets / set records to the longer one.

    Only appends; nothing existing is removed or reordered.
    """
    result = SyncResult()
    max_count = max(len(link.target_sets), len(link.sets))
    while len(link.target_sets) < max_count:
        new_target_set(session, link)
        result.added_target_sets += 1
    while len(link.sets) < max_count:
        new_set_record(session, link)
        result.added_set_records += 1
    return result


async def load_link(session: AsyncSession, link: WorkoutExercise) -> WorkoutExercise:
    """Make sure a link's sets, target sets and owner are loaded."""
    await load_relationships(
        session, link, "sets", "target_sets", "exercise", "workout_template", "workout_event"
    )
    return link


def _clean_values(values: dict, allowed: Iterable[str]) -> dict:
    allowed = set(allowed)
    unknown = set(values) - allowed
    if unknown:
        raise ValueError(f"Unknown set fields: {', '.join(sorted(unknown))}")

    cleaned = {}
    for field, value in values.items():
        if value is None:
            cleaned[field] = None
            continue
        if value < 0:
            raise ValueError(f"{field} must not be negative")
        if field in _RPE_FIELDS:
            value = min(float(value), MAX_RPE)
        elif field in _INTEGER_FIELDS:
            if value != int(value):
                raise ValueError(f"{field} must be a whole number, got {value}")
            value = int(value)
        else:
            value = float(value)
        cleaned[field] = value
    return cleaned


class SetTrackingService:
    """Logging and reconciliation of sets for workout exercise links."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_set(self, set_id: uuid.UUID) -> SetRecord:
        record = await self.session.get(SetRecord, set_id)
        if record is None:
            raise NotFoundError("SetRecord", set_id)
        return record

    async def get_target_set(self, target_set_id: uuid.UUID) -> TargetSet:
        target = await self.session.get(TargetSet, target_set_id)
        if target is None:
            raise NotFoundError("TargetSet", target_set_id)
        return target

    async def sync_set_counts(self, link: WorkoutExercise) -> SyncResult:
        """Equalize the number of target sets and set records of ``link``.

        No-op when the counts already match. Otherwise empty target sets and
        default set records (typed from the exercise, dated from the owning
        event or now) are appended until both lists reach the larger count.
        """
        await load_link(self.session, link)
        if len(link.target_sets) == len(link.sets):
            return SyncResult()

        async with transaction(self.session, "link.sync_set_counts", restore=[link]):
            result = append_missing_entries(self.session, link)

        logger.info(
            f"Reconciled link {link.id}: +{result.added_target_sets} target sets, "
            f"+{result.added_set_records} set records"
        )
        return result

    async def add_set(self, link: WorkoutExercise) -> SetRecord:
        """Log one more set for ``link`` at ``order = count(sets)``."""
        await load_link(self.session, link)
        async with transaction(self.session, "link.add_set", restore=[link]):
            record = new_set_record(self.session, link)
        return record

    async def add_target_set(self, link: WorkoutExercise) -> TargetSet:
        await load_link(self.session, link)
        async with transaction(self.session, "link.add_target_set", restore=[link]):
            target = new_target_set(self.session, link)
        return target

    async def update_set(self, record: SetRecord, **values) -> SetRecord:
        """Write actual/target values (and ``is_tracked``) of a set record.

        RPE values are capped at 10.

        Raises:
            ValueError: On unknown field names, negative values or a
                fractional value for a whole-number field.
        """
        is_tracked = values.pop("is_tracked", None)
        cleaned = _clean_values(values, ACTUAL_FIELDS + TARGET_ECHO_FIELDS)

        async with transaction(self.session, "set.update", restore=[record]):
            for field, value in cleaned.items():
                setattr(record, field, value)
            if is_tracked is not None:
                record.is_tracked = bool(is_tracked)
        return record

    async def update_target_set(self, target: TargetSet, **values) -> TargetSet:
        """Write planned values; the set record at the same position echoes them."""
        cleaned = _clean_values(values, ACTUAL_FIELDS)
        await load_relationships(self.session, target, "workout_exercise")
        link = await load_link(self.session, target.workout_exercise)

        async with transaction(self.session, "target_set.update", restore=[target, link]):
            for field, value in cleaned.items():
                setattr(target, field, value)
            self._echo_all(link)
        return target

    async def apply_targets(self, record: SetRecord) -> SetRecord:
        """Copy a record's target values onto its actual values."""
        async with transaction(self.session, "set.apply_targets", restore=[record]):
            for field in ACTUAL_FIELDS:
                setattr(record, field, getattr(record, f"target_{field}"))
        return record

    async def delete_set(self, record: SetRecord) -> None:
        await load_relationships(self.session, record, "workout_exercise")
        link = await load_link(self.session, record.workout_exercise)

        async with transaction(self.session, "set.delete", restore=[link]):
            link.sets.remove(record)
            await self.session.delete(record)
            reindex(ordered(link.sets))

    async def delete_target_set(self, target: TargetSet) -> None:
        await load_relationships(self.session, target, "workout_exercise")
        link = await load_link(self.session, target.workout_exercise)

        async with transaction(self.session, "target_set.delete", restore=[link]):
            link.target_sets.remove(target)
            await self.session.delete(target)
            reindex(ordered(link.target_sets))
            self._echo_all(link)

    async def reorder_target_sets(
        self,
        link: WorkoutExercise,
        from_indices: Iterable[int],
        to_index: int,
    ) -> list[TargetSet]:
        """Move target sets within ``link`` and re-index them 0..N-1."""
        from_indices = list(from_indices)
        await load_link(self.session, link)
        current = ordered(link.target_sets)
        validate_move(len(current), from_indices, to_index)
        reordered = move(current, from_indices, to_index)

        async with transaction(self.session, "target_set.reorder", restore=[link]):
            reindex(reordered)
            self._echo_all(link)
        return reordered

    async def toggle_completed(self, link: WorkoutExercise) -> WorkoutExercise:
        async with transaction(self.session, "link.toggle_completed", restore=[link]):
            link.is_completed = not link.is_completed
        return link

    async def set_target_mode(
        self,
        link: WorkoutExercise,
        mode: TargetMode | str,
        target_note=_UNSET,
    ) -> WorkoutExercise:
        """Switch between a free-text target and structured target sets.

        The inactive representation is left untouched.
        """
        mode = TargetMode(mode)
        async with transaction(self.session, "link.target_mode", restore=[link]):
            link.target_mode = mode.value
            if target_note is not _UNSET:
                link.target_note = target_note
        return link

    @staticmethod
    def _echo_all(link: WorkoutExercise) -> None:
        targets = ordered(link.target_sets)
        for position, record in enumerate(ordered(link.sets)):
            echo_target(record, targets[position] if position < len(targets) else None)
