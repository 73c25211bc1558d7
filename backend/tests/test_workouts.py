"""Tests for template, event and link authoring, reordering and deletion."""

import uuid
from datetime import date, datetime, timezone
from unittest.mock import patch

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, OperationalError

from gymlog.core.exceptions import (
    CategoryLockedError,
    InvalidReorderError,
    NotFoundError,
    OwnershipError,
    PersistenceError,
)
from gymlog.models import (
    EventOwner,
    Exercise,
    SetRecord,
    TargetMode,
    TargetSet,
    TemplateOwner,
    WorkoutCategory,
    WorkoutEvent,
    WorkoutExercise,
    WorkoutTemplate,
)
from gymlog.models.workout import UNTITLED_WORKOUT
from gymlog.services import ExerciseCatalog, SetTrackingService, WorkoutService
from gymlog.services.ordering import ordered

NOV_20 = date(2025, 11, 20)
NOV_21 = date(2025, 11, 21)


async def count_rows(session, model) -> int:
    return await session.scalar(select(func.count()).select_from(model))


class TestTemplates:
    """Tests for template authoring."""

    async def test_templates_append_in_order(self, workouts: WorkoutService):
        titles = ["Push Day", "Pull Day", "Leg Day"]
        for title in titles:
            await workouts.create_template(title)

        templates = await workouts.list_templates()

        assert [t.title for t in templates] == titles
        assert [t.order for t in templates] == [0, 1, 2]

    async def test_list_by_category(self, workouts: WorkoutService):
        await workouts.create_template("Push Day")
        await workouts.create_template("Easy Run", WorkoutCategory.CARDIO)

        cardio = await workouts.list_templates("cardio")

        assert [t.title for t in cardio] == ["Easy Run"]

    async def test_category_locked_with_exercises(
        self,
        workouts: WorkoutService,
        push_day: WorkoutTemplate,
        bench_press: Exercise,
    ):
        await workouts.update_template(push_day, category=WorkoutCategory.OTHER)
        assert push_day.category == "other"

        await workouts.add_exercise(push_day, bench_press)

        with pytest.raises(CategoryLockedError):
            await workouts.update_template(push_day, category=WorkoutCategory.CARDIO)
        await workouts.update_template(push_day, title="Push Day A")
        assert push_day.title == "Push Day A"

    async def test_get_missing_template(self, workouts: WorkoutService):
        with pytest.raises(NotFoundError):
            await workouts.get_template(uuid.uuid4())


class TestReorder:
    """Tests for the reorder protocol on templates, links and events."""

    async def test_reorder_templates_reindexes(self, workouts: WorkoutService):
        for title in ["A", "B", "C", "D"]:
            await workouts.create_template(title)

        await workouts.reorder_templates([0], 3)

        templates = await workouts.list_templates()
        assert [t.title for t in templates] == ["B", "C", "A", "D"]
        assert [t.order for t in templates] == [0, 1, 2, 3]

    async def test_scoped_reorder_keeps_other_categories(self, workouts: WorkoutService):
        await workouts.create_template("R1")
        await workouts.create_template("C1", WorkoutCategory.CARDIO)
        await workouts.create_template("R2")
        await workouts.create_template("C2", WorkoutCategory.CARDIO)
        await workouts.create_template("R3")

        await workouts.reorder_templates([2], 0, category=WorkoutCategory.RESISTANCE)

        templates = await workouts.list_templates()
        assert [t.title for t in templates] == ["R3", "C1", "R1", "C2", "R2"]
        assert [t.order for t in templates] == [0, 1, 2, 3, 4]
        cardio = await workouts.list_templates(WorkoutCategory.CARDIO)
        assert [t.title for t in cardio] == ["C1", "C2"]

    async def test_invalid_reorder_changes_nothing(self, workouts: WorkoutService):
        for title in ["A", "B"]:
            await workouts.create_template(title)

        with pytest.raises(InvalidReorderError):
            await workouts.reorder_templates([5], 0)

        assert [t.title for t in await workouts.list_templates()] == ["A", "B"]

    async def test_reorder_links(
        self,
        workouts: WorkoutService,
        catalog: ExerciseCatalog,
        push_day: WorkoutTemplate,
    ):
        names = ["Bench Press", "Overhead Press", "Lateral Raise"]
        for name in names:
            await workouts.add_exercise(push_day, await catalog.create(name))

        reordered = await workouts.reorder_links(push_day, [0, 1], 3)

        assert [link.exercise.name for link in reordered] == [
            "Lateral Raise",
            "Bench Press",
            "Overhead Press",
        ]
        assert [link.order for link in ordered(push_day.workout_exercises)] == [0, 1, 2]

    async def test_reorder_events_within_day(
        self,
        workouts: WorkoutService,
        push_day: WorkoutTemplate,
    ):
        first = await workouts.schedule_event(push_day, NOV_20, title="Morning")
        second = await workouts.create_event(NOV_20, title="Evening")
        other_day = await workouts.create_event(NOV_21)

        await workouts.reorder_events(NOV_20, [1], 0)

        day = await workouts.calendar.events_on(NOV_20)
        assert [e.id for e in day] == [second.id, first.id]
        assert [e.order for e in day] == [0, 1]
        assert other_day.order == 0


class TestEvents:
    """Tests for scheduling and editing events."""

    async def test_schedule_appends_per_day(self, workouts: WorkoutService, push_day: WorkoutTemplate):
        a = await workouts.schedule_event(push_day, NOV_20)
        b = await workouts.schedule_event(push_day, NOV_20)
        c = await workouts.schedule_event(push_day, NOV_21)

        assert (a.order, b.order, c.order) == (0, 1, 0)
        assert a.display_title == "Push Day"

    async def test_title_override_and_untitled(self, workouts: WorkoutService, push_day: WorkoutTemplate):
        scheduled = await workouts.schedule_event(push_day, NOV_20, title="Heavy Push")
        ad_hoc = await workouts.create_event(NOV_20)

        assert scheduled.display_title == "Heavy Push"
        assert ad_hoc.display_title == UNTITLED_WORKOUT

    async def test_create_event_links_in_given_order(
        self,
        workouts: WorkoutService,
        bench_press: Exercise,
        running: Exercise,
    ):
        event = await workouts.create_event(NOV_20, title="Mixed", exercises=[running, bench_press])

        links = ordered(event.workout_exercises)
        assert [link.exercise.name for link in links] == ["Running", "Bench Press"]
        assert [link.order for link in links] == [0, 1]
        assert all(link.owner == EventOwner(event.id) for link in links)

    async def test_schedule_with_copied_exercises(
        self,
        workouts: WorkoutService,
        tracking: SetTrackingService,
        push_day: WorkoutTemplate,
        bench_press: Exercise,
    ):
        template_link = await workouts.add_exercise(push_day, bench_press, target_note="3x5")
        for _ in range(3):
            target = await tracking.add_target_set(template_link)
            await tracking.update_target_set(target, weight=100, reps=5)

        event = await workouts.schedule_event(push_day, NOV_20, copy_exercises=True)

        assert len(event.workout_exercises) == 1
        link = event.workout_exercises[0]
        assert link.id != template_link.id
        assert link.target_note == "3x5"
        assert len(link.target_sets) == len(link.sets) == 3
        assert all(r.target_weight == 100.0 for r in link.sets)
        assert all(r.date.date() == NOV_20 for r in link.sets)
        assert len(template_link.sets) == 0

    async def test_update_event_clears_fields(self, workouts: WorkoutService, push_day: WorkoutTemplate):
        event = await workouts.schedule_event(push_day, NOV_20, notes="felt good")
        start = datetime(2025, 11, 20, 7, 30, tzinfo=timezone.utc)

        await workouts.update_event(event, start_time=start, notes=None)

        assert event.start_time == start
        assert event.notes is None

    async def test_reschedule_moves_to_end_and_closes_gap(
        self,
        workouts: WorkoutService,
        push_day: WorkoutTemplate,
    ):
        a = await workouts.schedule_event(push_day, NOV_20)
        b = await workouts.schedule_event(push_day, NOV_20)
        c = await workouts.schedule_event(push_day, NOV_21)

        await workouts.reschedule_event(a, NOV_21)

        assert (a.date, a.order) == (NOV_21, 1)
        assert b.order == 0
        assert c.order == 0


class TestLinks:
    """Tests for workout exercise links and their single owner."""

    async def test_links_append_per_owner(
        self,
        workouts: WorkoutService,
        push_day: WorkoutTemplate,
        bench_press: Exercise,
        running: Exercise,
    ):
        first = await workouts.add_exercise(push_day, bench_press)
        second = await workouts.add_exercise(push_day, running)

        assert (first.order, second.order) == (0, 1)
        assert first.owner == TemplateOwner(push_day.id)
        assert first.owner_entity is push_day

    async def test_resolve_owner(
        self,
        workouts: WorkoutService,
        push_day: WorkoutTemplate,
        push_day_event: WorkoutEvent,
    ):
        assert await workouts.resolve_owner(TemplateOwner(push_day.id)) is push_day
        assert await workouts.resolve_owner(EventOwner(push_day_event.id)) is push_day_event

    async def test_link_without_owner_is_rejected_by_store(
        self,
        db_session,
        bench_press: Exercise,
    ):
        db_session.add(WorkoutExercise(exercise=bench_press, order=0))

        with pytest.raises(IntegrityError):
            await db_session.commit()
        await db_session.rollback()

    async def test_update_link_is_all_or_nothing(
        self,
        db_session,
        workouts: WorkoutService,
        push_day: WorkoutTemplate,
        bench_press: Exercise,
    ):
        link = await workouts.add_exercise(push_day, bench_press)
        error = OperationalError("UPDATE", {}, Exception("database is locked"))

        with patch.object(db_session, "commit", side_effect=error):
            with pytest.raises(PersistenceError):
                await workouts.update_link(link, notes="pause reps", target_mode="advanced")

        assert link.notes is None
        assert link.target_mode == TargetMode.SIMPLE.value

        await workouts.update_link(link, notes="pause reps", target_mode="advanced")
        assert (link.notes, link.target_mode) == ("pause reps", TargetMode.ADVANCED.value)

    def test_owner_of_detached_link_raises(self):
        with pytest.raises(OwnershipError):
            WorkoutExercise(order=0).owner

    async def test_delete_link_reindexes_owner(
        self,
        db_session,
        workouts: WorkoutService,
        tracking: SetTrackingService,
        catalog: ExerciseCatalog,
        push_day: WorkoutTemplate,
    ):
        links = [
            await workouts.add_exercise(push_day, await catalog.create(name))
            for name in ["A", "B", "C"]
        ]
        await tracking.add_set(links[1])
        await tracking.sync_set_counts(links[1])

        report = await workouts.delete_link(links[1])

        assert (report.workout_exercises, report.target_sets, report.set_records) == (1, 1, 1)
        remaining = ordered(push_day.workout_exercises)
        assert [link.id for link in remaining] == [links[0].id, links[2].id]
        assert [link.order for link in remaining] == [0, 1]
        assert await count_rows(db_session, SetRecord) == 0
        assert await count_rows(db_session, TargetSet) == 0


class TestDeletion:
    """Tests for explicit cascade deletion."""

    async def test_template_cascade_counts(
        self,
        db_session,
        workouts: WorkoutService,
        tracking: SetTrackingService,
        catalog: ExerciseCatalog,
        push_day: WorkoutTemplate,
    ):
        k, m = 3, 2
        for index in range(k):
            link = await workouts.add_exercise(push_day, await catalog.create(f"Lift {index}"))
            for _ in range(m):
                await tracking.add_set(link)
            await tracking.sync_set_counts(link)

        report = await workouts.delete_template(push_day)

        assert report.templates == 1
        assert report.workout_exercises == k
        assert report.target_sets == k * m
        assert report.set_records == k * m
        assert report.total == 1 + k + 2 * k * m
        assert await count_rows(db_session, WorkoutTemplate) == 0
        assert await count_rows(db_session, WorkoutExercise) == 0
        assert await count_rows(db_session, TargetSet) == 0
        assert await count_rows(db_session, SetRecord) == 0
        assert await catalog.count() == k

    async def test_template_delete_detaches_events_and_reindexes(
        self,
        db_session,
        workouts: WorkoutService,
        push_day: WorkoutTemplate,
        push_day_event: WorkoutEvent,
    ):
        pull_day = await workouts.create_template("Pull Day")

        report = await workouts.delete_template(push_day)

        assert report.detached_events == 1
        event = await workouts.get_event(push_day_event.id)
        assert event.workout_template_id is None
        assert event.display_title == UNTITLED_WORKOUT
        assert pull_day.order == 0

    async def test_event_delete_cascades_and_reindexes_day(
        self,
        db_session,
        workouts: WorkoutService,
        tracking: SetTrackingService,
        push_day: WorkoutTemplate,
        bench_press: Exercise,
    ):
        first = await workouts.schedule_event(push_day, NOV_20)
        second = await workouts.schedule_event(push_day, NOV_20)
        link = await workouts.add_exercise(first, bench_press)
        await tracking.add_set(link)

        report = await workouts.delete_event(first)

        assert (report.events, report.workout_exercises, report.set_records) == (1, 1, 1)
        assert second.order == 0
        assert await count_rows(db_session, WorkoutEvent) == 1
        assert await count_rows(db_session, SetRecord) == 0
        assert await count_rows(db_session, WorkoutTemplate) == 1

    async def test_failed_delete_keeps_everything(
        self,
        db_session,
        workouts: WorkoutService,
        tracking: SetTrackingService,
        push_day: WorkoutTemplate,
        bench_press: Exercise,
    ):
        link = await workouts.add_exercise(push_day, bench_press)
        await tracking.add_set(link)
        error = OperationalError("DELETE", {}, Exception("database is locked"))

        with patch.object(db_session, "commit", side_effect=error):
            with pytest.raises(PersistenceError):
                await workouts.delete_template(push_day)

        assert await count_rows(db_session, WorkoutTemplate) == 1
        assert await count_rows(db_session, WorkoutExercise) == 1
        assert await count_rows(db_session, SetRecord) == 1


class TestStoredState:
    """Tests reading back and mutating rows through a separate session."""

    async def test_new_links_are_stored(
        self,
        session_maker,
        workouts: WorkoutService,
        push_day: WorkoutTemplate,
        bench_press: Exercise,
        running: Exercise,
    ):
        await workouts.add_exercise(push_day, bench_press)
        event = await workouts.create_event(NOV_20, exercises=[bench_press, running])

        async with session_maker() as session:
            result = await session.execute(
                select(WorkoutExercise)
                .where(WorkoutExercise.workout_event_id == event.id)
                .order_by(WorkoutExercise.order)
            )
            stored = result.scalars().all()
            assert [link.exercise.name for link in stored] == ["Bench Press", "Running"]
            assert await count_rows(session, WorkoutExercise) == 3

    async def test_copied_exercises_are_stored(
        self,
        session_maker,
        workouts: WorkoutService,
        tracking: SetTrackingService,
        push_day: WorkoutTemplate,
        bench_press: Exercise,
    ):
        template_link = await workouts.add_exercise(push_day, bench_press)
        for _ in range(2):
            await tracking.add_target_set(template_link)

        event = await workouts.schedule_event(push_day, NOV_20, copy_exercises=True)

        async with session_maker() as session:
            stored = await WorkoutService(session).get_event(event.id)
            link = stored.workout_exercises[0]
            assert [t.order for t in ordered(link.target_sets)] == [0, 1]
            assert [r.order for r in ordered(link.sets)] == [0, 1]
            assert await count_rows(session, TargetSet) == 4
            assert await count_rows(session, SetRecord) == 2

    async def test_template_cascade_from_new_session(
        self,
        session_maker,
        workouts: WorkoutService,
        tracking: SetTrackingService,
        catalog: ExerciseCatalog,
        push_day: WorkoutTemplate,
    ):
        k, m = 3, 2
        for index in range(k):
            link = await workouts.add_exercise(push_day, await catalog.create(f"Lift {index}"))
            for _ in range(m):
                await tracking.add_set(link)
            await tracking.sync_set_counts(link)

        async with session_maker() as session:
            assert await count_rows(session, WorkoutExercise) == k
            assert await count_rows(session, TargetSet) == k * m
            assert await count_rows(session, SetRecord) == k * m

        async with session_maker() as session:
            service = WorkoutService(session)
            report = await service.delete_template(await service.get_template(push_day.id))

        assert report.total == 1 + k + 2 * k * m

        async with session_maker() as session:
            assert await count_rows(session, WorkoutTemplate) == 0
            assert await count_rows(session, WorkoutExercise) == 0
            assert await count_rows(session, TargetSet) == 0
            assert await count_rows(session, SetRecord) == 0

    async def test_delete_link_from_new_session(
        self,
        session_maker,
        workouts: WorkoutService,
        tracking: SetTrackingService,
        catalog: ExerciseCatalog,
        push_day: WorkoutTemplate,
    ):
        links = [
            await workouts.add_exercise(push_day, await catalog.create(name))
            for name in ["Squat", "Deadlift", "Row"]
        ]
        await tracking.add_set(links[0])

        async with session_maker() as session:
            service = WorkoutService(session)
            report = await service.delete_link(await service.get_link(links[0].id))

        assert (report.workout_exercises, report.set_records) == (1, 1)

        async with session_maker() as session:
            template = await WorkoutService(session).get_template(push_day.id)
            remaining = ordered(template.workout_exercises)
            assert [link.id for link in remaining] == [links[1].id, links[2].id]
            assert [link.order for link in remaining] == [0, 1]
            assert await count_rows(session, SetRecord) == 0

    async def test_add_exercise_to_template_loaded_from_link(
        self,
        session_maker,
        workouts: WorkoutService,
        push_day: WorkoutTemplate,
        bench_press: Exercise,
        running: Exercise,
    ):
        first = await workouts.add_exercise(push_day, bench_press)

        async with session_maker() as session:
            service = WorkoutService(session)
            link = await service.get_link(first.id)
            exercise = await ExerciseCatalog(session).get(running.id)
            second = await service.add_exercise(link.owner_entity, exercise)

        assert second.order == 1
