"""Pytest configuration and fixtures for backend tests."""

from datetime import date
from typing import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy import StaticPool
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from gymlog.core.database import enable_sqlite_foreign_keys, get_db
from gymlog.main import app as main_app
from gymlog.models import Base, Exercise, ExerciseCategory, SubCategory, WorkoutEvent, WorkoutTemplate
from gymlog.services import ExerciseCatalog, SetTrackingService, WorkoutService


# -------------------------------------------------------------------------
# Database Fixtures
# -------------------------------------------------------------------------


@pytest.fixture
async def async_engine():
    """Create an async SQLite engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session_maker(async_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for testing."""
    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def app(session_maker: async_sessionmaker[AsyncSession]) -> FastAPI:
    """Create a FastAPI app instance with test database.

    Every request gets its own session, like ``get_db`` in production.
    """

    async def override_get_db():
        async with session_maker() as session:
            yield session

    main_app.dependency_overrides[get_db] = override_get_db
    yield main_app
    main_app.dependency_overrides.clear()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client for testing."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# -------------------------------------------------------------------------
# Service Fixtures
# -------------------------------------------------------------------------


@pytest.fixture
def catalog(db_session: AsyncSession) -> ExerciseCatalog:
    return ExerciseCatalog(db_session)


@pytest.fixture
def workouts(db_session: AsyncSession) -> WorkoutService:
    return WorkoutService(db_session)


@pytest.fixture
def tracking(db_session: AsyncSession) -> SetTrackingService:
    return SetTrackingService(db_session)


# -------------------------------------------------------------------------
# Workout Fixtures
# -------------------------------------------------------------------------


@pytest.fixture
async def bench_press(catalog: ExerciseCatalog) -> Exercise:
    return await catalog.create("Bench Press", ExerciseCategory.RESISTANCE, SubCategory.CHEST)


@pytest.fixture
async def running(catalog: ExerciseCatalog) -> Exercise:
    return await catalog.create("Running", ExerciseCategory.CARDIO)


@pytest.fixture
async def push_day(workouts: WorkoutService) -> WorkoutTemplate:
    return await workouts.create_template("Push Day")


@pytest.fixture
async def push_day_event(workouts: WorkoutService, push_day: WorkoutTemplate) -> WorkoutEvent:
    """Push Day scheduled on 2025-11-20."""
    return await workouts.schedule_event(push_day, date(2025, 11, 20))
