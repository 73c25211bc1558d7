"""Async database engine, session factories and transaction helpers."""

import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncGenerator, AsyncIterator, Iterable

from sqlalchemy import event, inspect
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from gymlog.core.config import get_settings
from gymlog.core.exceptions import PersistenceError
from gymlog.models.base import Base
from gymlog.observability import get_metrics_backend

logger = logging.getLogger(__name__)
settings = get_settings()


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """Turn on foreign key enforcement for every SQLite connection."""
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def _ensure_sqlite_directory(database_url: str) -> None:
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite" or not url.database or url.database == ":memory:":
        return
    Path(url.database).parent.mkdir(parents=True, exist_ok=True)


engine = create_async_engine(
    settings.database_url,
    echo=settings.database_echo,
    connect_args={"check_same_thread": False} if "sqlite" in settings.database_url else {},
)
enable_sqlite_foreign_keys(engine)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def init_db(bind: AsyncEngine | None = None) -> None:
    """Create all tables that do not exist yet."""
    bind = bind or engine
    _ensure_sqlite_directory(str(bind.url))
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a database session."""
    async with async_session_maker() as session:
        yield session


@asynccontextmanager
async def get_db_context() -> AsyncIterator[AsyncSession]:
    """Database session for scripts and startup hooks."""
    async with async_session_maker() as session:
        yield session


async def load_relationships(session: AsyncSession, instance: Any, *attributes: str) -> None:
    """Load the named relationships of a persistent instance if not loaded yet.

    Eager loading stops at cycles (a set record's link does not get its
    ``sets`` loaded), and lazy loads cannot run under the async session.
    """
    state = inspect(instance)
    if not state.persistent:
        return
    missing = [name for name in attributes if name in state.unloaded]
    if missing:
        await session.refresh(instance, missing)


async def _restore(session: AsyncSession, instances: Iterable[Any]) -> None:
    for instance in instances:
        if instance is None:
            continue
        state = inspect(instance)
        if state.persistent:
            await session.refresh(instance)


@asynccontextmanager
async def transaction(
    session: AsyncSession,
    operation: str,
    restore: Iterable[Any] = (),
) -> AsyncIterator[AsyncSession]:
    """Run the enclosed mutations as a single all-or-nothing commit.

    On any failure the session is rolled back and the instances in
    ``restore`` are reloaded from the committed state. Store errors are
    logged and re-raised as ``PersistenceError``; other exceptions
    propagate unchanged.

    Args:
        session: Session the mutations are issued on.
        operation: Name used in logs and metrics.
        restore: Persistent instances to refresh after a rollback.

    New rows must be passed to ``session.add``; assigning the parent on a
    child does not cascade it into the session.
    """
    restore = list(restore)
    metrics = get_metrics_backend()
    start = time.perf_counter()
    try:
        yield session
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        await _restore(session, restore)
        metrics.observe_transaction(operation, False, (time.perf_counter() - start) * 1000)
        logger.exception(f"Transaction '{operation}' failed and was rolled back")
        raise PersistenceError(operation, e) from e
    except Exception:
        await session.rollback()
        await _restore(session, restore)
        metrics.observe_transaction(operation, False, (time.perf_counter() - start) * 1000)
        raise

    metrics.observe_transaction(operation, True, (time.perf_counter() - start) * 1000)
