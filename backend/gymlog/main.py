"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

import gymlog.models  # noqa: F401  (registers tables on Base.metadata)
from gymlog.api.v1.router import api_router
from gymlog.core.config import get_settings
from gymlog.core.database import get_db_context, init_db
from gymlog.observability import RequestLoggingMiddleware, configure_logging, get_metrics_backend
from gymlog.services.seeding import seed_on_startup

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan events."""
    # Startup
    configure_logging(settings.log_level)
    await init_db()
    if settings.seed_default_exercises:
        async with get_db_context() as session:
            await seed_on_startup(session)
    logger.info(f"{settings.app_name} {settings.app_version} started")
    yield
    # Shutdown


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    openapi_url=f"{settings.api_prefix}/openapi.json",
    docs_url=f"{settings.api_prefix}/docs",
    redoc_url=f"{settings.api_prefix}/redoc",
    lifespan=lifespan,
)

metrics_backend = get_metrics_backend()

app.add_middleware(RequestLoggingMiddleware, metrics=metrics_backend)

# Include API router
app.include_router(api_router, prefix=settings.api_prefix)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "version": settings.app_version}


@app.get("/metrics", include_in_schema=False)
async def metrics() -> PlainTextResponse:
    """Prometheus-style metrics endpoint."""
    return PlainTextResponse(metrics_backend.render_prometheus())
