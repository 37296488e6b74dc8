"""
FastAPI Production Application

Main entry point for the Showroom Dashboard API.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
import structlog

from showroom.config import SourceKind, get_settings
from showroom.config.logging import configure_logging
from showroom.database.connection import close_database, init_database
from showroom.orchestration import DashboardPipeline
from showroom.serving.api import create_api_app

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings = get_settings()
    configure_logging()

    logger.info("Starting Showroom Dashboard API", source=settings.dashboard.source.value)

    uses_database = settings.dashboard.source == SourceKind.DATABASE
    if uses_database:
        try:
            await init_database()
        except Exception as e:
            # Fetches fail until the database is reachable; the API stays up
            logger.warning("Database init failed", error=str(e))

    app.state.pipeline = DashboardPipeline.from_settings(settings)

    # The dashboard loads once on start
    await app.state.pipeline.refresh()

    yield

    logger.info("Shutting down...")
    if uses_database:
        await close_database()


app = create_api_app(lifespan=lifespan)


@app.get("/api/v1/info")
async def api_info():
    """API information endpoint."""
    settings = get_settings()
    return {
        "name": "Showroom Dashboard API",
        "version": settings.version,
        "environment": settings.app_env,
        "source": settings.dashboard.source.value,
        "failure_policy": settings.dashboard.failure_policy.value,
        "documentation": "/docs",
    }


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
