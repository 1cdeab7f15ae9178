"""FastAPI server exposing the health checks."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from healthchecker import __version__
from healthchecker.config import Settings, settings as default_settings
from healthchecker.service import HealthService, build_service
from healthchecker.api.health_routes import health_router

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    service: HealthService | None = None,
) -> FastAPI:
    """Build the app. A prebuilt ``service`` skips settings-driven wiring (tests)."""
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = service is None
        app.state.settings = settings
        app.state.health_service = service or build_service(settings)
        logger.info(
            "Health service ready: %d checks from %d plugins",
            len(app.state.health_service.runner.checks),
            len(app.state.health_service.plugins),
        )

        yield

        # Shutdown
        if owned:
            app.state.health_service.close()

    app = FastAPI(
        title="Health Checker",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router, prefix="/api")
    return app
