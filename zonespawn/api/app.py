"""FastAPI application factory with lifespan management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from zonespawn.api.dependencies import set_engine_manager
from zonespawn.api.engine_manager import EngineManager
from zonespawn.api.routes import api_router
from zonespawn.config import SpawnerConfig
from zonespawn.core.interfaces import ConfigProvider
from zonespawn.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(
    config: SpawnerConfig | None = None,
    provider: ConfigProvider | None = None,
    autostart: bool = True,
) -> FastAPI:
    """Build and return the fully-configured FastAPI application."""
    if config is None:
        config = SpawnerConfig()

    _config = config

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(_config.log_level)
        manager = EngineManager(_config, provider)
        set_engine_manager(manager)
        if autostart:
            manager.start()
        logger.info("API server started — spawner %s.", "running" if autostart else "stopped")
        yield
        manager.stop()
        set_engine_manager(None)
        logger.info("API server shutting down.")

    app = FastAPI(
        title="Zone Spawn Engine",
        description=(
            "Proximity-triggered zone spawner running against a sandbox world.\n\n"
            "## API Groups\n\n"
            "- **State** — Zone states, entity counts and the event feed\n"
            "- **Control** — Lifecycle: start, pause, resume, step, reset, toggle, despawn\n"
            "- **Config** — Host configuration and configuration-generation reloads\n"
            "- **Observers** — Inspect and place sandbox observers\n"
        ),
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "State", "description": "Live spawner state polled by clients."},
            {"name": "Control", "description": "Spawner lifecycle controls and manual despawns."},
            {"name": "Config", "description": "Read host configuration; post a new tier/zone/settings snapshot."},
            {"name": "Observers", "description": "Sandbox observers that trigger zones."},
        ],
    )

    # CORS: allow any origin in dev
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    return app
