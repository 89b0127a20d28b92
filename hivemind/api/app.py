"""FastAPI application factory with lifespan management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hivemind import __version__
from hivemind.api.dependencies import set_engine_manager
from hivemind.api.engine_manager import EngineManager
from hivemind.api.routes import api_router
from hivemind.config import HivemindConfig
from hivemind.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(config: HivemindConfig | None = None, autostart: bool = True) -> FastAPI:
    """Build and return the fully configured FastAPI application."""
    if config is None:
        config = HivemindConfig()

    _config = config

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(_config.log_level)
        manager = EngineManager(_config)
        set_engine_manager(manager)
        if autostart:
            manager.start()
        logger.info("API server started; colony loop %s.", "running" if autostart else "idle")
        yield
        manager.stop()
        logger.info("API server shutting down.")

    app = FastAPI(
        title="Hivemind Colony Core",
        description=(
            "Tick-based colony decision core running against an in-memory sandbox.\n\n"
            "## API Groups\n\n"
            "- **State** : creeps, hostiles, flags, colonies and lifecycle events\n"
            "- **Control** : loop lifecycle: start, pause, resume, step, reset\n"
            "- **Config** : read-only configuration\n"
        ),
        version=__version__,
        lifespan=lifespan,
        openapi_tags=[
            {"name": "State", "description": "Live state polled by clients: creeps, directives, overlords, events."},
            {"name": "Control", "description": "Loop lifecycle controls: start, pause, resume, single-step and reset."},
            {"name": "Config", "description": "Read-only configuration parameters."},
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
