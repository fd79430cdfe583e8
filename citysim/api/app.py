"""FastAPI application factory with lifespan management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from citysim.api.dependencies import set_engine_manager
from citysim.api.engine_manager import EngineManager
from citysim.api.routes import api_router
from citysim.config import SimulationConfig
from citysim.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(config: SimulationConfig | None = None, autostart: bool = True) -> FastAPI:
    """Build and return the fully-configured FastAPI application."""
    if config is None:
        config = SimulationConfig()

    _config = config

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(_config.log_level, _config.log_file)
        manager = EngineManager(_config, save_path=_config.save_file, saves_dir=_config.saves_dir)
        set_engine_manager(manager)
        if autostart:
            manager.start()
        logger.info("API server started, city ticking every %.1fs.", manager.tick_rate)
        yield
        manager.stop()
        manager.save()
        set_engine_manager(None)
        logger.info("API server shutting down.")

    app = FastAPI(
        title="City Simulation Engine",
        description=(
            "Deterministic city-building simulation core.\n\n"
            "## API Groups\n\n"
            "- **State** — Live city stats, quests, goal and news feed\n"
            "- **Map** — Grid tiles plus the land value and population density lenses\n"
            "- **Commands** — Place, demolish, upgrade, decorate, undo/redo, claim rewards, pathfinding\n"
            "- **Control** — Tick timer lifecycle: start, pause, resume, step, reset, save\n"
            "- **Config** — Read-only configuration and building catalog\n"
            "- **Saves** — Named save slots: list, create, save, load, delete\n"
        ),
        version="0.1.0",
        lifespan=lifespan,
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
