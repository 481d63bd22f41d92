"""FastAPI application factory with lifespan management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from manamerge.api.dependencies import set_engine_manager
from manamerge.api.engine_manager import EngineManager
from manamerge.api.routes import api_router
from manamerge.config import GameConfig
from manamerge.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(config: GameConfig | None = None) -> FastAPI:
    """Build and return the fully-configured FastAPI application."""
    if config is None:
        config = GameConfig()

    _config = config

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(_config.log_level)
        manager = EngineManager(_config)
        set_engine_manager(manager)
        manager.start()
        logger.info("API server started — game running (save file: %s).", _config.save_path)
        yield
        manager.stop()
        set_engine_manager(None)
        logger.info("API server shutting down.")

    app = FastAPI(
        title="Mana Merge",
        description=(
            "Local control plane for the Mana Merge simulation core.\n\n"
            "## API Groups\n\n"
            "- **State** — Live game state: board, economy, log, reward feed, shop, upgrades\n"
            "- **Actions** — Player intents: move, summon, purge, shuffle, items, regions, upgrades\n"
            "- **Control** — Engine lifecycle: start, pause, resume, save, reset\n"
            "- **Config** — Read-only game configuration\n"
        ),
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "State", "description": "Live game state polled by the client."},
            {"name": "Actions", "description": "Player intents. Rejections return 409 with a reason code."},
            {"name": "Control", "description": "Engine lifecycle controls and manual save."},
            {"name": "Config", "description": "Read-only game configuration parameters."},
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
