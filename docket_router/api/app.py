"""FastAPI application factory with lifespan management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from docket_router.api.dependencies import reset_engine_manager, set_engine_manager
from docket_router.api.engine_manager import EngineManager
from docket_router.api.routes import api_router
from docket_router.config import SessionConfig
from docket_router.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(config: SessionConfig | None = None) -> FastAPI:
    """Build and return the fully-configured FastAPI application."""
    if config is None:
        config = SessionConfig()

    _config = config

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(_config.log_level)
        manager = EngineManager(_config)
        set_engine_manager(manager)
        logger.info("API server started — waiting for a difficulty selection.")
        yield
        reset_engine_manager()
        manager.stop()
        logger.info("API server shutting down.")

    app = FastAPI(
        title="Docket Router",
        description=(
            "Real-time routing puzzle engine.\n\n"
            "## API Groups\n\n"
            "- **State** — Live session state: score, life, timer, tokens, feedback\n"
            "- **Grid** — Switch directions and valid directions per cell\n"
            "- **Control** — Session lifecycle and player input (rotate / click)\n"
            "- **Config** — Session configuration and difficulty profiles\n"
        ),
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "State", "description": "Live session state polled by the frontend every frame."},
            {"name": "Grid", "description": "Switch grid: current direction and valid directions of every cell."},
            {"name": "Control", "description": "Start, pause, resume, single-step and restart; rotate a switch or click the board."},
            {"name": "Config", "description": "Read-only session configuration and the difficulty table."},
        ],
    )

    # CORS — allow any origin in dev
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)
    return app
