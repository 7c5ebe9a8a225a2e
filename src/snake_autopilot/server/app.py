"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from snake_autopilot.commentary import TextGenerator
from snake_autopilot.server.game_manager import GameManager
from snake_autopilot.server.routes import router
from snake_autopilot.server.websocket import ws_router


def create_app(generate: TextGenerator | None = None) -> FastAPI:
    """Build and return the FastAPI application.

    *generate* is the optional commentary backend handed to the
    :class:`GameManager`.
    """

    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        app.state.game_manager = GameManager(generate)
        yield
        await app.state.game_manager.cleanup()

    app = FastAPI(
        title="Snake Autopilot API", version="0.1.0", lifespan=_lifespan,
    )
    app.include_router(router)
    app.include_router(ws_router)
    return app
