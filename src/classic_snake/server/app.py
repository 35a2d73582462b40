"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from classic_snake.server.routes import router
from classic_snake.server.session_manager import SessionManager
from classic_snake.server.websocket import ws_router
from classic_snake.settings import Settings


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build and return the FastAPI application."""

    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        app.state.session_manager = SessionManager(settings=settings)
        yield
        await app.state.session_manager.cleanup()

    app = FastAPI(
        title="Classic Snake API", version="0.1.0", lifespan=_lifespan,
    )
    app.include_router(router)
    app.include_router(ws_router)
    return app
