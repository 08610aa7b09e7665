"""FastAPI application wiring for the guild simulation."""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from guildhall.api import routes
from guildhall.api.runtime import ApiState, build_state
from guildhall.config import get_settings

logger = logging.getLogger(__name__)


def create_app(*, state_factory: Callable[[], ApiState] = build_state) -> FastAPI:
    """Build the guild API; the lifespan owns one game session per process.

    Startup reports the save slots on disk and, with ``persist_quicksave``
    enabled, resumes the quick save. Shutdown quick-saves the live campaign
    under the same setting.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        state = state_factory()
        app.state.api_state = state
        await state.startup()
        logger.info("guild API ready (campaign loaded: %s)", state.session.has_campaign)
        try:
            yield
        finally:
            await state.shutdown()

    app = FastAPI(title="Guildhall API", version="0.1.0", lifespan=lifespan)
    settings = get_settings()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(routes.router)
    return app


app = create_app()
