"""FastAPI JSON API for PaperSift."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from papersift.config import Settings
from papersift.gui.routers import catalog, common, search
from papersift.gui.state import state
from papersift.services.session import SearchSession
from papersift.services.transport import make_transport

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the API app; *settings* defaults to the loaded singleton."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Create transport + session and build the catalog on startup."""
        state.settings = settings or Settings.load()
        state.transport = make_transport(
            state.settings.data_root, timeout=state.settings.fetch_timeout
        )
        state.session = SearchSession(state.transport, state.settings)
        await state.session.discover()
        logger.info("Catalog ready: %d collections", len(state.session.catalog))
        try:
            yield
        finally:
            await state.transport.aclose()
            state.transport = None
            state.session = None

    app = FastAPI(title="PaperSift", lifespan=lifespan)
    app.include_router(common.router)
    app.include_router(catalog.router, prefix="/api")
    app.include_router(search.router, prefix="/api")
    return app


app = create_app()
