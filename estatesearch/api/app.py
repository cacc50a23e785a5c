"""FastAPI application factory for the listing store API."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from estatesearch import __version__
from estatesearch.api.routes.health import router as health_router
from estatesearch.api.routes.listing import router as listing_router
from estatesearch.config.settings import Settings, get_settings
from estatesearch.errors import ListingNotFoundError
from estatesearch.storage.listing_store import ListingStore
from estatesearch.storage.schema import initialize_database

logger = logging.getLogger(__name__)


async def _listing_not_found(request: Request, exc: ListingNotFoundError) -> JSONResponse:
    logger.debug("Listing lookup miss: %s", exc.listing_id)
    return JSONResponse(status_code=404, content={"detail": "Listing not found"})


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the listing API around one database.

    The schema is created on startup if missing. Routes reach the store
    through ``request.app.state.listing_store`` and the paging limits
    through ``request.app.state.settings``.
    """
    settings = settings or get_settings()
    initialize_database(settings.db_path)

    app = FastAPI(
        title="estatesearch listing API",
        version=__version__,
        description="Filtered, paged listing queries for the property search page",
    )
    app.state.settings = settings
    app.state.listing_store = ListingStore(settings.db_path)

    app.add_exception_handler(ListingNotFoundError, _listing_not_found)
    app.include_router(health_router)
    app.include_router(listing_router)

    logger.info("Listing API ready (db=%s, page_size=%d)", settings.db_path, settings.search.page_size)
    return app
