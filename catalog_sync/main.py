"""Catalog Sync API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map CatalogSyncError to structured JSON responses
    - Database and remote clients initialized on startup, released on shutdown
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from catalog_sync.api.error_handlers import register_error_handlers
from catalog_sync.api.routes import health, sales, synchronization
from catalog_sync.config import get_settings
from catalog_sync.infrastructure import database
from catalog_sync.infrastructure.http_clients import (
    close_remote_clients, init_remote_clients,
)
from catalog_sync.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    init_remote_clients(settings)
    logger.info("Catalog Sync API started")
    yield
    logger.info("Catalog Sync API shutting down")
    await close_remote_clients()
    if database.db_manager:
        await database.db_manager.dispose()


app = FastAPI(
    title="Catalog Sync API", version="1.0.0", lifespan=lifespan,
)

app.include_router(health.router)
app.include_router(synchronization.router)
app.include_router(sales.router)

register_error_handlers(app)
