"""Recital API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map RecitalError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager
    - Bootstrap admin ensured on startup when configured, so a fresh
      deployment has one token that passes the admin gates

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Error handlers live in api/error_handlers.py and are registered once here
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from recital.api.error_handlers import register_error_handlers
from recital.api.routes import (
    admin, exhibition_queue, health, name_lists, recordings,
)
from recital.config import get_settings
from recital.infrastructure import database
from recital.infrastructure.observability import setup_logging
from recital.services.users import UserService

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
    if settings.bootstrap_admin_email and settings.bootstrap_admin_token:
        async with database.db_manager.session() as db:
            await UserService(db).ensure_admin(
                settings.bootstrap_admin_email, settings.bootstrap_admin_token,
            )
    logger.info("Recital API started")
    yield
    logger.info("Recital API shutting down")
    if database.db_manager:
        await database.db_manager.dispose()


app = FastAPI(
    title="Recital API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(exhibition_queue.router)
app.include_router(recordings.router)
app.include_router(name_lists.router)
app.include_router(admin.router)

register_error_handlers(app)
