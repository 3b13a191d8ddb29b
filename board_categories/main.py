"""Board Categories API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map BoardsError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database, websocket hub and change notifier initialized on startup via lifespan
    - Notifier worker is stopped and the engine disposed on shutdown

Run with: uvicorn board_categories.main:app
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from board_categories.api.error_handlers import register_error_handlers
from board_categories.api.routes import categories, health, websocket
from board_categories.config import get_settings
from board_categories.infrastructure import database
from board_categories.infrastructure.observability import setup_logging
from board_categories.infrastructure.websocket_hub import WebSocketHub
from board_categories.services.notifier import ChangeNotifier

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
    app.state.websocket_hub = WebSocketHub()
    app.state.notifier = ChangeNotifier(
        app.state.websocket_hub, max_pending=settings.notifier_max_pending,
    )
    app.state.notifier.start()
    logger.info("Board Categories API started")
    yield
    logger.info("Board Categories API shutting down")
    await app.state.notifier.stop()
    if database.db_manager:
        await database.db_manager.dispose()


app = FastAPI(
    title="Board Categories API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(categories.router)
app.include_router(websocket.router)

register_error_handlers(app)
