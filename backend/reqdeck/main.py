"""ReqDeck API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map ReqDeckError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database, document store and the EditorSession built on startup via lifespan

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - One EditorSession per process on app.state: the editor is single-user and
      single-threaded, all state lives in memory between saves
    - Tables created with create_all at startup: one document table, no migrations
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from reqdeck.api.error_handlers import register_error_handlers
from reqdeck.api.routes import (
    clipboard, collections, gestures, health, requests, selection, tables, workspace,
)
from reqdeck.config import get_settings
from reqdeck.infrastructure.database import init_db
from reqdeck.infrastructure.document_store import SqlDocumentStore
from reqdeck.infrastructure.notifications import LoggingNotifier
from reqdeck.infrastructure.observability import setup_logging
from reqdeck.infrastructure.system_clipboard import PyperclipBridge
from reqdeck.services.editor_session import EditorSession

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(settings.database_url, echo=settings.database_echo)
    await manager.create_tables()

    notifier = LoggingNotifier(settings.notification_buffer_size)
    session = EditorSession(
        persistence=SqlDocumentStore(manager),
        notifier=notifier,
        bridge=PyperclipBridge(),
        response_history_capacity=settings.response_history_capacity,
        drag_cleanup_delay_ms=settings.drag_cleanup_delay_ms,
        hover_preview_delay_ms=settings.hover_preview_delay_ms,
    )
    await session.load()
    app.state.editor = session
    app.state.notifier = notifier
    logger.info("ReqDeck API started")
    yield
    session.deferred.flush()
    await manager.close()
    logger.info("ReqDeck API shutting down")


app = FastAPI(
    title="ReqDeck API", version="1.0.0", lifespan=lifespan,
)

# CORS: configured from settings, not hardcoded
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes: explicit registration
app.include_router(health.router)
app.include_router(workspace.router)
app.include_router(collections.router)
app.include_router(requests.router)
app.include_router(tables.router)
app.include_router(selection.router)
app.include_router(gestures.router)
app.include_router(clipboard.router)

register_error_handlers(app)
