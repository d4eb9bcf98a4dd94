from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.exceptions import RequestValidationError

from scoreboard.clients.sheets import HttpSheetsClient
from scoreboard.clients.telegram import TelegramSender
from scoreboard.core.config import Settings, settings
from scoreboard.core.deps import get_cache, get_manager
from scoreboard.core.errors import (
    ScoreboardException,
    scoreboard_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from scoreboard.core.logging import configure_logging
from scoreboard.routers import dashboard as dashboard_router
from scoreboard.routers import tasks as tasks_router
from scoreboard.services.analyzer import current_snapshot
from scoreboard.services.cache import SnapshotCache
from scoreboard.services.ingest import DashboardFetcher
from scoreboard.services.manager import TaskManager
from scoreboard.services.tasks import TaskCategory

logger = logging.getLogger(__name__)


async def start_background(app: FastAPI, cfg: Settings) -> None:
    """Build clients, fetch the first snapshot, and arm the periodic tasks."""
    sheets = HttpSheetsClient(
        base_url=cfg.SHEETS_API_URL,
        api_key=cfg.SHEETS_API_KEY,
        access_token=cfg.SHEETS_ACCESS_TOKEN,
        timeout=cfg.HTTP_TIMEOUT_S,
    )
    sender = TelegramSender(cfg.BOT_TOKEN, base_url=cfg.TELEGRAM_API_URL, timeout=cfg.HTTP_TIMEOUT_S)
    app.state.clients = [sheets, sender]

    fetcher = DashboardFetcher(
        sheets,
        cfg.SPREADSHEET_ID,
        skip_parse_errors=cfg.SKIP_PARSE_ERRORS,
        locale=cfg.TITLE_LOCALE,
        max_tables=cfg.MAX_TABLES,
    )
    manager = TaskManager(sender, app.state.cache)
    app.state.manager = manager

    try:
        await manager.bootstrap(fetcher)
    except ScoreboardException as exc:
        # Serve without data; the refresh task keeps trying on its schedule.
        logger.error("Initial dashboard fetch failed [%s]: %s", exc.code, exc.message)

    manager.add_refresh_task(fetcher, cfg.FETCH_INTERVAL_MIN)
    if cfg.NOTIFY_CHAT_ID:
        manager.add_notification_task(cfg.NOTIFY_CHAT_ID, cfg.NOTIFY_TEXT, cfg.notify_at_tuple)
        manager.add_summary_task(
            cfg.NOTIFY_CHAT_ID, cfg.summary_at_tuple, utc_offset_hours=cfg.SHEET_UTC_OFFSET_H
        )


async def stop_background(app: FastAPI) -> None:
    await app.state.manager.cancel_all()
    for client in app.state.clients:
        await client.aclose()


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.LOG_LEVEL)
    app.state.cache = SnapshotCache()
    app.state.manager = TaskManager(sender=None, cache=app.state.cache)
    app.state.clients = []
    if settings.SCHEDULER_ENABLED:
        await start_background(app, settings)
    yield
    await stop_background(app)


app = FastAPI(
    title="Scoreboard Sync API",
    description=(
        "**Scoreboard Sync**\n\n"
        "Keeps an in-memory snapshot of the monthly score spreadsheet, refreshed "
        "by a background job, and exposes read-only queries over it.\n\n"
        "All error responses follow the `{code, message, details}` envelope."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# --- Exception handlers (most specific first) ---
app.add_exception_handler(ScoreboardException, scoreboard_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(dashboard_router.router)
app.include_router(tasks_router.router)


@app.get("/health", tags=["health"], summary="Health check")
async def health(
    cache: SnapshotCache = Depends(get_cache),
    manager: TaskManager = Depends(get_manager),
):
    """
    Returns `{"status": "ok"}` with whether a snapshot has been fetched and
    how many refresh tasks are armed. Used for liveness checks.
    """
    dashboard = await current_snapshot(cache)
    return {
        "status": "ok",
        "env": settings.APP_ENV,
        "initialized": dashboard.is_initialized,
        "participants": len(dashboard.tables or ()),
        "refresh_tasks": len(manager.active_tasks(TaskCategory.REFRESH)),
    }
