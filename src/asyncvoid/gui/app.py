"""AsyncVoid GUI application entry point.

Each browser tab/window is a NiceGUI client with its own EventBus, refresh
controller and country service; all of them are released when NiceGUI deletes
the client (a disconnect alone may still be followed by a reconnect).

Run with:
    python -m asyncvoid.gui.app
"""

from __future__ import annotations

import asyncio
import os
from pathlib import Path
from typing import Any, Dict

from nicegui import app, ui

from asyncvoid.core.utils.logging import get_logger, setup_logging
from asyncvoid.gui.app_context import AppContext
from asyncvoid.gui.bus import get_event_bus
from asyncvoid.gui.client_utils import is_client_alive
from asyncvoid.gui.config import DEFAULT_PORT, STORAGE_SECRET
from asyncvoid.gui.pages.about_page import AboutPage
from asyncvoid.gui.pages.countries_page import CountriesPage
from asyncvoid.gui.pages.fetch_data_page import FetchDataPage
from asyncvoid.gui.pages.home_page import HomePage

logger = get_logger(__name__)

# Configure logging at module import (runs in uvicorn worker)
_log_file = os.getenv("ASYNCVOID_LOG_FILE")
setup_logging(
    level=os.getenv("ASYNCVOID_LOG_LEVEL", "INFO"),
    log_file=Path(_log_file) if _log_file else None,
)

# Shared application context (singleton, process-level)
context = AppContext()


@ui.page("/")
def home() -> None:
    """Home route: timer-driven refresh."""
    page = HomePage(context, get_event_bus())
    page.render(page_title="AsyncVoid")


@ui.page("/countries")
def countries() -> None:
    """Countries route: eager-load service scoped to the client."""
    page = CountriesPage(context, get_event_bus())
    page.render(page_title="AsyncVoid - Countries")


@ui.page("/fetchdata")
def fetch_data() -> None:
    """Forecast route with wrapped and unwrapped failing operations."""
    page = FetchDataPage(context, get_event_bus())
    page.render(page_title="AsyncVoid - Fetch data")


@ui.page("/about")
def about() -> None:
    page = AboutPage(context, get_event_bus())
    page.render(page_title="AsyncVoid - About")


def _on_client_disconnect(client) -> None:
    # the browser may reconnect within reconnect_timeout; keep its state
    logger.info(f"client {client.id} disconnected, waiting for reconnect")


def _on_client_delete(client) -> None:
    """Release everything scoped to the client (timers, services, bus)."""
    client_id = str(client.id)
    logger.info(f"client {client_id} deleted, releasing its resources")
    context.release_client(client_id)


def _on_unhandled_exception(exc: Exception) -> None:
    """Global error path: failures nobody observed end up here."""
    logger.critical(f"Unhandled exception reached the global handler: {exc!r}", exc_info=exc)
    if is_client_alive():
        ui.notify(f"Unhandled error: {exc}", type="negative")


def _loop_exception_handler(loop: asyncio.AbstractEventLoop, ctx: Dict[str, Any]) -> None:
    exc = ctx.get("exception")
    if isinstance(exc, Exception):
        app.handle_exception(exc)
        return
    loop.default_exception_handler(ctx)


def _install_loop_exception_handler() -> None:
    asyncio.get_running_loop().set_exception_handler(_loop_exception_handler)
    logger.debug("installed event loop exception handler")


app.on_disconnect(_on_client_disconnect)
app.on_delete(_on_client_delete)
app.on_exception(_on_unhandled_exception)
app.on_startup(_install_loop_exception_handler)


def _env_bool(name: str, default: bool) -> bool:
    """Parse env var as bool; if unset/invalid returns default."""
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off"}:
        return False
    return default


def _env_int(name: str, default: int) -> int:
    """Parse env var as int; if unset/invalid returns default."""
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def main(*, reload: bool | None = None, native_bool: bool | None = None) -> None:
    """Start the AsyncVoid GUI application.

    Defaults (no env vars, no args):
      - native=False (browser)
      - reload=False

    Env vars (used only when arg is None):
      - ASYNCVOID_GUI_NATIVE: 1/0
      - ASYNCVOID_GUI_RELOAD: 1/0
      - HOST: bind host
      - PORT: bind port
    """
    native_bool = _env_bool("ASYNCVOID_GUI_NATIVE", False) if native_bool is None else native_bool
    reload = _env_bool("ASYNCVOID_GUI_RELOAD", False) if reload is None else reload

    port = _env_int("PORT", DEFAULT_PORT)
    host = os.getenv("HOST", "127.0.0.1")

    logger.info(
        "Starting AsyncVoid GUI: host=%s port=%s reload=%s native=%s",
        host,
        port,
        reload,
        native_bool,
    )

    ui.run(
        host=host,
        port=port,
        reload=reload,
        native=native_bool,
        storage_secret=STORAGE_SECRET,
        title="AsyncVoid",
    )


if __name__ in {"__main__", "__mp_main__"}:
    main()
