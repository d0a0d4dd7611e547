"""Application context singleton for state shared across pages and clients.

Process-level objects (app config, the shared forecast service) live here,
as do the per-client ("scoped") objects: each client's CountryService and
the refresh controllers that must be disposed when the client goes away.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, List, Optional

from nicegui import app, ui

from asyncvoid.core.countries import CountryService
from asyncvoid.core.utils.logging import get_logger
from asyncvoid.core.weather import WeatherForecastService
from asyncvoid.gui.app_config import AppConfig
from asyncvoid.gui.bus import release_client_bus
from asyncvoid.gui.controllers.refresh_controller import RefreshController

logger = get_logger(__name__)

# Storage key for theme persistence across page navigation
THEME_STORAGE_KEY = "asyncvoid_dark_mode"


class AppContext:
    """Singleton managing shared application state across all pages.

    Attributes:
        app_config: AppConfig instance for app-wide settings.
        weather_service: Forecast source shared by every client.
        _country_services: CountryService per client id.
        _controllers: RefreshControllers per client id.
    """

    _instance: Optional[AppContext] = None

    def __new__(cls) -> AppContext:
        """Ensure only one instance exists (singleton pattern)."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self) -> None:
        """Initialize the context (only runs once due to singleton)."""
        if self._initialized:
            return

        logger.info("Initializing AppContext singleton (should happen once)")

        app_config_path = os.getenv("ASYNCVOID_APP_CONFIG_PATH")
        if app_config_path:
            self.app_config = AppConfig.load(config_path=Path(app_config_path))
        else:
            self.app_config = AppConfig.load()
        logger.info(f"App config loaded from: {self.app_config.path}")

        self.weather_service = self._make_weather_service()

        self._country_services: Dict[str, CountryService] = {}
        self._controllers: Dict[str, List[RefreshController]] = {}

        self._initialized = True
        logger.info("AppContext initialized successfully")

    def _make_weather_service(self) -> WeatherForecastService:
        return WeatherForecastService(
            failure_rate=self.app_config.data.fetch_failure_rate,
            latency_s=self.app_config.data.fetch_latency_s,
        )

    # -----------------------------
    # Scoped (per-client) objects
    # -----------------------------
    def get_country_service(self, client_id: str) -> CountryService:
        """Get or create the client's CountryService.

        Creation starts the background load, so this must run inside the
        event loop (a page function).
        """
        service = self._country_services.get(client_id)
        if service is None:
            service = CountryService(load_delay_s=self.app_config.data.country_load_delay_s)
            self._country_services[client_id] = service
            logger.info(f"Created CountryService for client {client_id}")
        return service

    def register_controller(self, client_id: str, controller: RefreshController) -> None:
        self._controllers.setdefault(client_id, []).append(controller)

    def release_client(self, client_id: str) -> None:
        """Dispose everything owned by a client that was deleted."""
        for controller in self._controllers.pop(client_id, []):
            controller.dispose()
        if self._country_services.pop(client_id, None) is not None:
            logger.debug(f"Released CountryService for client {client_id}")
        release_client_bus(client_id)

    # -----------------------------
    # Theme
    # -----------------------------
    def init_dark_mode_for_page(self):
        """Create a fresh ui.dark_mode() synced with the stored preference.

        Must be called on each page load.
        """
        dark_mode = ui.dark_mode()
        dark_mode.value = app.storage.user.get(THEME_STORAGE_KEY, False)
        return dark_mode

    def toggle_theme(self, dark_mode) -> None:
        """Toggle theme and persist to user storage."""
        dark_mode.value = not dark_mode.value
        app.storage.user[THEME_STORAGE_KEY] = dark_mode.value

    def reset(self) -> None:
        """Reset the context (useful for testing)."""
        logger.info("Resetting AppContext")
        for client_id in list(self._controllers):
            self.release_client(client_id)
        self._country_services.clear()
        self.app_config = AppConfig.load(config_path=self.app_config.path)
        self.weather_service = self._make_weather_service()
