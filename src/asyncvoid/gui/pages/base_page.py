"""Base page class with shared layout and lifecycle management."""

from __future__ import annotations

from abc import ABC, abstractmethod

from nicegui import ui

from asyncvoid.gui.app_context import AppContext
from asyncvoid.gui.bus import EventBus, get_client_id
from asyncvoid.gui.navigation import build_header


class BasePage(ABC):
    """Base class for all pages with shared header and lifecycle management.

    Attributes:
        context: Shared application context (singleton).
        bus: Per-client EventBus instance.
        _client_id: Client identifier for this page instance.
    """

    def __init__(self, context: AppContext, bus: EventBus) -> None:
        self.context: AppContext = context
        self.bus: EventBus = bus
        self._client_id: str = get_client_id()

    @property
    def client_id(self) -> str:
        return self._client_id

    def render(self, *, page_title: str) -> None:
        """Render shared header, then page-specific content.

        Args:
            page_title: HTML page title to display in the browser tab.
        """
        ui.page_title(page_title)

        dark_mode = self.context.init_dark_mode_for_page()
        build_header(self.context, dark_mode)

        with ui.column().classes("w-full p-4 gap-4"):
            self._ensure_setup()
            self.build()

    def _ensure_setup(self) -> None:
        """One-time per-client initialization (controllers, bindings). Default: nothing."""
        pass

    @abstractmethod
    def build(self) -> None:
        """Build page-specific content. Called on every render."""
        raise NotImplementedError
