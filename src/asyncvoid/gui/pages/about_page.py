"""About page displaying version information and logs."""

from __future__ import annotations

from nicegui import ui

from asyncvoid.gui.app_context import AppContext
from asyncvoid.gui.bus import EventBus
from asyncvoid.gui.pages.base_page import BasePage
from asyncvoid.gui.views.about_view import AboutView


class AboutPage(BasePage):
    """Read-only page: version info and the application log tail."""

    def __init__(self, context: AppContext, bus: EventBus) -> None:
        super().__init__(context, bus)

    def build(self) -> None:
        ui.label("About AsyncVoid").classes("text-2xl font-bold")
        AboutView().render()
