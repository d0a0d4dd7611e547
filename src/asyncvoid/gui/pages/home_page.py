"""Home page: timer-driven forecast refresh with an error banner."""

from __future__ import annotations

from typing import Optional

from nicegui import ui

from asyncvoid.core.utils.logging import get_logger
from asyncvoid.gui.app_context import AppContext
from asyncvoid.gui.bus import EventBus
from asyncvoid.gui.controllers.refresh_controller import RefreshController
from asyncvoid.gui.pages.base_page import BasePage
from asyncvoid.gui.views.refresh_bindings import RefreshBindings
from asyncvoid.gui.views.refresh_view import RefreshView

logger = get_logger(__name__)


def _ui_timer(interval_s: float, callback) -> ui.timer:
    # first tick after one interval, not immediately on start
    return ui.timer(interval_s, callback, immediate=False)


class HomePage(BasePage):
    """Start a periodic refresh; failed refreshes show up in the error banner.

    The controller and bindings are created once per client in _ensure_setup();
    the controller is registered with the AppContext so it is disposed when the
    client is deleted.
    """

    def __init__(self, context: AppContext, bus: EventBus) -> None:
        super().__init__(context, bus)
        self._view = RefreshView(bus)
        self._controller: Optional[RefreshController] = None
        self._bindings: Optional[RefreshBindings] = None

    @property
    def controller(self) -> Optional[RefreshController]:
        return self._controller

    def _ensure_setup(self) -> None:
        if self._controller is not None:
            return
        self._controller = RefreshController(
            self.context.weather_service.fetch,
            self.bus,
            timer_factory=_ui_timer,
            interval_s=self.context.app_config.data.refresh_interval_s,
        )
        self.context.register_controller(self.client_id, self._controller)
        self._bindings = RefreshBindings(self.bus, self._view)

    def build(self) -> None:
        ui.label("Detached refresh").classes("text-2xl font-bold")
        ui.label(
            "Each timer tick starts a refresh nobody awaits. Its failures are "
            "observed and shown here instead of reaching the global handler."
        ).classes("text-sm text-gray-500")
        self._view.render()
        self._view.set_state(self._controller.snapshot())
