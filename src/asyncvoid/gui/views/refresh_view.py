"""View for the timer-driven refresh: start control, message, error banner, table."""

from __future__ import annotations

from typing import Optional

from nicegui import ui

from asyncvoid.gui.bus import EventBus
from asyncvoid.gui.events import DismissError, RefreshStateChanged, StartRefresh
from asyncvoid.gui.views.forecast_view import FORECAST_COLUMNS, forecast_rows


class RefreshView:
    """Render refresh state; emit intents for user actions.

    The view never touches the controller directly: clicks become
    StartRefresh / DismissError intents, and RefreshBindings push
    RefreshStateChanged snapshots into `set_state()`.
    """

    def __init__(self, bus: EventBus) -> None:
        self._bus = bus
        self._start_button: Optional[ui.button] = None
        self._phase_label: Optional[ui.label] = None
        self._message_label: Optional[ui.label] = None
        self._error_banner: Optional[ui.row] = None
        self._error_label: Optional[ui.label] = None
        self._table: Optional[ui.table] = None

    def render(self) -> None:
        """Create the UI inside the current container."""
        with ui.card().classes("w-full p-4 gap-2"):
            ui.label("Timer-driven refresh").classes("text-lg font-semibold")
            with ui.row().classes("items-center gap-2"):
                self._start_button = ui.button("Start", on_click=self._on_start_clicked)
                self._phase_label = ui.label("").classes("text-sm text-gray-500")
            self._message_label = ui.label("")

            with ui.row().classes("items-center gap-2 w-full p-2 rounded bg-red-100") as banner:
                ui.icon("error").classes("text-red-600")
                self._error_label = ui.label("").classes("text-red-700")
                ui.button(icon="close", on_click=self._on_dismiss_clicked).props("flat round dense")
            self._error_banner = banner
            self._error_banner.set_visibility(False)

            self._table = ui.table(columns=FORECAST_COLUMNS, rows=[], row_key="date").classes("w-full")

    def set_state(self, state: RefreshStateChanged) -> None:
        if self._start_button is None:
            return
        self._start_button.set_enabled(not state.armed)
        self._phase_label.set_text(state.refresh_phase.value)
        self._message_label.set_text(state.message)
        self._error_label.set_text(state.last_error or "")
        self._error_banner.set_visibility(state.last_error is not None)
        self._table.rows = forecast_rows(list(state.forecasts))
        self._table.update()

    def _on_start_clicked(self) -> None:
        self._bus.emit(StartRefresh())

    def _on_dismiss_clicked(self) -> None:
        self._bus.emit(DismissError())
