"""Forecast table with buttons that raise inside detached operations.

"Throw (wrapped)" starts `get_exception()` through `attach()`, so its error
is shown below the table. "Throw (unwrapped)" starts the same operation with
`fire_and_forget()`; nothing observes it and the error goes to the global
exception handler.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from nicegui import ui

from asyncvoid.core.detached import attach, fire_and_forget
from asyncvoid.core.utils.logging import get_logger
from asyncvoid.core.weather import WeatherForecast, WeatherForecastService
from asyncvoid.gui.client_utils import safe_call
from asyncvoid.gui.config import ERROR_TIME_FORMAT

logger = get_logger(__name__)

FORECAST_COLUMNS = [
    {"name": "date", "label": "Date", "field": "date", "align": "left"},
    {"name": "temperature_c", "label": "Temp. (C)", "field": "temperature_c"},
    {"name": "temperature_f", "label": "Temp. (F)", "field": "temperature_f"},
    {"name": "summary", "label": "Summary", "field": "summary", "align": "left"},
]


def forecast_rows(forecasts: List[WeatherForecast]) -> List[dict]:
    return [f.to_row() for f in forecasts]


class ForecastView:
    """Forecast table plus wrapped/unwrapped failure buttons."""

    def __init__(self, service: WeatherForecastService) -> None:
        self._service = service
        self._table: Optional[ui.table] = None
        self._error_label: Optional[ui.label] = None

    def render(self) -> None:
        with ui.card().classes("w-full p-4 gap-2"):
            ui.label("Weather forecast").classes("text-lg font-semibold")
            self._table = ui.table(columns=FORECAST_COLUMNS, rows=[], row_key="date").classes("w-full")
            with ui.row().classes("items-center gap-2"):
                ui.button("Reload", on_click=self._on_reload)
                ui.button("Throw (wrapped)", on_click=self._on_throw_wrapped)
                ui.button("Throw (unwrapped)", on_click=self._on_throw_unwrapped).props("color=negative")
            self._error_label = ui.label("").classes("text-red-600")
        self._on_reload()

    def _on_reload(self) -> None:
        attach(self._load_forecasts, on_failure=self._show_error, name="ForecastView.load")

    async def _load_forecasts(self) -> None:
        forecasts = await self._service.get_forecast_async(date.today())
        safe_call(self._set_rows, forecasts)

    def _set_rows(self, forecasts: List[WeatherForecast]) -> None:
        if self._table is None:
            return
        self._table.rows = forecast_rows(forecasts)
        self._table.update()

    def _on_throw_wrapped(self) -> None:
        # get_exception() raises before its first await; attach still observes it
        attach(self._service.get_exception(), on_failure=self._show_error, name="ForecastView.throw_wrapped")

    def _on_throw_unwrapped(self) -> None:
        logger.warning("starting an unobserved failing operation")
        fire_and_forget(self._service.get_exception(), name="ForecastView.throw_unwrapped")

    def _show_error(self, exc: Exception) -> None:
        if self._error_label is None:
            return
        safe_call(self._error_label.set_text, f"{exc} at {datetime.now().strftime(ERROR_TIME_FORMAT)}")
