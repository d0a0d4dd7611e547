"""Fetch data page: forecast table and wrapped/unwrapped failures."""

from __future__ import annotations

from nicegui import ui

from asyncvoid.gui.app_context import AppContext
from asyncvoid.gui.bus import EventBus
from asyncvoid.gui.pages.base_page import BasePage
from asyncvoid.gui.views.forecast_view import ForecastView


class FetchDataPage(BasePage):
    def __init__(self, context: AppContext, bus: EventBus) -> None:
        super().__init__(context, bus)

    def build(self) -> None:
        ui.label("Weather forecast").classes("text-2xl font-bold")
        ForecastView(self.context.weather_service).render()
