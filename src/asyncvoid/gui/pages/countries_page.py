"""Countries page backed by the client's eager-load CountryService."""

from __future__ import annotations

from nicegui import ui

from asyncvoid.gui.app_context import AppContext
from asyncvoid.gui.bus import EventBus
from asyncvoid.gui.pages.base_page import BasePage
from asyncvoid.gui.views.countries_view import CountriesView


class CountriesPage(BasePage):
    """The service starts loading when first requested for this client; the
    view waits on its loading handle."""

    def __init__(self, context: AppContext, bus: EventBus) -> None:
        super().__init__(context, bus)

    def build(self) -> None:
        ui.label("Eager load").classes("text-2xl font-bold")
        service = self.context.get_country_service(self.client_id)
        CountriesView(service).render()
