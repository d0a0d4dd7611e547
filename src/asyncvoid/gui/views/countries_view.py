"""View listing the countries of the client's eager-load service."""

from __future__ import annotations

from typing import List, Optional

from nicegui import ui

from asyncvoid.core.countries import CountryService
from asyncvoid.core.detached import attach
from asyncvoid.gui.client_utils import safe_call


class CountriesView:
    """Show a spinner until `CountryService.get_data()` resolves, then the list.

    The wait itself is a detached operation (the page function cannot await),
    so it goes through `attach()` as well.
    """

    def __init__(self, service: CountryService) -> None:
        self._service = service
        self._spinner: Optional[ui.spinner] = None
        self._status_label: Optional[ui.label] = None
        self._list: Optional[ui.column] = None

    def render(self) -> None:
        with ui.card().classes("w-full p-4 gap-2"):
            ui.label("Countries").classes("text-lg font-semibold")
            with ui.row().classes("items-center gap-2"):
                self._spinner = ui.spinner(size="sm")
                self._status_label = ui.label("Loading...")
            self._list = ui.column().classes("gap-1")

        attach(self._populate, on_failure=self._show_failure, name="CountriesView.populate")

    async def _populate(self) -> None:
        countries = await self._service.get_data()
        safe_call(self._show_countries, countries)

    def _show_countries(self, countries: List[str]) -> None:
        if self._list is None:
            return
        self._spinner.set_visibility(False)
        self._list.clear()
        with self._list:
            for name in countries:
                ui.label(name)

        error = self._service.load_error
        if error is None:
            self._status_label.set_text(f"Loaded {len(countries)} countries")
        else:
            self._status_label.set_text(f"Load failed: {error} (details in the log)")
            self._status_label.classes("text-red-600")

    def _show_failure(self, exc: Exception) -> None:
        if self._status_label is None:
            return
        safe_call(self._spinner.set_visibility, False)
        safe_call(self._status_label.set_text, f"Unable to show countries: {exc}")
