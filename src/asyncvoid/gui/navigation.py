"""Shared navigation and header component."""

from __future__ import annotations

from typing import TYPE_CHECKING

from nicegui import ui

if TYPE_CHECKING:
    from asyncvoid.gui.app_context import AppContext

NAV_ITEMS = (
    ("Home", "/"),
    ("Countries", "/countries"),
    ("Fetch data", "/fetchdata"),
    ("About", "/about"),
)


def build_header(context: AppContext, dark_mode) -> None:
    """Build the shared header with navigation and theme toggle.

    Rebuilt on each page load.
    """

    def _update_theme_icon() -> None:
        icon = "light_mode" if dark_mode.value else "dark_mode"
        theme_button.props(f"icon={icon}")

    def _toggle_theme() -> None:
        context.toggle_theme(dark_mode)
        _update_theme_icon()

    with ui.header().classes("items-center justify-between"):
        with ui.row().classes("items-center gap-4"):
            ui.label("AsyncVoid").classes("text-2xl font-bold text-white")
            for label, path in NAV_ITEMS:
                ui.button(label, on_click=lambda p=path: ui.navigate.to(p)).props("flat text-color=white")

        theme_button = ui.button(on_click=_toggle_theme).props("flat round dense text-color=white")
        _update_theme_icon()
