# src/asyncvoid/gui/views/__init__.py
"""Views render NiceGUI elements; bindings push state events into them."""

# Views
from asyncvoid.gui.views.about_view import AboutView
from asyncvoid.gui.views.countries_view import CountriesView
from asyncvoid.gui.views.forecast_view import ForecastView
from asyncvoid.gui.views.refresh_view import RefreshView

# Bindings
from asyncvoid.gui.views.refresh_bindings import RefreshBindings

__all__ = [
    "AboutView",
    "CountriesView",
    "ForecastView",
    "RefreshView",
    "RefreshBindings",
]
