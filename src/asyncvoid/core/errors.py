"""Domain errors raised by the asyncvoid data services."""

from __future__ import annotations


class AsyncVoidError(Exception):
    """Base class for errors raised by asyncvoid services."""


class ForecastFetchError(AsyncVoidError):
    """Transient failure while fetching forecasts (simulated network error)."""


class CountryLoadError(AsyncVoidError):
    """Injected failure of the country background load."""


class MissingArgumentError(AsyncVoidError, ValueError):
    """A required argument was None."""

    def __init__(self, argument: str) -> None:
        super().__init__(f"Value cannot be null. (Parameter '{argument}')")
        self.argument = argument
