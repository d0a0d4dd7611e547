"""Per-client service that starts loading its data as soon as it is created."""

from __future__ import annotations

import asyncio
import logging
import random
from typing import List, Optional

from asyncvoid.core.detached import attach
from asyncvoid.core.errors import CountryLoadError
from asyncvoid.core.utils.logging import get_logger

logger = get_logger(__name__)

COUNTRIES = ("UK", "France", "Portugal", "Spain")


class CountryService:
    """Eager-load service with a loading handle.

    The constructor kicks off the background load through `attach()` and keeps
    the returned task in `loading_task`. Data access awaits that handle, so
    callers never see a half-loaded list while the load is still running.

    The load fails half of the time on purpose. The failure is reported to the
    log (CRITICAL) and stored in `load_error`; it is never raised to callers.

    Must be constructed inside a running event loop (e.g. a NiceGUI page function).

    Attributes:
        loading_task: Handle that settles once the load has succeeded or failed.
    """

    def __init__(
        self,
        *,
        load_delay_s: float = 1.0,
        rng: Optional[random.Random] = None,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self._load_delay_s = load_delay_s
        self._rng = rng or random.Random()
        self._log = log or logger
        self._countries: List[str] = []
        self._load_error: Optional[Exception] = None

        self.loading_task: "asyncio.Task[None]" = attach(
            self.load_data,
            on_success=self._handle_success,
            on_failure=self._handle_failure,
            name=f"{type(self).__name__}.load_data",
        )

    @property
    def is_loaded(self) -> bool:
        """True once the loading handle has settled (either way)."""
        return self.loading_task.done()

    @property
    def load_error(self) -> Optional[Exception]:
        return self._load_error

    async def load_data(self) -> None:
        await self._load_countries()

    async def get_data(self) -> List[str]:
        """Wait for the background load to settle, then return the countries.

        On a failed load this returns whatever the load managed to populate.
        """
        # shield: a caller that gets cancelled must not cancel the shared load
        await asyncio.shield(self.loading_task)
        return list(self._countries)

    def _handle_success(self) -> None:
        self._load_error = None
        self._log.info(f"{type(self).__name__} loaded successfully")

    def _handle_failure(self, exc: Exception) -> None:
        self._load_error = exc
        self._log.critical(f"Log the error; {exc}")

    async def _load_countries(self) -> None:
        await asyncio.sleep(self._load_delay_s)
        self._countries.clear()
        self._countries.extend(COUNTRIES)
        if self._rng.randint(1, 2) == 2:
            raise CountryLoadError("The number can't be 2!!!!")
