"""Weather forecast data service.

Produces random forecasts and simulates a flaky remote source for the
timer-driven refresh demo.
"""

from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Optional

from asyncvoid.core.errors import ForecastFetchError, MissingArgumentError
from asyncvoid.core.utils.logging import get_logger

logger = get_logger(__name__)

SUMMARIES = (
    "Freezing",
    "Bracing",
    "Chilly",
    "Cool",
    "Mild",
    "Warm",
    "Balmy",
    "Hot",
    "Sweltering",
    "Scorching",
)

FORECAST_DAYS = 5


@dataclass(frozen=True)
class WeatherForecast:
    date: date
    temperature_c: int
    summary: Optional[str] = None

    @property
    def temperature_f(self) -> int:
        return 32 + int(self.temperature_c / 0.5556)

    def to_row(self) -> dict:
        """Row dict for ui.table."""
        return {
            "date": self.date.isoformat(),
            "temperature_c": self.temperature_c,
            "temperature_f": self.temperature_f,
            "summary": self.summary or "",
        }


class WeatherForecastService:
    """Forecast source shared by all clients.

    Args:
        failure_rate: Probability in [0, 1] that `fetch()` raises ForecastFetchError.
        latency_s: Simulated network latency for `fetch()`.
        rng: Random source (seed it in tests).
    """

    def __init__(
        self,
        *,
        failure_rate: float = 0.0,
        latency_s: float = 0.0,
        rng: Optional[random.Random] = None,
    ) -> None:
        if not 0.0 <= failure_rate <= 1.0:
            raise ValueError(f"failure_rate must be in [0, 1], got {failure_rate}")
        self.failure_rate = failure_rate
        self.latency_s = latency_s
        self._rng = rng or random.Random()

    async def get_forecast_async(self, start_date: date) -> List[WeatherForecast]:
        return [
            WeatherForecast(
                date=start_date + timedelta(days=index),
                temperature_c=self._rng.randrange(-20, 55),
                summary=self._rng.choice(SUMMARIES),
            )
            for index in range(1, FORECAST_DAYS + 1)
        ]

    async def get_exception(self, throw_me: Optional[str] = None) -> List[WeatherForecast]:
        """Raise before the first suspension point when ``throw_me`` is None."""
        if throw_me is None:
            raise MissingArgumentError("throw_me")
        await asyncio.sleep(0)
        return []

    async def fetch(self) -> List[WeatherForecast]:
        """Fetch today's forecasts from the simulated remote source.

        Raises:
            ForecastFetchError: With probability ``failure_rate``.
        """
        if self.latency_s > 0:
            await asyncio.sleep(self.latency_s)
        if self.failure_rate > 0 and self._rng.random() < self.failure_rate:
            logger.debug("simulated forecast fetch failure")
            raise ForecastFetchError("network down")
        return await self.get_forecast_async(date.today())
