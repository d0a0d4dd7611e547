"""Tests for the weather forecast service."""

from __future__ import annotations

import random
from datetime import date, timedelta

import pytest

from asyncvoid.core.errors import AsyncVoidError, ForecastFetchError, MissingArgumentError
from asyncvoid.core.weather import FORECAST_DAYS, SUMMARIES, WeatherForecast, WeatherForecastService


@pytest.mark.parametrize(
    "celsius, fahrenheit",
    [(0, 32), (100, 211), (-20, -3)],
)
def test_temperature_f(celsius: int, fahrenheit: int) -> None:
    assert WeatherForecast(date(2024, 1, 1), celsius).temperature_f == fahrenheit


def test_to_row() -> None:
    row = WeatherForecast(date(2024, 1, 2), 10, "Cool").to_row()
    assert row == {"date": "2024-01-02", "temperature_c": 10, "temperature_f": 49, "summary": "Cool"}


@pytest.mark.asyncio
async def test_get_forecast_async(seeded_rng: random.Random) -> None:
    service = WeatherForecastService(rng=seeded_rng)
    start = date(2024, 3, 1)

    forecasts = await service.get_forecast_async(start)

    assert len(forecasts) == FORECAST_DAYS
    assert [f.date for f in forecasts] == [start + timedelta(days=i) for i in range(1, 6)]
    for f in forecasts:
        assert -20 <= f.temperature_c < 55
        assert f.summary in SUMMARIES


@pytest.mark.asyncio
async def test_fetch_fails_with_network_down() -> None:
    service = WeatherForecastService(failure_rate=1.0)

    with pytest.raises(ForecastFetchError, match="network down"):
        await service.fetch()


@pytest.mark.asyncio
async def test_fetch_without_failures_returns_todays_forecasts() -> None:
    service = WeatherForecastService(failure_rate=0.0)

    forecasts = await service.fetch()

    assert len(forecasts) == FORECAST_DAYS
    assert forecasts[0].date == date.today() + timedelta(days=1)


def test_failure_rate_is_validated() -> None:
    with pytest.raises(ValueError):
        WeatherForecastService(failure_rate=1.5)


@pytest.mark.asyncio
async def test_get_exception_without_argument() -> None:
    service = WeatherForecastService()

    with pytest.raises(MissingArgumentError) as info:
        await service.get_exception()

    assert isinstance(info.value, ValueError)
    assert isinstance(info.value, AsyncVoidError)
    assert info.value.argument == "throw_me"


@pytest.mark.asyncio
async def test_get_exception_with_argument() -> None:
    assert await WeatherForecastService().get_exception("x") == []
