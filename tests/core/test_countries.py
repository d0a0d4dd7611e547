"""Tests for the eager-load CountryService."""

from __future__ import annotations

import asyncio
import logging
from unittest.mock import MagicMock

import pytest

from asyncvoid.core.countries import COUNTRIES, CountryService
from asyncvoid.core.errors import CountryLoadError


@pytest.mark.asyncio
async def test_successful_load_returns_countries_and_logs_info(scripted_rng) -> None:
    log = MagicMock(spec=logging.Logger)
    service = CountryService(load_delay_s=0, rng=scripted_rng(1), log=log)

    data = await service.get_data()

    assert data == ["UK", "France", "Portugal", "Spain"]
    assert service.load_error is None
    log.info.assert_called_once_with("CountryService loaded successfully")
    log.critical.assert_not_called()


@pytest.mark.asyncio
async def test_failed_load_is_logged_not_raised(scripted_rng) -> None:
    log = MagicMock(spec=logging.Logger)
    service = CountryService(load_delay_s=0, rng=scripted_rng(2), log=log)

    data = await service.get_data()

    # the collection was populated before the injected fault
    assert data == list(COUNTRIES)
    assert isinstance(service.load_error, CountryLoadError)
    log.critical.assert_called_once_with("Log the error; The number can't be 2!!!!")
    log.info.assert_not_called()


@pytest.mark.asyncio
async def test_constructor_returns_before_load_settles(scripted_rng) -> None:
    service = CountryService(load_delay_s=0.05, rng=scripted_rng(2))

    assert service.is_loaded is False
    assert service.load_error is None

    await service.get_data()

    assert service.is_loaded is True
    assert service.loading_task.exception() is None


@pytest.mark.asyncio
async def test_get_data_waits_for_the_load(scripted_rng) -> None:
    service = CountryService(load_delay_s=0.05, rng=scripted_rng(1))
    pending = asyncio.create_task(service.get_data())

    await asyncio.sleep(0.01)
    assert not pending.done()

    assert await pending == list(COUNTRIES)


@pytest.mark.asyncio
async def test_get_data_after_settle_returns_immediately(scripted_rng) -> None:
    service = CountryService(load_delay_s=0, rng=scripted_rng(1))
    await service.loading_task

    data = await asyncio.wait_for(service.get_data(), timeout=0.05)

    assert data == list(COUNTRIES)


@pytest.mark.asyncio
async def test_get_data_returns_a_copy(scripted_rng) -> None:
    service = CountryService(load_delay_s=0, rng=scripted_rng(1))

    first = await service.get_data()
    first.append("Atlantis")

    assert await service.get_data() == list(COUNTRIES)


@pytest.mark.asyncio
async def test_cancelled_caller_does_not_cancel_the_load(scripted_rng) -> None:
    service = CountryService(load_delay_s=0.05, rng=scripted_rng(1))
    caller = asyncio.create_task(service.get_data())
    await asyncio.sleep(0)

    caller.cancel()
    with pytest.raises(asyncio.CancelledError):
        await caller

    await service.loading_task
    assert not service.loading_task.cancelled()
    assert await service.get_data() == list(COUNTRIES)


@pytest.mark.asyncio
async def test_each_service_loads_once(scripted_rng) -> None:
    rng = scripted_rng(1)
    service = CountryService(load_delay_s=0, rng=rng)

    await service.get_data()
    await service.get_data()

    assert rng.calls == 1


def test_construction_outside_event_loop_is_a_precondition_error() -> None:
    with pytest.raises(RuntimeError):
        CountryService(load_delay_s=0)
