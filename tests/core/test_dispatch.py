"""Tests for UiDispatcher."""

from __future__ import annotations

import asyncio
import threading

import pytest

from asyncvoid.core.dispatch import UiDispatcher


@pytest.mark.asyncio
async def test_invoke_on_dispatch_context_runs_synchronously() -> None:
    dispatcher = UiDispatcher()
    calls: list[int] = []

    dispatcher.invoke(calls.append, 1)

    assert dispatcher.is_current() is True
    assert calls == [1]


@pytest.mark.asyncio
async def test_invoke_from_worker_thread_is_marshalled_to_loop_thread() -> None:
    dispatcher = UiDispatcher()
    loop_thread = threading.get_ident()
    ran_on: list[int] = []
    done = asyncio.Event()

    def mutate(value: int) -> None:
        ran_on.append(threading.get_ident())
        done.set()

    await asyncio.to_thread(dispatcher.invoke, mutate, 1)
    await asyncio.wait_for(done.wait(), timeout=1.0)

    assert ran_on == [loop_thread]


@pytest.mark.asyncio
async def test_is_current_is_false_off_the_loop() -> None:
    dispatcher = UiDispatcher()

    assert await asyncio.to_thread(dispatcher.is_current) is False


def test_requires_a_loop() -> None:
    with pytest.raises(RuntimeError):
        UiDispatcher()


def test_explicit_loop() -> None:
    loop = asyncio.new_event_loop()
    try:
        dispatcher = UiDispatcher(loop)
        assert dispatcher.loop is loop
        assert dispatcher.is_current() is False
    finally:
        loop.close()
