"""Tests for the detached-operation wrapper."""

from __future__ import annotations

import asyncio
import logging

import pytest

from asyncvoid.core.detached import attach, fire_and_forget, running_count


class _Outcomes:
    """Records which callback fired, and how often."""

    def __init__(self) -> None:
        self.successes = 0
        self.failures: list[Exception] = []

    def on_success(self) -> None:
        self.successes += 1

    def on_failure(self, exc: Exception) -> None:
        self.failures.append(exc)


async def _ok() -> str:
    await asyncio.sleep(0)
    return "done"


async def _fail_after_yield(message: str = "boom") -> None:
    await asyncio.sleep(0)
    raise ValueError(message)


async def _fail_before_yield() -> None:
    raise ValueError("early")


@pytest.mark.asyncio
async def test_success_fires_only_on_success() -> None:
    outcomes = _Outcomes()

    handle = attach(_ok(), outcomes.on_success, outcomes.on_failure)
    await handle

    assert outcomes.successes == 1
    assert outcomes.failures == []


@pytest.mark.asyncio
async def test_failure_fires_only_on_failure() -> None:
    outcomes = _Outcomes()

    handle = attach(_fail_after_yield(), outcomes.on_success, outcomes.on_failure)
    await handle

    assert outcomes.successes == 0
    assert len(outcomes.failures) == 1
    assert isinstance(outcomes.failures[0], ValueError)
    assert str(outcomes.failures[0]) == "boom"


@pytest.mark.asyncio
async def test_attach_returns_before_operation_runs() -> None:
    started = False

    async def op() -> None:
        nonlocal started
        started = True

    handle = attach(op)

    assert started is False
    assert not handle.done()
    await handle
    assert started is True


@pytest.mark.asyncio
async def test_awaiting_handle_never_raises_operation_error() -> None:
    handle = attach(_fail_after_yield(), on_failure=lambda exc: None)

    assert await handle is None
    assert handle.exception() is None


@pytest.mark.asyncio
async def test_every_failure_after_yield_is_delivered() -> None:
    outcomes = _Outcomes()

    handles = [
        attach(_fail_after_yield(f"failure {i}"), outcomes.on_success, outcomes.on_failure)
        for i in range(25)
    ]
    await asyncio.gather(*handles)

    assert outcomes.successes == 0
    assert sorted(str(e) for e in outcomes.failures) == sorted(f"failure {i}" for i in range(25))


@pytest.mark.asyncio
async def test_failure_before_first_yield_is_still_observed() -> None:
    outcomes = _Outcomes()

    await attach(_fail_before_yield(), outcomes.on_success, outcomes.on_failure)

    assert [str(e) for e in outcomes.failures] == ["early"]


@pytest.mark.asyncio
async def test_thunk_raising_when_called_is_observed() -> None:
    outcomes = _Outcomes()

    def thunk():
        raise RuntimeError("raised while starting")

    handle = attach(thunk, outcomes.on_success, outcomes.on_failure)
    await handle

    assert [str(e) for e in outcomes.failures] == ["raised while starting"]


@pytest.mark.asyncio
async def test_thunk_is_called_inside_the_observer() -> None:
    calls = 0

    async def op() -> None:
        await asyncio.sleep(0)

    def thunk():
        nonlocal calls
        calls += 1
        return op()

    handle = attach(thunk)
    assert calls == 0
    await handle
    assert calls == 1


@pytest.mark.asyncio
async def test_already_failed_future_is_observed() -> None:
    outcomes = _Outcomes()
    future = asyncio.get_running_loop().create_future()
    future.set_exception(KeyError("gone"))

    await attach(future, outcomes.on_success, outcomes.on_failure)

    assert len(outcomes.failures) == 1
    assert isinstance(outcomes.failures[0], KeyError)


@pytest.mark.asyncio
async def test_running_task_is_observed() -> None:
    outcomes = _Outcomes()
    task = asyncio.create_task(_fail_after_yield("from task"))

    await attach(task, outcomes.on_success, outcomes.on_failure)

    assert [str(e) for e in outcomes.failures] == ["from task"]


@pytest.mark.asyncio
async def test_missing_failure_handler_swallows_and_logs(caplog: pytest.LogCaptureFixture) -> None:
    outcomes = _Outcomes()

    with caplog.at_level(logging.ERROR, logger="asyncvoid.core.detached"):
        handle = attach(_fail_after_yield("unhandled"), on_success=outcomes.on_success)
        await handle

    assert outcomes.successes == 0
    assert handle.exception() is None
    records = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert len(records) == 1
    assert "no failure handler" in records[0].getMessage()
    assert "unhandled" in records[0].getMessage()


@pytest.mark.asyncio
async def test_async_callbacks_are_awaited() -> None:
    seen: list[str] = []

    async def on_success() -> None:
        await asyncio.sleep(0)
        seen.append("success")

    async def on_failure(exc: Exception) -> None:
        await asyncio.sleep(0)
        seen.append(f"failure: {exc}")

    await attach(_ok(), on_success, on_failure)
    await attach(_fail_after_yield(), on_success, on_failure)

    assert seen == ["success", "failure: boom"]


@pytest.mark.asyncio
async def test_callback_error_does_not_escape(caplog: pytest.LogCaptureFixture) -> None:
    def on_failure(exc: Exception) -> None:
        raise RuntimeError("handler broke")

    with caplog.at_level(logging.ERROR, logger="asyncvoid.core.detached"):
        handle = attach(_fail_after_yield(), on_failure=on_failure)
        await handle

    assert handle.exception() is None
    assert any("raised" in r.getMessage() for r in caplog.records)


@pytest.mark.asyncio
async def test_cancelled_handle_fires_neither_callback() -> None:
    outcomes = _Outcomes()

    handle = attach(_ok, outcomes.on_success, outcomes.on_failure)
    handle.cancel()
    with pytest.raises(asyncio.CancelledError):
        await handle

    assert outcomes.successes == 0
    assert outcomes.failures == []


@pytest.mark.asyncio
async def test_rejects_operand_that_is_not_awaitable() -> None:
    with pytest.raises(TypeError):
        attach(42)  # type: ignore[arg-type]


def test_requires_running_loop_and_closes_coroutine() -> None:
    coro = _ok()

    with pytest.raises(RuntimeError, match="running event loop"):
        attach(coro)

    assert coro.cr_frame is None


@pytest.mark.asyncio
async def test_running_count_tracks_in_flight_handles() -> None:
    gate = asyncio.Event()

    async def op() -> None:
        await gate.wait()

    before = running_count()
    handle = attach(op)
    assert running_count() == before + 1

    gate.set()
    await handle
    await asyncio.sleep(0)
    assert running_count() == before


@pytest.mark.asyncio
async def test_fire_and_forget_failure_reaches_loop_exception_handler() -> None:
    loop = asyncio.get_running_loop()
    previous = loop.get_exception_handler()
    seen: list[dict] = []
    loop.set_exception_handler(lambda _loop, ctx: seen.append(ctx))
    try:
        task = fire_and_forget(_fail_after_yield("escaped"), name="unobserved")
        await asyncio.wait([task])
        await asyncio.sleep(0)
    finally:
        loop.set_exception_handler(previous)

    assert len(seen) == 1
    assert str(seen[0]["exception"]) == "escaped"
    assert task.get_name() == "unobserved"


@pytest.mark.asyncio
async def test_attached_failure_never_reaches_loop_exception_handler() -> None:
    loop = asyncio.get_running_loop()
    previous = loop.get_exception_handler()
    seen: list[dict] = []
    loop.set_exception_handler(lambda _loop, ctx: seen.append(ctx))
    try:
        await attach(_fail_after_yield("contained"), on_failure=lambda exc: None)
        await asyncio.sleep(0)
    finally:
        loop.set_exception_handler(previous)

    assert seen == []
