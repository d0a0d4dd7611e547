"""Pytest fixtures for GUI tests."""

from __future__ import annotations

from typing import Callable, Generator, List

import pytest

from asyncvoid.gui.bus import BusConfig, EventBus


class DummyTimer:
    """Stand-in for ui.timer: ticks only when the test says so."""

    def __init__(self, interval_s: float, cb: Callable[[], None]) -> None:
        self.interval_s = interval_s
        self._cb = cb
        self.cancelled = False
        self.cancel_calls = 0

    def cancel(self) -> None:
        self.cancelled = True
        self.cancel_calls += 1

    def tick(self) -> None:
        if not self.cancelled:
            self._cb()


class TimerRecorder:
    """timer_factory that remembers every DummyTimer it created."""

    def __init__(self) -> None:
        self.timers: List[DummyTimer] = []

    def __call__(self, interval_s: float, cb: Callable[[], None]) -> DummyTimer:
        timer = DummyTimer(interval_s, cb)
        self.timers.append(timer)
        return timer

    @property
    def last(self) -> DummyTimer:
        return self.timers[-1]


@pytest.fixture
def bus() -> Generator[EventBus, None, None]:
    """Create an EventBus instance for testing.

    Buses are created directly (not via get_event_bus) to avoid needing a
    NiceGUI client context.
    """
    test_bus = EventBus(client_id="test-client", config=BusConfig(trace=False))
    yield test_bus


@pytest.fixture
def timer_factory() -> TimerRecorder:
    return TimerRecorder()
