"""Pytest configuration and fixtures for asyncvoid tests."""

from __future__ import annotations

import logging
import random
from typing import Callable, Iterable

import pytest


class ScriptedRandom:
    """Stand-in for random.Random whose randint() replays a fixed script.

    Once the script is down to its last value, that value repeats.
    """

    def __init__(self, randints: Iterable[int]) -> None:
        self._script = list(randints)
        self.calls = 0

    def randint(self, a: int, b: int) -> int:
        self.calls += 1
        value = self._script.pop(0) if len(self._script) > 1 else self._script[0]
        assert a <= value <= b
        return value


@pytest.fixture
def scripted_rng() -> Callable[..., ScriptedRandom]:
    """Factory fixture: scripted_rng(2) makes every randint() return 2."""

    def _make(*randints: int) -> ScriptedRandom:
        return ScriptedRandom(randints)

    return _make


@pytest.fixture
def seeded_rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def restore_root_logging():
    """Undo setup_logging() reconfiguration of the root logger after the test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            handler.close()
            root.removeHandler(handler)
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
