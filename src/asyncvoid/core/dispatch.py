"""Marshal UI state mutations onto the UI's event loop."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Optional

from asyncvoid.core.utils.logging import get_logger

logger = get_logger(__name__)


class UiDispatcher:
    """Single dispatch context for UI-observable state.

    NiceGUI runs every client on one asyncio loop. Code that resumes on that
    loop may mutate state directly; code running anywhere else (worker
    threads, executor callbacks) must go through `invoke()`.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop: asyncio.AbstractEventLoop = loop or asyncio.get_running_loop()

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop

    def is_current(self) -> bool:
        try:
            return asyncio.get_running_loop() is self._loop
        except RuntimeError:
            return False

    def invoke(self, fn: Callable[..., Any], *args: Any) -> None:
        """Run ``fn(*args)`` now if on the dispatch context, else schedule it there."""
        if self.is_current():
            fn(*args)
            return
        if self._loop.is_closed():
            logger.warning(f"dropping {getattr(fn, '__qualname__', fn)}: dispatch loop is closed")
            return
        self._loop.call_soon_threadsafe(fn, *args)
