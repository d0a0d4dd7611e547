"""Scoped ownership of a periodic UI timer."""

from __future__ import annotations

from typing import Any, Callable, Optional

from asyncvoid.core.utils.logging import get_logger

logger = get_logger(__name__)

TimerFactory = Callable[[float, Callable[[], None]], Any]


class TimerSubscription:
    """A periodic timer that is guaranteed to be cancelled when the scope ends.

    ``timer_factory(interval_s, callback)`` creates and starts the timer and
    returns an object with ``cancel()`` (a NiceGUI ``ui.timer`` in the app, a
    dummy in tests). Use as a context manager or call `close()`; closing is
    idempotent and also silences ticks the timer may still deliver.

        with TimerSubscription(factory, 2.0, on_tick) as sub:
            ...
    """

    def __init__(self, timer_factory: TimerFactory, interval_s: float, callback: Callable[[], None]) -> None:
        if interval_s <= 0:
            raise ValueError(f"interval_s must be positive, got {interval_s}")
        self._callback = callback
        self._closed = False
        self._timer: Optional[Any] = timer_factory(interval_s, self._on_tick)
        logger.debug(f"timer armed (interval_s={interval_s})")

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        timer, self._timer = self._timer, None
        if timer is not None:
            try:
                timer.cancel()
            except Exception:
                logger.exception("failed to cancel timer")
        logger.debug("timer released")

    def _on_tick(self) -> None:
        if self._closed:
            return
        self._callback()

    def __enter__(self) -> "TimerSubscription":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
