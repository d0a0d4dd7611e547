"""Controller for the timer-driven forecast refresh on the home page.

Every timer tick starts a detached refresh. Nothing awaits it, so its outcome
is routed through `attach()`: errors land in the Last-Error state and are shown
in the page's error banner instead of escaping to the global handler.

Flow:
    1. User clicks Start -> RefreshView emits StartRefresh(phase="intent")
    2. Controller arms a TimerSubscription and emits RefreshStateChanged
    3. Each tick -> attach(self._refresh, on_success=None, on_failure=self.record_error)
    4. Refresh yields, awaits fetch(), then updates state on the UI dispatch context
    5. RefreshStateChanged -> RefreshBindings update the view
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Awaitable, Callable, List, Optional, Sequence

from asyncvoid.core.detached import attach
from asyncvoid.core.dispatch import UiDispatcher
from asyncvoid.core.utils.logging import get_logger
from asyncvoid.core.weather import WeatherForecast
from asyncvoid.gui.bus import EventBus
from asyncvoid.gui.config import DEFAULT_REFRESH_INTERVAL_S, ERROR_TIME_FORMAT
from asyncvoid.gui.events import DismissError, RefreshPhase, RefreshStateChanged, StartRefresh
from asyncvoid.gui.timer_subscription import TimerFactory, TimerSubscription

logger = get_logger(__name__)

FetchFn = Callable[[], Awaitable[Sequence[WeatherForecast]]]


@dataclass(frozen=True)
class LastError:
    """Most recent refresh failure."""

    message: str
    timestamp: datetime

    def __str__(self) -> str:
        return f"{self.message} at {self.timestamp.strftime(ERROR_TIME_FORMAT)}"


class RefreshController:
    """Own the refresh timer and the Last-Error state of one client.

    State machine: IDLE -> ARMED -> (tick) -> REFRESHING -> ARMED ..., terminal DISPOSED.

    Failed ticks never stop the timer. Disposal stops new ticks; refreshes
    already in flight still run to completion, but their results and errors
    are dropped.

    Attributes:
        _fetch: Async data-fetch collaborator.
        _bus: Per-client EventBus.
        _subscription: Active timer subscription while armed.
        _in_flight: Number of refreshes between their first yield and completion.
    """

    def __init__(
        self,
        fetch: FetchFn,
        bus: EventBus,
        *,
        timer_factory: TimerFactory,
        interval_s: float = DEFAULT_REFRESH_INTERVAL_S,
        dispatcher: Optional[UiDispatcher] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """Initialize the controller and subscribe to StartRefresh / DismissError intents.

        Args:
            fetch: Coroutine function returning the latest forecasts; may raise.
            bus: EventBus instance for this client.
            timer_factory: ``(interval_s, callback) -> timer`` with ``cancel()``.
            interval_s: Tick period in seconds.
            dispatcher: UI dispatch context. Defaults to the running loop.
            clock: Source of error timestamps.
        """
        self._fetch = fetch
        self._bus = bus
        self._timer_factory = timer_factory
        self._interval_s = interval_s
        self._dispatcher = dispatcher or UiDispatcher()
        self._clock = clock

        self._phase: RefreshPhase = RefreshPhase.IDLE
        self._subscription: Optional[TimerSubscription] = None
        self._in_flight: int = 0

        self._message: str = ""
        self._forecasts: List[WeatherForecast] = []
        self._last_error: Optional[LastError] = None

        bus.subscribe_intent(StartRefresh, self._on_start_refresh)
        bus.subscribe_intent(DismissError, self._on_dismiss_error)

    # -----------------------------
    # Observable state
    # -----------------------------
    @property
    def phase(self) -> RefreshPhase:
        return self._phase

    @property
    def interval_s(self) -> float:
        return self._interval_s

    @property
    def message(self) -> str:
        return self._message

    @property
    def forecasts(self) -> List[WeatherForecast]:
        return list(self._forecasts)

    @property
    def last_error(self) -> Optional[LastError]:
        return self._last_error

    def snapshot(self) -> RefreshStateChanged:
        return RefreshStateChanged(
            refresh_phase=self._phase,
            message=self._message,
            forecasts=tuple(self._forecasts),
            last_error=str(self._last_error) if self._last_error is not None else None,
        )

    # -----------------------------
    # Lifecycle
    # -----------------------------
    def start(self) -> None:
        """Arm the periodic timer. No-op while armed; ignored after dispose()."""
        if self._phase is RefreshPhase.DISPOSED:
            logger.warning("start() called on a disposed RefreshController, ignoring")
            return
        if self._subscription is not None:
            logger.debug("refresh timer already armed")
            return

        self._subscription = TimerSubscription(self._timer_factory, self._interval_s, self.tick)
        self._phase = RefreshPhase.ARMED
        logger.info(f"refresh timer armed (interval_s={self._interval_s})")
        self._request_ui_refresh()

    def dispose(self) -> None:
        """Stop ticking and release bus subscriptions. Safe to call more than once."""
        if self._phase is RefreshPhase.DISPOSED:
            return
        self._phase = RefreshPhase.DISPOSED

        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None

        self._bus.unsubscribe_intent(StartRefresh, self._on_start_refresh)
        self._bus.unsubscribe_intent(DismissError, self._on_dismiss_error)

        if self._in_flight:
            logger.info(f"disposed with {self._in_flight} refresh(es) in flight; their outcome will be dropped")
        else:
            logger.info("refresh controller disposed")

    def __enter__(self) -> "RefreshController":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.dispose()

    # -----------------------------
    # Ticks
    # -----------------------------
    def tick(self) -> "Optional[asyncio.Task[None]]":
        """Timer callback: start one detached refresh and return its handle."""
        if self._phase is RefreshPhase.DISPOSED:
            return None
        return attach(
            self._refresh,
            on_success=None,
            on_failure=self.record_error,
            name="RefreshController.refresh",
        )

    async def _refresh(self) -> None:
        # yield before doing any work
        await asyncio.sleep(0)
        self._dispatcher.invoke(self._begin_refresh)
        try:
            forecasts = await self._fetch()
        finally:
            self._dispatcher.invoke(self._end_refresh)
        self._dispatcher.invoke(self._apply_forecasts, list(forecasts))

    def _begin_refresh(self) -> None:
        self._in_flight += 1
        if self._phase is RefreshPhase.ARMED:
            self._phase = RefreshPhase.REFRESHING

    def _end_refresh(self) -> None:
        self._in_flight = max(0, self._in_flight - 1)
        if self._in_flight == 0 and self._phase is RefreshPhase.REFRESHING:
            self._phase = RefreshPhase.ARMED

    def _apply_forecasts(self, forecasts: List[WeatherForecast]) -> None:
        if self._phase is RefreshPhase.DISPOSED:
            logger.debug("dropping refresh result that arrived after dispose()")
            return
        self._forecasts = forecasts
        self._message = f"{len(forecasts)} forecasts updated at {self._clock().strftime(ERROR_TIME_FORMAT)}"
        self._request_ui_refresh()

    # -----------------------------
    # Last-Error state
    # -----------------------------
    def record_error(self, exc: Exception) -> None:
        """Failure continuation of every refresh: store and display the error."""
        self._dispatcher.invoke(self._store_error, exc)

    def _store_error(self, exc: Exception) -> None:
        if self._phase is RefreshPhase.DISPOSED:
            logger.debug(f"dropping refresh error that arrived after dispose(): {exc}")
            return
        self._last_error = LastError(message=str(exc) or type(exc).__name__, timestamp=self._clock())
        logger.warning(f"refresh failed: {self._last_error}")
        self._request_ui_refresh()

    def clear_error(self) -> None:
        if self._last_error is None:
            return
        self._last_error = None
        self._request_ui_refresh()

    def _request_ui_refresh(self) -> None:
        self._bus.emit(self.snapshot())

    # -----------------------------
    # Bus handlers
    # -----------------------------
    def _on_start_refresh(self, e: StartRefresh) -> None:
        self.start()

    def _on_dismiss_error(self, e: DismissError) -> None:
        self.clear_error()
