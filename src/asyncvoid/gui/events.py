"""Event definitions for the refresh page.

Intent events are emitted by views when the user does something; state
events are emitted by the controller after its state changed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Literal, Optional, Tuple

if TYPE_CHECKING:
    from asyncvoid.core.weather import WeatherForecast

EventPhase = Literal["intent", "state"]


class RefreshPhase(str, Enum):
    """Lifecycle of the timer-driven refresh controller."""

    IDLE = "idle"
    ARMED = "armed"
    REFRESHING = "refreshing"
    DISPOSED = "disposed"


@dataclass(frozen=True, slots=True)
class StartRefresh:
    """User wants the periodic refresh to start (intent).

    Attributes:
        phase: Only "intent" is emitted; the resulting state arrives as RefreshStateChanged.
    """

    phase: EventPhase = "intent"


@dataclass(frozen=True, slots=True)
class DismissError:
    """User dismissed the error banner (intent)."""

    phase: EventPhase = "intent"


@dataclass(frozen=True, slots=True)
class RefreshStateChanged:
    """Snapshot of the refresh controller, emitted whenever the UI should refresh.

    Attributes:
        refresh_phase: Current controller lifecycle phase.
        message: Display message ("" before the first successful refresh).
        forecasts: Forecasts from the last successful refresh.
        last_error: "{message} at {time}" of the most recent failure, or None.
        phase: Always "state".
    """

    refresh_phase: RefreshPhase
    message: str
    forecasts: Tuple["WeatherForecast", ...] = field(default_factory=tuple)
    last_error: Optional[str] = None
    phase: EventPhase = "state"

    @property
    def armed(self) -> bool:
        return self.refresh_phase in (RefreshPhase.ARMED, RefreshPhase.REFRESHING)
