"""Bindings between RefreshView and event bus (state -> view updates)."""

from __future__ import annotations

from asyncvoid.gui.bus import EventBus
from asyncvoid.gui.client_utils import safe_call
from asyncvoid.gui.events import RefreshStateChanged
from asyncvoid.gui.views.refresh_view import RefreshView


class RefreshBindings:
    """Push RefreshStateChanged snapshots into a RefreshView.

    Attributes:
        _bus: EventBus instance for subscribing to events.
        _view: RefreshView instance to update.
        _subscribed: Whether subscriptions are active (for cleanup).
    """

    def __init__(self, bus: EventBus, view: RefreshView) -> None:
        self._bus: EventBus = bus
        self._view: RefreshView = view
        self._subscribed: bool = False

        bus.subscribe_state(RefreshStateChanged, self._on_refresh_state_changed)
        self._subscribed = True

    def teardown(self) -> None:
        if not self._subscribed:
            return
        self._bus.unsubscribe_state(RefreshStateChanged, self._on_refresh_state_changed)
        self._subscribed = False

    def _on_refresh_state_changed(self, e: RefreshStateChanged) -> None:
        # Wrapped in safe_call: a late refresh may land after the client was deleted.
        safe_call(self._view.set_state, e)
