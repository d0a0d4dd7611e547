"""Event bus with per-client isolation.

Each NiceGUI client (browser tab/window) gets its own EventBus so that
subscriptions made by one client's controllers never see another client's
events.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, DefaultDict, Dict, List, Type, TypeVar

from nicegui import ui

from asyncvoid.core.utils.logging import get_logger

logger = get_logger(__name__)

TEvent = TypeVar("TEvent")
Handler = Callable[[Any], None]

# Key: client ID, Value: EventBus instance
_CLIENT_BUSES: Dict[str, "EventBus"] = {}


@dataclass(frozen=True, slots=True)
class BusConfig:
    """Configuration for EventBus behavior.

    Attributes:
        trace: If True, log all event emissions and handler executions.
    """

    trace: bool = False


class EventBus:
    """A typed event bus for explicit GUI signal flow.

    Events are routed synchronously to all subscribers for a concrete event
    type. Events carrying a ``phase`` attribute ("intent" or "state") can be
    subscribed per phase with `subscribe_intent` / `subscribe_state`.

    Attributes:
        _config: Bus configuration (trace mode).
        _subs: Map from event type to list of handlers.
        _client_id: Client identifier for this bus instance.
    """

    def __init__(self, client_id: str, config: BusConfig | None = None) -> None:
        self._config: BusConfig = config or BusConfig()
        self._subs: DefaultDict[Type[Any], List[Handler]] = DefaultDict(list)
        self._phase_handlers: Dict[tuple, Handler] = {}
        self._client_id: str = client_id
        logger.debug(f"[bus] Created EventBus for client {client_id}")

    @property
    def client_id(self) -> str:
        return self._client_id

    def subscribe(self, event_type: Type[TEvent], handler: Callable[[TEvent], None]) -> None:
        """Subscribe a handler for a specific concrete event type.

        Subscribing the same handler twice for the same event type has no effect.
        """
        handlers = self._subs[event_type]
        if handler in handlers:
            logger.debug(
                f"[bus] Handler {_name(handler)} already subscribed to {event_type.__name__}, skipping"
            )
            return
        handlers.append(handler)
        logger.debug(
            f"[bus] Subscribed {_name(handler)} to {event_type.__name__} "
            f"(client={self._client_id}, total_handlers={len(handlers)})"
        )

    def unsubscribe(self, event_type: Type[TEvent], handler: Callable[[TEvent], None]) -> None:
        """Unsubscribe a handler. Safe to call even if it was never subscribed."""
        handlers = self._subs.get(event_type)
        if not handlers:
            return
        try:
            handlers.remove(handler)
            logger.debug(
                f"[bus] Unsubscribed {_name(handler)} from {event_type.__name__} "
                f"(client={self._client_id}, remaining_handlers={len(handlers)})"
            )
        except ValueError:
            pass

    def subscribe_intent(self, event_type: Type[TEvent], handler: Callable[[TEvent], None]) -> None:
        """Subscribe to events of ``event_type`` whose phase is "intent"."""
        self._subscribe_phase(event_type, handler, "intent")

    def subscribe_state(self, event_type: Type[TEvent], handler: Callable[[TEvent], None]) -> None:
        """Subscribe to events of ``event_type`` whose phase is "state"."""
        self._subscribe_phase(event_type, handler, "state")

    def unsubscribe_intent(self, event_type: Type[TEvent], handler: Callable[[TEvent], None]) -> None:
        self._unsubscribe_phase(event_type, handler, "intent")

    def unsubscribe_state(self, event_type: Type[TEvent], handler: Callable[[TEvent], None]) -> None:
        self._unsubscribe_phase(event_type, handler, "state")

    def _subscribe_phase(self, event_type: Type[Any], handler: Handler, phase: str) -> None:
        key = (event_type, handler, phase)
        if key in self._phase_handlers:
            return

        def _filtered(event: Any) -> None:
            if getattr(event, "phase", None) == phase:
                handler(event)

        _filtered.__qualname__ = f"{_name(handler)}[{phase}]"
        self._phase_handlers[key] = _filtered
        self.subscribe(event_type, _filtered)

    def _unsubscribe_phase(self, event_type: Type[Any], handler: Handler, phase: str) -> None:
        filtered = self._phase_handlers.pop((event_type, handler, phase), None)
        if filtered is not None:
            self.unsubscribe(event_type, filtered)

    def emit(self, event: Any) -> None:
        """Emit an event to all subscribed handlers.

        Events are delivered synchronously in subscription order. If a handler
        raises, it is logged and the remaining handlers still run.
        """
        etype = type(event)
        handlers = list(self._subs.get(etype, []))

        if self._config.trace:
            logger.info(f"[bus] emit {etype.__name__}: {event} (client={self._client_id}, handlers={len(handlers)})")

        for h in handlers:
            if self._config.trace:
                logger.info(f"[bus] -> {etype.__name__} handled by {_name(h)} (client={self._client_id})")
            try:
                h(event)
            except Exception:
                logger.exception(
                    f"[bus] Exception in handler {_name(h)} for {etype.__name__} (client={self._client_id})"
                )

    def clear(self) -> None:
        """Remove all subscriptions. The bus instance stays usable."""
        count = sum(len(handlers) for handlers in self._subs.values())
        self._subs.clear()
        self._phase_handlers.clear()
        logger.debug(f"[bus] Cleared {count} subscriptions (client={self._client_id})")


def _name(handler: Any) -> str:
    return getattr(handler, "__qualname__", repr(handler))


def get_client_id() -> str:
    """Get the current NiceGUI client ID, or "default" outside a client context."""
    try:
        if hasattr(ui.context, "client") and hasattr(ui.context.client, "id"):
            return str(ui.context.client.id)
    except (AttributeError, RuntimeError):
        # no client context (e.g. during testing)
        pass
    return "default"


def get_event_bus(config: BusConfig | None = None) -> EventBus:
    """Get or create the EventBus for the current NiceGUI client.

    Must be called within a NiceGUI request context (page function). For
    testing, create EventBus instances directly.
    """
    client_id = get_client_id()

    if client_id not in _CLIENT_BUSES:
        _CLIENT_BUSES[client_id] = EventBus(client_id, config)
        logger.info(f"[bus] Created new EventBus for client {client_id}")

    return _CLIENT_BUSES[client_id]


def release_client_bus(client_id: str) -> None:
    """Clear and forget the bus of a client that went away."""
    bus = _CLIENT_BUSES.pop(client_id, None)
    if bus is not None:
        bus.clear()
        logger.debug(f"[bus] Released bus for client {client_id}")
