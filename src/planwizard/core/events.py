"""Event bus for wizard notifications.

The engine publishes ``wizard.*`` envelopes here; hosts (console driver,
diagnostics sink, embedding UIs) observe navigation without the engine
knowing who listens. A host that lives shorter than the bus, such as one
console session on the process bus, attaches with ``listening()`` so its
handlers are detached when it ends.
"""

from __future__ import annotations

import contextlib
import traceback
from collections import defaultdict
from collections.abc import Callable, Iterator
from typing import Any

from planwizard.core.logging import get_logger

_logger = get_logger(__name__)

EventCallback = Callable[[dict[str, Any]], None]
AnyEventCallback = Callable[[str, dict[str, Any]], None]


class EventBus:
    """Pub/sub for wizard events.

    Example:
        bus = EventBus()
        engine = WizardEngine(steps, event_bus=bus)

        with bus.listening({"wizard.completed": save_plan}):
            run_session(engine)
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[EventCallback]] = defaultdict(list)
        self._all_subscribers: list[AnyEventCallback] = []

    def subscribe(self, event: str, callback: EventCallback) -> None:
        """Call ``callback(data)`` for every ``event`` published."""
        self._subscribers[event].append(callback)

    def unsubscribe(self, event: str, callback: EventCallback) -> None:
        """Remove ``callback`` from ``event``; unknown callbacks are ignored."""
        callbacks = self._subscribers.get(event)
        if callbacks and callback in callbacks:
            callbacks.remove(callback)
            if not callbacks:
                del self._subscribers[event]

    def subscribe_all(self, callback: AnyEventCallback) -> None:
        """Call ``callback(event, data)`` for every event published."""
        self._all_subscribers.append(callback)

    @contextlib.contextmanager
    def listening(self, handlers: dict[str, EventCallback]) -> Iterator[EventBus]:
        """Subscribe ``handlers`` (event name -> callback) for a ``with`` block."""
        for event, callback in handlers.items():
            self.subscribe(event, callback)
        try:
            yield self
        finally:
            for event, callback in handlers.items():
                self.unsubscribe(event, callback)

    def has_subscribers(self, event: str) -> bool:
        return bool(self._subscribers.get(event)) or bool(self._all_subscribers)

    def publish(self, event: str, data: dict[str, Any] | None = None) -> None:
        """Deliver ``event`` to its handlers, then to the catch-all handlers.

        A failing handler is logged at ERROR; the remaining handlers still
        run and the publisher (the engine) never sees the exception.
        """
        data = data or {}

        for cb_event in list(self._subscribers.get(event, [])):
            try:
                cb_event(data)
            except Exception as e:
                _logger.error(
                    f"Handler {cb_event!r} failed on '{event}': "
                    f"{type(e).__name__}: {e}\n{traceback.format_exc()}"
                )

        for cb_all in list(self._all_subscribers):
            try:
                cb_all(event, data)
            except Exception as e:
                _logger.error(
                    f"Catch-all handler {cb_all!r} failed on '{event}': "
                    f"{type(e).__name__}: {e}\n{traceback.format_exc()}"
                )

    def clear(self) -> None:
        self._subscribers.clear()
        self._all_subscribers.clear()


_global_bus: EventBus | None = None


def get_event_bus() -> EventBus:
    """Process-wide bus used by the CLI."""
    global _global_bus
    if _global_bus is None:
        _global_bus = EventBus()
    return _global_bus
