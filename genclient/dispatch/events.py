"""Explicit event channel for dispatch side effects.

Callers own the bus and subscribe the handlers they care about; nothing is
broadcast globally.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable

logger = logging.getLogger(__name__)

PERSONAL_TOKEN_FAILED = "personalTokenFailed"

EventHandler = Callable[[], None]


class EventBus:
    """Named, zero-payload events with synchronous handlers."""

    def __init__(self):
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)

    def subscribe(self, event: str, handler: EventHandler) -> Callable[[], None]:
        """Register ``handler``; returns a function that unsubscribes it."""
        self._handlers[event].append(handler)

        def _unsubscribe() -> None:
            self.unsubscribe(event, handler)

        return _unsubscribe

    def unsubscribe(self, event: str, handler: EventHandler) -> None:
        handlers = self._handlers.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def dispatch(self, event: str) -> int:
        """Invoke every handler for ``event``. Returns the number invoked.

        A failing handler is logged and does not stop the others.
        """
        handlers = list(self._handlers.get(event, []))
        for handler in handlers:
            try:
                handler()
            except Exception:
                logger.exception("Handler for event %s failed", event)
        logger.debug("Dispatched %s to %d handler(s)", event, len(handlers))
        return len(handlers)
