"""In-process event bus between the engine service and its listeners."""

import logging
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

INSTRUCTION_RUN = "instruction_run"
INSTRUCTION_UNDONE = "instruction_undone"
GATE_EVALUATED = "gate_evaluated"


class EventBus:
    """Synchronous publish/subscribe keyed by event type."""

    def __init__(self):
        self.listeners: Dict[str, List[Callable]] = {}

    def subscribe(self, event_type: str, callback: Callable):
        self.listeners.setdefault(event_type, []).append(callback)
        logger.debug(f"Subscribed to event: {event_type}")

    def unsubscribe(self, event_type: str, callback: Callable):
        if event_type in self.listeners:
            try:
                self.listeners[event_type].remove(callback)
                logger.debug(f"Unsubscribed from event: {event_type}")
            except ValueError:
                logger.warning(f"Callback not found for event: {event_type}")

    def publish(self, event_type: str, data: Any = None):
        """Deliver ``data`` to every subscriber.

        A failing listener is logged and skipped; engine state has already
        been committed by the time events are published.
        """
        for callback in list(self.listeners.get(event_type, [])):
            try:
                callback(data)
            except Exception:
                logger.exception(f"Error in event callback for {event_type}")
        logger.debug(f"Published event: {event_type}")

    def clear_listeners(self, event_type: str = None):
        if event_type:
            self.listeners.pop(event_type, None)
        else:
            self.listeners.clear()

    def get_listener_count(self, event_type: str) -> int:
        return len(self.listeners.get(event_type, []))
