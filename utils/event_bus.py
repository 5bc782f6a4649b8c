"""
Simple asynchronous event bus connecting the shared dashboard state to the
mounted orchestrators.
"""

import asyncio
import logging
from collections.abc import Callable, Coroutine
from typing import Any

from models.enums import DashboardEventType
from models.events import DashboardEvent

logger_event_bus = logging.getLogger(__name__)

EventCallback = Callable[[DashboardEvent], Coroutine[Any, Any, None]]


class EventBus:
    """Publish/subscribe hub for dashboard state-change events."""

    def __init__(self):
        self.subscribers: dict[DashboardEventType, list[EventCallback]] = {}

    def subscribe(self, event_type: DashboardEventType, callback: EventCallback) -> None:
        """Subscribe to an event type."""
        if not callable(callback):
            raise TypeError("Callback must be a callable async function.")
        callbacks = self.subscribers.setdefault(event_type, [])
        if callback not in callbacks:
            callbacks.append(callback)
            logger_event_bus.debug(f"Callback {_name(callback)} subscribed to {event_type.value}")
        else:
            logger_event_bus.warning(f"Callback {_name(callback)} already subscribed to {event_type.value}")

    def unsubscribe(self, event_type: DashboardEventType, callback: EventCallback) -> None:
        """Unsubscribe a specific callback from an event type."""
        if event_type not in self.subscribers:
            return
        try:
            self.subscribers[event_type].remove(callback)
            logger_event_bus.debug(f"Callback {_name(callback)} unsubscribed from {event_type.value}")
            if not self.subscribers[event_type]:
                del self.subscribers[event_type]
        except ValueError:
            logger_event_bus.warning(f"Callback {_name(callback)} not found for event type {event_type.value}")

    def subscriber_count(self, event_type: DashboardEventType) -> int:
        return len(self.subscribers.get(event_type, []))

    async def publish(self, event: DashboardEvent) -> None:
        """Publish an event to subscribers and wait for them to finish.

        A failing subscriber is logged and never stops the others.
        """
        if not isinstance(event, DashboardEvent):
            logger_event_bus.error(f"Attempted to publish invalid event type: {type(event)}")
            return

        logger_event_bus.info(f"Event published: {event.event_type.value} from {event.source.value}")
        # Snapshot, handlers may unsubscribe while running
        callbacks = list(self.subscribers.get(event.event_type, []))
        if not callbacks:
            return
        results = await asyncio.gather(*(callback(event) for callback in callbacks), return_exceptions=True)
        for callback, result in zip(callbacks, results):
            if isinstance(result, Exception):
                logger_event_bus.error(
                    f"Error in subscriber callback '{_name(callback)}' for event {event.event_type.value}: {result}"
                )


def _name(callback: Any) -> str:
    return getattr(callback, "__name__", type(callback).__name__)
