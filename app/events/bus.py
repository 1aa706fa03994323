"""
In-process publish/subscribe bus used to keep categories and products in sync.

Publishing is fire-and-forget: every subscribed handler is scheduled as a
background task on the running event loop and the publisher returns at once.
A handler failure is logged here and never reaches the publisher or the other
handlers. Nothing is retried or persisted.
"""

import asyncio
from collections import defaultdict
from typing import Awaitable, Callable, DefaultDict, List, Set

from app.core.logger import logger
from app.core.telemetry import handler_span
from app.events.schemas import AnyCatalogEvent, CatalogEvent, EventType

EventHandler = Callable[[AnyCatalogEvent], Awaitable[None]]


class EventBus:
    """Explicitly constructed bus shared by the services of one application"""

    def __init__(self):
        self._subscribers: DefaultDict[EventType, List[EventHandler]] = defaultdict(list)
        self._pending: Set[asyncio.Task] = set()

    def subscribe(self, event_type: EventType, handler: EventHandler) -> None:
        """Register `handler` for every future publish of `event_type`"""
        self._subscribers[event_type].append(handler)
        logger.debug(
            f"Subscribed {_handler_name(handler)} to {event_type.value}",
            metadata={"event": "bus_subscribe", "event_type": event_type.value}
        )

    def subscribers(self, event_type: EventType) -> List[EventHandler]:
        return list(self._subscribers.get(event_type, []))

    def publish(self, event: CatalogEvent) -> None:
        """
        Schedule every handler registered for the event's type.

        Handlers are scheduled in registration order. Must be called from
        within a running event loop.
        """
        handlers = self.subscribers(event.event_type)

        logger.debug(
            f"Publishing {event.event_type.value}",
            metadata={
                "event": "bus_publish",
                "event_type": event.event_type.value,
                "payload": event.payload(),
                "handlers": len(handlers),
            }
        )

        for handler in handlers:
            task = asyncio.create_task(self._dispatch(handler, event))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

    async def _dispatch(self, handler: EventHandler, event: CatalogEvent) -> None:
        name = _handler_name(handler)
        with handler_span(event.event_type.value, name, event.payload()) as span:
            try:
                await handler(event)
            except Exception as e:
                span.record_exception(e)
                self._log_failure(name, event, e)

    def _log_failure(self, name: str, event: CatalogEvent, e: Exception) -> None:
        logger.error(
            f"Handler {name} failed for {event.event_type.value}",
            error=e,
            metadata={
                "event": "bus_handler_failed",
                "event_type": event.event_type.value,
                "payload": event.payload(),
            }
        )

    @property
    def pending(self) -> int:
        """Number of handler tasks still running"""
        return len(self._pending)

    async def drain(self) -> None:
        """Wait until every scheduled handler has finished"""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)


def _handler_name(handler: EventHandler) -> str:
    return getattr(handler, "__qualname__", repr(handler))
