"""
In-process EventBus

Synchronous publish/subscribe for domain events. Mutating components
publish once their write is durable; notification routing, the suspension
policy and any future collaborators subscribe independently instead of
being wired into the state machine.

Fun fact: This is the "observer" pattern from the Gang of Four book (1994).
Swapping it for a broker later does not touch any engine code.
"""

from collections import defaultdict
from typing import Callable

from gigflow.kernel.events import DomainEvent
from gigflow.kernel.logging import get_logger

logger = get_logger(__name__)


EventHandler = Callable[[DomainEvent], None]


class EventBus:
    """
    Simple synchronous in-process bus

    Handlers run in registration order on the publisher's thread, so every
    side effect has happened (or been logged as failed) by the time the
    mutating call returns. A failing handler never affects the publisher
    or the other handlers.
    """

    def __init__(self) -> None:
        self._handlers: defaultdict[str, list[EventHandler]] = defaultdict(list)
        logger.debug("EventBus initialized")

    def subscribe(
        self, event_type: type[DomainEvent] | str, handler: EventHandler
    ) -> None:
        """
        Register a handler (can have multiple per event type)

        Args:
            event_type: DomainEvent subclass or its name
            handler: Callable invoked with each published event of that type
        """
        name = event_type if isinstance(event_type, str) else event_type.__name__
        self._handlers[name].append(handler)
        logger.debug(
            "Event handler registered",
            event_type=name,
            total_handlers=len(self._handlers[name]),
        )

    def publish(self, event: DomainEvent) -> None:
        """
        Publish an event to all registered handlers

        Handler exceptions are caught and logged. Side effects are
        best-effort and must never roll back the mutation that produced
        the event.
        """
        handlers = self._handlers.get(event.event_type, [])

        if not handlers:
            logger.debug("No handlers registered for event type", **event.log_context())
            return

        logger.debug(
            "Publishing event",
            handler_count=len(handlers),
            **event.log_context(),
        )

        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                logger.error(
                    "Event handler failed",
                    handler=getattr(handler, "__qualname__", repr(handler)),
                    error=str(e),
                    exc_info=True,
                    **event.log_context(),
                )

    def publish_all(self, events: list[DomainEvent]) -> None:
        """Publish multiple events in order"""
        for event in events:
            self.publish(event)

    def get_event_types(self) -> list[str]:
        """Event types with at least one subscriber"""
        return list(self._handlers.keys())

    def clear(self) -> None:
        """Remove all subscriptions (useful for testing)"""
        count = len(self._handlers)
        self._handlers.clear()
        logger.info("Bus cleared", event_handlers_removed=count)
