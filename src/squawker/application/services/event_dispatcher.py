"""Routes dequeued events to their handlers."""

from structlog.stdlib import BoundLogger

from squawker.application.handlers.event_handlers import EventHandlerRegistry
from squawker.domain.entities.event import Event


class EventDispatcher:
    """Dispatches each event to the handler registered for its type.

    Each event is handled independently; nothing is carried over between
    events.
    """

    def __init__(self, registry: EventHandlerRegistry, logger: BoundLogger) -> None:
        """Initialize the dispatcher.

        Args:
            registry: Handlers keyed by event type.
            logger: Logger instance.
        """
        self._registry = registry
        self._logger = logger

    async def process(self, event: Event) -> bool:
        """Process an event.

        Args:
            event: The event to process.

        Returns:
            True if a handler ran, False if none is registered.

        Raises:
            Exception: Re-raised from the handler after logging.
        """
        self._logger.info(
            "Processing event",
            event_id=event.id,
            event_type=event.type.value,
        )

        handler = self._registry.get_handler(event.type)
        if handler is None:
            self._logger.warning(
                "No handler found for event type",
                event_type=event.type.value,
            )
            return False

        try:
            await handler.handle(event)
        except Exception as e:
            self._logger.error(
                "Error processing event",
                event_id=event.id,
                error=str(e),
                exc_info=True,
            )
            raise

        self._logger.info("Event processing completed", event_id=event.id)
        return True
