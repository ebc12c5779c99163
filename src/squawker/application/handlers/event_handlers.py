"""Event handler implementations."""

from structlog.stdlib import BoundLogger

from squawker.application.handlers import EventHandler
from squawker.application.services.ingestion import SquawkIngestionService
from squawker.domain.entities.event import Event, EventType, PushEvent, TokenEvent
from squawker.domain.gateways.topic_transport import TopicTransport


class PushEventHandler:
    """Handler for received push messages."""

    def __init__(self, ingestion: SquawkIngestionService, logger: BoundLogger) -> None:
        self._ingestion = ingestion
        self._logger = logger

    async def handle(self, event: Event) -> None:
        """Ingest the data payload of a push event.

        Raises:
            ValidationError: If the data payload is missing a field.
        """
        data = event.data if isinstance(event, PushEvent) else {}
        sender = event.sender if isinstance(event, PushEvent) else None
        self._logger.info("Push received", sender=sender, event_id=event.id)
        await self._ingestion.ingest(data)


class TokenEventHandler:
    """Handler for refreshed registration tokens."""

    def __init__(self, transport: TopicTransport, logger: BoundLogger) -> None:
        self._transport = transport
        self._logger = logger

    async def handle(self, event: Event) -> None:
        token = event.token if isinstance(event, TokenEvent) else None
        if not token:
            self._logger.warning("Token event without token", event_id=event.id)
            return
        self._logger.debug("Refreshed token", token=token)
        self._transport.update_token(token)


class EventHandlerRegistry:
    """Registry for event handlers."""

    def __init__(self) -> None:
        """Initialize the registry."""
        self._handlers: dict[EventType, EventHandler] = {}

    def register(self, event_type: EventType, handler: EventHandler) -> None:
        """Register a handler for an event type.

        Args:
            event_type: The event type to handle.
            handler: The handler to register.
        """
        self._handlers[event_type] = handler

    def get_handler(self, event_type: EventType) -> EventHandler | None:
        """Get handler for an event type.

        Args:
            event_type: The event type.

        Returns:
            The handler if registered, None otherwise.
        """
        return self._handlers.get(event_type)
