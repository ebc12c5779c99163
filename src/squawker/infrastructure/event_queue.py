"""EventQueue implementation with identity-key supersession."""

import asyncio

from squawker.domain.entities.event import Event


class EventQueue:
    """In-memory FIFO event queue.

    An event whose identity key matches a still-pending event supersedes it;
    the older event is skipped on dequeue. Push events use their own id as
    identity key, so they are never collapsed.
    """

    def __init__(self) -> None:
        """Initialize the event queue."""
        self._queue: asyncio.Queue[Event] = asyncio.Queue()
        self._pending: dict[str, Event] = {}
        # Keyed by event.id so events sharing an identity key can overlap
        self._processing: dict[str, Event] = {}

    @property
    def pending_count(self) -> int:
        """Return the number of pending events."""
        return len(self._pending)

    @property
    def processing_count(self) -> int:
        """Return the number of events being processed."""
        return len(self._processing)

    async def enqueue(self, event: Event) -> None:
        """Add an event to the queue.

        Args:
            event: The event to enqueue.
        """
        self._pending[event.get_identity_key()] = event
        await self._queue.put(event)

    async def dequeue(self) -> Event:
        """Get the next event from the queue.

        Skips stale events (those that have been superseded by newer events
        with the same identity_key).

        Returns:
            The next event to process.
        """
        while True:
            event = await self._queue.get()
            key = event.get_identity_key()

            if key in self._pending and self._pending[key].id == event.id:
                del self._pending[key]
                self._processing[event.id] = event
                return event
            # Superseded; skip it

    def mark_done(self, event: Event) -> None:
        """Mark an event as done processing.

        Args:
            event: The event that has been processed.
        """
        self._processing.pop(event.id, None)
