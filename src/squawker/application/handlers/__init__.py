"""Event handler module."""

from typing import Protocol, runtime_checkable

from squawker.domain.entities.event import Event


@runtime_checkable
class EventHandler(Protocol):
    """Protocol for event handlers."""

    async def handle(self, event: Event) -> None:
        """Handle an event.

        Args:
            event: The event to handle.
        """
        ...
