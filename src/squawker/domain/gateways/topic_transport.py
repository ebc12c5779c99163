"""TopicTransport protocol."""

from typing import Protocol


class TopicTransport(Protocol):
    """Pub/sub transport that manages topic subscriptions for this device.

    There is one topic per author key.
    """

    async def subscribe(self, topic: str) -> None:
        """Subscribe to a topic.

        Raises:
            TopicTransportError: If the transport rejects the call.
        """
        ...

    async def unsubscribe(self, topic: str) -> None:
        """Unsubscribe from a topic.

        Raises:
            TopicTransportError: If the transport rejects the call.
        """
        ...

    def update_token(self, token: str) -> None:
        """Replace the registration token used for later calls."""
        ...

    async def close(self) -> None:
        """Release transport resources."""
        ...
