"""In-memory topic transport for development and testing."""

from squawker.domain.errors import TopicTransportError


class InMemoryTopicTransport:
    """Topic transport that records subscriptions without network calls."""

    def __init__(self, fail_topics: set[str] | None = None) -> None:
        """Initialize the transport.

        Args:
            fail_topics: Topics whose calls raise TopicTransportError.
        """
        self._fail_topics = set(fail_topics or ())
        self.topics: set[str] = set()
        self.token: str | None = None
        self.calls: list[tuple[str, str]] = []

    async def subscribe(self, topic: str) -> None:
        self.calls.append(("subscribe", topic))
        if topic in self._fail_topics:
            raise TopicTransportError(f"Subscribe to {topic} failed", topic=topic)
        self.topics.add(topic)

    async def unsubscribe(self, topic: str) -> None:
        self.calls.append(("unsubscribe", topic))
        if topic in self._fail_topics:
            raise TopicTransportError(f"Unsubscribe from {topic} failed", topic=topic)
        self.topics.discard(topic)

    def update_token(self, token: str) -> None:
        self.token = token

    async def close(self) -> None:
        return None
