"""Topic transport implementations."""

from squawker.infrastructure.transport.http_transport import (
    HttpTopicTransport,
    create_transport,
)
from squawker.infrastructure.transport.in_memory_transport import (
    InMemoryTopicTransport,
)

__all__ = ["HttpTopicTransport", "InMemoryTopicTransport", "create_transport"]
