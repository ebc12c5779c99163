"""Infrastructure layer."""

from squawker.infrastructure.alerts import AlertBoard
from squawker.infrastructure.change_notifier import ChangeNotifier
from squawker.infrastructure.event_queue import EventQueue
from squawker.infrastructure.persistence import (
    Database,
    SqlitePreferenceStore,
    SqliteSquawkStore,
    SquawkProvider,
)
from squawker.infrastructure.transport import (
    HttpTopicTransport,
    InMemoryTopicTransport,
    create_transport,
)

__all__ = [
    "AlertBoard",
    "ChangeNotifier",
    "Database",
    "EventQueue",
    "HttpTopicTransport",
    "InMemoryTopicTransport",
    "SqlitePreferenceStore",
    "SqliteSquawkStore",
    "SquawkProvider",
    "create_transport",
]
