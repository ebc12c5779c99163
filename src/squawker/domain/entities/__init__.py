"""Domain entities."""

from squawker.domain.entities.alert import ALERT_ID, Alert
from squawker.domain.entities.cursor import SquawkCursor, SquawkRow
from squawker.domain.entities.event import Event, EventType, PushEvent, TokenEvent
from squawker.domain.entities.payload import SquawkPayload
from squawker.domain.entities.preference import Preference
from squawker.domain.entities.squawk import Squawk

__all__ = [
    "ALERT_ID",
    "Alert",
    "Event",
    "EventType",
    "Preference",
    "PushEvent",
    "Squawk",
    "SquawkCursor",
    "SquawkPayload",
    "SquawkRow",
    "TokenEvent",
]
