"""Events delivered by the push transport."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Literal

import ulid
from pydantic import BaseModel, Field


class EventType(str, Enum):
    """Event type enumeration."""

    PUSH = "push"
    NEW_TOKEN = "new_token"


class Event(BaseModel):
    """Base class for all events."""

    id: str = Field(default_factory=lambda: str(ulid.new()))
    type: EventType
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    source: str
    payload: dict[str, Any] = Field(default_factory=dict)

    def get_identity_key(self) -> str:
        """Return the identity key for deduplication."""
        return self.id


class PushEvent(Event):
    """A received push message.

    The payload carries the sender under `from` and the squawk fields under
    `data`. Repeated pushes are never collapsed, so the identity key is the
    event id.
    """

    type: Literal[EventType.PUSH] = EventType.PUSH
    source: Literal["push"] = "push"

    @property
    def sender(self) -> str | None:
        """Return the sender reported by the transport, if any."""
        return self.payload.get("from")

    @property
    def data(self) -> dict[str, Any]:
        """Return the data payload of the push message."""
        data = self.payload.get("data")
        return data if isinstance(data, dict) else {}


class TokenEvent(Event):
    """A refreshed push registration token."""

    type: Literal[EventType.NEW_TOKEN] = EventType.NEW_TOKEN
    source: Literal["push"] = "push"

    @property
    def token(self) -> str | None:
        """Return the new registration token."""
        return self.payload.get("token")

    def get_identity_key(self) -> str:
        """Return fixed identity key so only the latest token is processed."""
        return "token"
