"""Alert entity for the single user-visible notification slot."""

from datetime import datetime, timezone

from pydantic import BaseModel, Field

# Every alert shares this id, so a new alert replaces the displayed one.
ALERT_ID = 0


class Alert(BaseModel):
    """A user-facing alert raised for an ingested squawk."""

    id: int = ALERT_ID
    channel_id: str
    title: str
    body: str
    # Route opened when the alert is tapped
    target: str = "/"
    auto_cancel: bool = True
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
