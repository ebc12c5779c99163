"""Inbound push payload model."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from squawker.domain.contract import (
    COLUMN_AUTHOR,
    COLUMN_AUTHOR_KEY,
    COLUMN_DATE,
    COLUMN_MESSAGE,
)

# SQLite INTEGER is a signed 64-bit value.
SQLITE_INTEGER_MIN = -(2**63)
SQLITE_INTEGER_MAX = 2**63 - 1


class SquawkPayload(BaseModel):
    """One squawk as delivered by the push transport.

    The transport sends a flat string map; `date` arrives as a string-encoded
    integer and is parsed here. The message is trimmed of surrounding
    whitespace.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    author: str
    author_key: str = Field(alias=COLUMN_AUTHOR_KEY)
    message: str
    date: int = Field(ge=SQLITE_INTEGER_MIN, le=SQLITE_INTEGER_MAX)

    @field_validator("message")
    @classmethod
    def _trim_message(cls, value: str) -> str:
        return value.strip()

    def to_values(self) -> dict[str, Any]:
        """Return the payload as store column values."""
        return {
            COLUMN_AUTHOR: self.author,
            COLUMN_AUTHOR_KEY: self.author_key,
            COLUMN_MESSAGE: self.message,
            COLUMN_DATE: self.date,
        }
