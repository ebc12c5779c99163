"""Squawk entity for message persistence."""

from sqlalchemy import Column, Integer, String
from sqlmodel import Field, SQLModel

from squawker.domain.contract import (
    COLUMN_AUTHOR,
    COLUMN_AUTHOR_KEY,
    COLUMN_DATE,
    COLUMN_ID,
    COLUMN_MESSAGE,
    TABLE_NAME,
)


class Squawk(SQLModel, table=True):
    """A single short message.

    Attributes:
        id: Store-assigned id (column `_id`), never reused.
        author: Display name of the author.
        author_key: Stable author identifier (column `authorKey`), used for
            filtering and topic subscription.
        message: Message text, trimmed of surrounding whitespace.
        date: Integer timestamp.
    """

    __tablename__ = TABLE_NAME
    __table_args__ = {"sqlite_autoincrement": True}

    id: int | None = Field(
        default=None,
        sa_column=Column(COLUMN_ID, Integer, primary_key=True, autoincrement=True),
    )
    author: str = Field(sa_column=Column(COLUMN_AUTHOR, String, nullable=False))
    author_key: str = Field(
        sa_column=Column(COLUMN_AUTHOR_KEY, String, nullable=False, index=True)
    )
    message: str = Field(sa_column=Column(COLUMN_MESSAGE, String, nullable=False))
    date: int = Field(sa_column=Column(COLUMN_DATE, Integer, nullable=False))
