"""Preference entity for persisted boolean toggles."""

from sqlmodel import Field, SQLModel


class Preference(SQLModel, table=True):
    """A persisted boolean user preference keyed by name."""

    __tablename__ = "preferences"

    key: str = Field(primary_key=True)
    value: bool = Field(default=False)
