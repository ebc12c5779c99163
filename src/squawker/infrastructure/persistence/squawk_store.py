"""SQLite implementation of SquawkRepository."""

import asyncio
from collections.abc import Mapping
from typing import Any

from sqlalchemy import delete, text, update
from sqlmodel import select

from squawker.domain.contract import (
    COLUMN_ATTRIBUTES,
    COLUMN_ID,
    DEFAULT_SORT_ORDER,
    MESSAGES_URI,
    message_uri,
)
from squawker.domain.entities.cursor import SquawkCursor
from squawker.domain.entities.squawk import Squawk
from squawker.domain.errors import PersistenceError, SquawkerError, ValidationError
from squawker.domain.services.topic_filter import FollowingPredicate
from squawker.infrastructure.change_notifier import ChangeNotifier
from squawker.infrastructure.persistence.database import Database


def parse_sort_order(sort_order: str) -> list[Any]:
    """Parse a sort order string into SQLAlchemy order clauses.

    Args:
        sort_order: Comma-separated `<column> [ASC|DESC]` terms, using
            column names (e.g. "date DESC, _id ASC").

    Returns:
        Order-by clauses in the given order.

    Raises:
        ValidationError: If a term names an unknown column or direction.
    """
    clauses: list[Any] = []
    for term in sort_order.split(","):
        parts = term.split()
        if not parts:
            continue
        if len(parts) > 2:
            raise ValidationError(f"Invalid sort term: {term.strip()}")

        column = parts[0]
        direction = parts[1].upper() if len(parts) == 2 else "ASC"
        attribute = COLUMN_ATTRIBUTES.get(column)
        if attribute is None:
            raise ValidationError(f"Unknown sort column: {column}")
        if direction not in ("ASC", "DESC"):
            raise ValidationError(f"Invalid sort direction: {parts[1]}")

        field = getattr(Squawk, attribute)
        clauses.append(field.desc() if direction == "DESC" else field.asc())
    return clauses


def _to_attributes(values: Mapping[str, Any], uri: str) -> dict[str, Any]:
    """Map column-keyed values to Squawk attribute names."""
    attributes: dict[str, Any] = {}
    for column, value in values.items():
        attribute = COLUMN_ATTRIBUTES.get(column)
        if attribute is None or column == COLUMN_ID:
            raise PersistenceError(f"Unknown column {column!r} for {uri}", uri=uri)
        attributes[attribute] = value
    return attributes


class SqliteSquawkStore:
    """SQLite implementation of SquawkRepository.

    Uses SQLModel with async SQLite. Writes go through a single-writer lock
    so concurrent inserts get distinct, increasing ids.
    """

    def __init__(self, database: Database, notifier: ChangeNotifier) -> None:
        """Initialize the store.

        Args:
            database: Database instance for session management.
            notifier: Notifier that receives one change per mutation.
        """
        self._database = database
        self._notifier = notifier
        self._write_lock = asyncio.Lock()

    async def insert(self, values: Mapping[str, Any]) -> Squawk:
        """Insert a squawk and return it with its assigned id.

        Args:
            values: Column values keyed by column name
                (`author`, `authorKey`, `message`, `date`).

        Returns:
            The stored squawk.

        Raises:
            PersistenceError: If a required field is missing, a column is
                unknown, or the write fails.
        """
        squawk = Squawk(**_to_attributes(values, MESSAGES_URI))

        async with self._write_lock:
            try:
                async with self._database.get_session() as session:
                    session.add(squawk)
                    await session.flush()
            except SquawkerError:
                raise
            except Exception as e:
                raise PersistenceError(
                    f"Failed to insert row into {MESSAGES_URI}", uri=MESSAGES_URI
                ) from e

        if squawk.id is None or squawk.id <= 0:
            raise PersistenceError(
                f"Failed to insert row into {MESSAGES_URI}", uri=MESSAGES_URI
            )

        self._notifier.notify_change(MESSAGES_URI)
        return squawk

    async def query(
        self,
        predicate: FollowingPredicate | str | None = None,
        sort_order: str = DEFAULT_SORT_ORDER,
    ) -> SquawkCursor:
        """Query squawks matching a predicate.

        Args:
            predicate: Filter predicate, raw SQL selection, or None for all.
            sort_order: Comma-separated `<column> [ASC|DESC]` terms.

        Returns:
            Forward-only cursor whose notification URI is the collection.

        Raises:
            ValidationError: If the sort order is invalid.
        """
        statement = select(Squawk)
        if isinstance(predicate, FollowingPredicate):
            statement = statement.where(predicate.to_clause())
        elif predicate:
            statement = statement.where(text(predicate))
        statement = statement.order_by(*parse_sort_order(sort_order))

        async with self._database.get_session() as session:
            result = await session.execute(statement)
            squawks = list(result.scalars().all())

        return SquawkCursor(squawks, notification_uri=MESSAGES_URI)

    async def get_by_id(self, message_id: int) -> Squawk | None:
        """Get a squawk by id.

        Returns:
            The squawk if found, None otherwise.
        """
        async with self._database.get_session() as session:
            return await session.get(Squawk, message_id)

    async def update_by_id(self, message_id: int, values: Mapping[str, Any]) -> int:
        """Update a squawk by id.

        Args:
            message_id: Id of the squawk to update.
            values: Column values to set, keyed by column name.

        Returns:
            Number of rows updated (0 or 1). A missing id is not an error.

        Raises:
            PersistenceError: If a column is unknown or the write fails.
        """
        uri = message_uri(message_id)
        attributes = _to_attributes(values, uri)
        if not attributes:
            return 0

        async with self._write_lock:
            try:
                async with self._database.get_session() as session:
                    stmt = (
                        update(Squawk)
                        .where(Squawk.id == message_id)  # type: ignore[arg-type]
                        .values(**attributes)
                    )
                    result: Any = await session.execute(stmt)
                    count = result.rowcount
            except SquawkerError:
                raise
            except Exception as e:
                raise PersistenceError(f"Failed to update {uri}", uri=uri) from e

        if count:
            self._notifier.notify_change(uri)
        return count

    async def delete_by_id(self, message_id: int) -> int:
        """Delete a squawk by id.

        Args:
            message_id: Id of the squawk to delete.

        Returns:
            Number of rows deleted (0 or 1). A missing id is not an error.

        Raises:
            PersistenceError: If the write fails.
        """
        uri = message_uri(message_id)

        async with self._write_lock:
            try:
                async with self._database.get_session() as session:
                    stmt = delete(Squawk).where(
                        Squawk.id == message_id  # type: ignore[arg-type]
                    )
                    result: Any = await session.execute(stmt)
                    count = result.rowcount
            except SquawkerError:
                raise
            except Exception as e:
                raise PersistenceError(f"Failed to delete {uri}", uri=uri) from e

        if count:
            self._notifier.notify_change(uri)
        return count
