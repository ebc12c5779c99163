"""SquawkRepository protocol."""

from collections.abc import Mapping
from typing import Any, Protocol

from squawker.domain.contract import DEFAULT_SORT_ORDER
from squawker.domain.entities.cursor import SquawkCursor
from squawker.domain.entities.squawk import Squawk
from squawker.domain.services.topic_filter import FollowingPredicate


class SquawkRepository(Protocol):
    """Repository protocol for squawks.

    Every mutating call notifies change listeners of exactly the URI it
    changed.
    """

    async def insert(self, values: Mapping[str, Any]) -> Squawk:
        """Insert a squawk and return it with its assigned id.

        Args:
            values: Column values keyed by column name.

        Raises:
            PersistenceError: If a required field is missing or the write fails.
        """
        ...

    async def query(
        self,
        predicate: FollowingPredicate | str | None = None,
        sort_order: str = DEFAULT_SORT_ORDER,
    ) -> SquawkCursor:
        """Query squawks matching a predicate.

        Args:
            predicate: Filter predicate or raw selection; None matches all.
            sort_order: Comma-separated `<column> [ASC|DESC]` terms.

        Returns:
            Cursor over the matching squawks.
        """
        ...

    async def update_by_id(self, message_id: int, values: Mapping[str, Any]) -> int:
        """Update a squawk by id.

        Returns:
            Number of rows updated (0 or 1).
        """
        ...

    async def delete_by_id(self, message_id: int) -> int:
        """Delete a squawk by id.

        Returns:
            Number of rows deleted (0 or 1).
        """
        ...
