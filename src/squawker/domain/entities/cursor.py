"""Forward-only result cursor returned by store queries."""

from collections.abc import Iterable, Iterator
from typing import NamedTuple

from squawker.domain.entities.squawk import Squawk


class SquawkRow(NamedTuple):
    """A squawk projected for display."""

    author: str
    message: str
    date: int
    author_key: str


class SquawkCursor:
    """Forward-only sequence of squawks produced by a query.

    Iterating consumes the cursor; a second pass yields nothing. The
    notification URI names the scope the query was issued against, so a
    consumer can register for changes and re-query.
    """

    def __init__(self, squawks: Iterable[Squawk], notification_uri: str) -> None:
        self._squawks = list(squawks)
        self._iterator = iter(self._squawks)
        self._notification_uri = notification_uri

    @property
    def notification_uri(self) -> str:
        """Return the URI whose changes invalidate this cursor."""
        return self._notification_uri

    @property
    def count(self) -> int:
        """Return the total number of rows in the result."""
        return len(self._squawks)

    def __iter__(self) -> Iterator[Squawk]:
        return self

    def __next__(self) -> Squawk:
        return next(self._iterator)

    def rows(self) -> Iterator[SquawkRow]:
        """Consume the cursor as `(author, message, date, authorKey)` rows."""
        for squawk in self:
            yield SquawkRow(
                author=squawk.author,
                message=squawk.message,
                date=squawk.date,
                author_key=squawk.author_key,
            )
