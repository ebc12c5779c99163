"""Filter predicate for the authors the user follows."""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict

from squawker.domain.contract import COLUMN_AUTHOR_KEY, TEST_ACCOUNT_KEY
from squawker.domain.entities.squawk import Squawk


class FollowingPredicate(BaseModel):
    """Matches squawks whose author key is in a fixed set.

    Attributes:
        author_keys: Author keys to include. Always contains the test key.
    """

    model_config = ConfigDict(frozen=True)

    author_keys: frozenset[str]

    def matches(self, author_key: str) -> bool:
        """Return True if a squawk by author_key passes the filter."""
        return author_key in self.author_keys

    def to_sql(self) -> str:
        """Render the predicate as an SQL selection string."""
        quoted = ",".join(
            "'" + key.replace("'", "''") + "'" for key in sorted(self.author_keys)
        )
        return f"{COLUMN_AUTHOR_KEY} IN ({quoted})"

    def to_clause(self) -> Any:
        """Render the predicate as an SQLAlchemy where clause."""
        return Squawk.author_key.in_(sorted(self.author_keys))  # type: ignore[attr-defined]


def build_predicate(subscriptions: Mapping[str, bool]) -> FollowingPredicate:
    """Build the filter for the currently followed authors.

    The test account key is always included, so the predicate never
    excludes everything.

    Args:
        subscriptions: Mapping from author key to subscribed flag.

    Returns:
        Predicate over the test key and every subscribed author key.
    """
    keys = {TEST_ACCOUNT_KEY}
    keys.update(key for key, subscribed in subscriptions.items() if subscribed)
    return FollowingPredicate(author_keys=frozenset(keys))
