"""Content-URI dispatcher over the squawk store."""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar
from urllib.parse import urlparse

from squawker.domain.contract import (
    AUTHORITY,
    DEFAULT_SORT_ORDER,
    PATH_MESSAGES,
    message_uri,
)
from squawker.domain.entities.cursor import SquawkCursor
from squawker.domain.errors import SquawkerError, UnsupportedRequestError
from squawker.domain.repositories.squawk_repository import SquawkRepository
from squawker.domain.services.topic_filter import FollowingPredicate

T = TypeVar("T")


class Route(str, Enum):
    """Request shapes the provider understands."""

    MESSAGES = "messages"
    MESSAGE_WITH_ID = "message_with_id"


@dataclass(frozen=True)
class ResolvedRoute:
    """A matched route and, for item routes, the message id."""

    route: Route
    message_id: int | None = None


@dataclass(frozen=True)
class StoreResult(Generic[T]):
    """Outcome of a provider request: either a value or an error."""

    value: T | None = None
    error: SquawkerError | None = None

    @property
    def ok(self) -> bool:
        """Return True if the request succeeded."""
        return self.error is None


def match_route(uri: str) -> ResolvedRoute | None:
    """Match a content URI against the known routes.

    Args:
        uri: URI such as `content://squawker.provider/messages/5`.

    Returns:
        The resolved route, or None if the URI is not recognized.
    """
    parsed = urlparse(uri)
    if parsed.scheme != "content" or parsed.netloc != AUTHORITY:
        return None

    segments = [segment for segment in parsed.path.split("/") if segment]
    if segments == [PATH_MESSAGES]:
        return ResolvedRoute(Route.MESSAGES)
    if len(segments) == 2 and segments[0] == PATH_MESSAGES and segments[1].isdigit():
        return ResolvedRoute(Route.MESSAGE_WITH_ID, message_id=int(segments[1]))
    return None


CONTENT_TYPES: dict[Route, str] = {
    Route.MESSAGES: f"vnd.squawker.dir/{AUTHORITY}.{PATH_MESSAGES}",
    Route.MESSAGE_WITH_ID: f"vnd.squawker.item/{AUTHORITY}.{PATH_MESSAGES}",
}


class SquawkProvider:
    """Dispatches URI-addressed requests to the squawk store.

    Inserts and queries take the collection URI; updates and deletes take an
    item URI. Requests addressed anywhere else, and store failures, come back
    as a failed StoreResult instead of raising.
    """

    def __init__(self, store: SquawkRepository) -> None:
        self._store = store

    def _resolve(self, uri: str, expected: Route) -> ResolvedRoute | None:
        resolved = match_route(uri)
        if resolved is None or resolved.route is not expected:
            return None
        return resolved

    async def insert(self, uri: str, values: Mapping[str, Any]) -> StoreResult[str]:
        """Insert a squawk.

        Returns:
            Result holding the new item URI.
        """
        if self._resolve(uri, Route.MESSAGES) is None:
            return StoreResult(error=UnsupportedRequestError(uri))
        try:
            squawk = await self._store.insert(values)
        except SquawkerError as e:
            return StoreResult(error=e)
        return StoreResult(value=message_uri(squawk.id))  # type: ignore[arg-type]

    async def query(
        self,
        uri: str,
        selection: FollowingPredicate | str | None = None,
        sort_order: str | None = None,
    ) -> StoreResult[SquawkCursor]:
        """Query squawks in the collection.

        Returns:
            Result holding a cursor over the matching squawks.
        """
        if self._resolve(uri, Route.MESSAGES) is None:
            return StoreResult(error=UnsupportedRequestError(uri))
        try:
            cursor = await self._store.query(selection, sort_order or DEFAULT_SORT_ORDER)
        except SquawkerError as e:
            return StoreResult(error=e)
        return StoreResult(value=cursor)

    async def update(self, uri: str, values: Mapping[str, Any]) -> StoreResult[int]:
        """Update the squawk addressed by an item URI.

        Returns:
            Result holding the number of rows updated.
        """
        resolved = self._resolve(uri, Route.MESSAGE_WITH_ID)
        if resolved is None or resolved.message_id is None:
            return StoreResult(error=UnsupportedRequestError(uri))
        try:
            count = await self._store.update_by_id(resolved.message_id, values)
        except SquawkerError as e:
            return StoreResult(error=e)
        return StoreResult(value=count)

    async def delete(self, uri: str) -> StoreResult[int]:
        """Delete the squawk addressed by an item URI.

        Returns:
            Result holding the number of rows deleted.
        """
        resolved = self._resolve(uri, Route.MESSAGE_WITH_ID)
        if resolved is None or resolved.message_id is None:
            return StoreResult(error=UnsupportedRequestError(uri))
        try:
            count = await self._store.delete_by_id(resolved.message_id)
        except SquawkerError as e:
            return StoreResult(error=e)
        return StoreResult(value=count)

    def get_type(self, uri: str) -> StoreResult[str]:
        """Return the content type for a URI."""
        resolved = match_route(uri)
        if resolved is None:
            return StoreResult(error=UnsupportedRequestError(uri))
        return StoreResult(value=CONTENT_TYPES[resolved.route])
