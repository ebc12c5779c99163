"""Maps following toggles to topic subscribe/unsubscribe calls."""

import asyncio
from collections.abc import Iterable

from structlog.stdlib import BoundLogger

from squawker.domain.errors import TopicTransportError
from squawker.domain.gateways.topic_transport import TopicTransport


class SubscriptionManager:
    """Keeps transport topic subscriptions in line with following toggles.

    Each toggle issues one fire-and-forget call. Failures are logged; the
    stored toggle is never rolled back.
    """

    def __init__(
        self,
        transport: TopicTransport,
        toggle_keys: Iterable[str],
        logger: BoundLogger,
    ) -> None:
        """Initialize the manager.

        Args:
            transport: Pub/sub transport, one topic per author key.
            toggle_keys: Preference keys that are following toggles.
            logger: Logger instance.
        """
        self._transport = transport
        self._toggle_keys = frozenset(toggle_keys)
        self._logger = logger
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending_count(self) -> int:
        """Return the number of calls still in flight."""
        return len(self._tasks)

    def on_preference_changed(self, key: str, value: bool) -> None:
        """Preference listener; ignores keys that are not toggles."""
        if key in self._toggle_keys:
            self.on_toggle(key, value)

    def on_toggle(self, author_key: str, value: bool) -> asyncio.Task[None]:
        """Subscribe to or unsubscribe from an author's topic.

        Args:
            author_key: Author key, used as the topic name.
            value: True to subscribe, False to unsubscribe.

        Returns:
            The scheduled call. Callers need not await it.
        """
        task = asyncio.create_task(self._apply(author_key, value))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _apply(self, author_key: str, value: bool) -> None:
        try:
            if value:
                await self._transport.subscribe(author_key)
                self._logger.debug("Subscribed to topic", topic=author_key)
            else:
                await self._transport.unsubscribe(author_key)
                self._logger.debug("Unsubscribed from topic", topic=author_key)
        except TopicTransportError as e:
            self._logger.warning(
                "Topic subscription change failed",
                topic=e.topic,
                subscribe=value,
                error=str(e),
            )
        except Exception as e:
            self._logger.error(
                "Topic subscription change failed",
                topic=author_key,
                subscribe=value,
                error=str(e),
                exc_info=True,
            )

    async def close(self) -> None:
        """Cancel calls still in flight."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
