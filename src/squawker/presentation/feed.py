"""Live read model of the squawks from followed authors."""

import asyncio
from collections.abc import Iterable

from structlog.stdlib import BoundLogger

from squawker.domain.contract import DEFAULT_SORT_ORDER, MESSAGES_URI
from squawker.domain.entities.cursor import SquawkRow
from squawker.domain.repositories.preference_repository import PreferenceRepository
from squawker.domain.services.topic_filter import build_predicate
from squawker.infrastructure.change_notifier import ChangeNotifier
from squawker.infrastructure.persistence.squawk_provider import SquawkProvider


class SquawkFeed:
    """Keeps the newest-first list of followed squawks current.

    The feed reloads in the background whenever the message collection or a
    following toggle changes. Reload tasks belong to the feed and are
    cancelled by close(). A failed reload leaves the previous rows in place.
    """

    def __init__(
        self,
        provider: SquawkProvider,
        notifier: ChangeNotifier,
        preferences: PreferenceRepository,
        toggle_keys: Iterable[str],
        logger: BoundLogger,
    ) -> None:
        self._provider = provider
        self._notifier = notifier
        self._preferences = preferences
        self._toggle_keys = tuple(toggle_keys)
        self._logger = logger
        self._rows: list[SquawkRow] = []
        self._tasks: set[asyncio.Task[None]] = set()
        # Reloads run one at a time, in the order they were scheduled
        self._reload_lock = asyncio.Lock()
        self._started = False

    @property
    def rows(self) -> list[SquawkRow]:
        """Return the rows from the latest successful load."""
        return list(self._rows)

    @property
    def is_started(self) -> bool:
        """Return True between start() and close()."""
        return self._started

    def start(self) -> None:
        """Start observing changes and schedule the initial load."""
        if self._started:
            return
        self._started = True
        self._notifier.register(MESSAGES_URI, self._on_messages_changed)
        self._preferences.register_listener(self._on_preference_changed)
        self._schedule_reload()

    async def close(self) -> None:
        """Stop observing changes and cancel outstanding loads."""
        if not self._started:
            return
        self._started = False
        self._notifier.unregister(MESSAGES_URI, self._on_messages_changed)
        self._preferences.unregister_listener(self._on_preference_changed)

        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    async def wait_idle(self) -> None:
        """Wait until no load is in progress."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _on_messages_changed(self, uri: str) -> None:
        self._schedule_reload()

    def _on_preference_changed(self, key: str, value: bool) -> None:
        if key in self._toggle_keys:
            self._schedule_reload()

    def _schedule_reload(self) -> None:
        if not self._started:
            return
        task = asyncio.create_task(self._reload_in_background())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _reload_in_background(self) -> None:
        try:
            await self.reload()
        except Exception:
            self._logger.exception("Failed to reload squawks")

    async def reload(self) -> None:
        """Query the followed squawks and replace the current rows."""
        async with self._reload_lock:
            await self._load()

    async def _load(self) -> None:
        subscriptions = await self._preferences.get_subscriptions(self._toggle_keys)
        predicate = build_predicate(subscriptions)
        self._logger.debug("Selection is", selection=predicate.to_sql())

        result = await self._provider.query(
            MESSAGES_URI, predicate, sort_order=DEFAULT_SORT_ORDER
        )
        if not result.ok or result.value is None:
            self._logger.warning("Failed to load squawks", error=str(result.error))
            return

        self._rows = list(result.value.rows())
        self._logger.debug("Squawks loaded", count=len(self._rows))
