"""SQLite implementation of PreferenceRepository."""

from collections.abc import Iterable

from sqlmodel import select
from structlog.stdlib import BoundLogger

from squawker.domain.entities.preference import Preference
from squawker.domain.repositories.preference_repository import PreferenceListener
from squawker.infrastructure.persistence.database import Database


class SqlitePreferenceStore:
    """Persisted boolean preferences with change listeners.

    Listeners are called synchronously with `(key, value)` after a changed
    value has been committed. Writing the value a key already holds does not
    notify.
    """

    def __init__(self, database: Database, logger: BoundLogger) -> None:
        self._database = database
        self._logger = logger
        self._listeners: list[PreferenceListener] = []

    async def get_boolean(self, key: str, default: bool = False) -> bool:
        async with self._database.get_session() as session:
            preference = await session.get(Preference, key)
            return preference.value if preference is not None else default

    async def set_boolean(self, key: str, value: bool) -> None:
        """Store a value and notify listeners if it changed."""
        async with self._database.get_session() as session:
            preference = await session.get(Preference, key)
            if preference is not None and preference.value == value:
                return
            if preference is None:
                # An unset key reads as False
                changed = value
                preference = Preference(key=key, value=value)
            else:
                changed = True
                preference.value = value
            session.add(preference)

        if changed:
            self._notify(key, value)

    async def get_subscriptions(self, keys: Iterable[str]) -> dict[str, bool]:
        """Return the stored value for each key, defaulting to False."""
        wanted = list(keys)
        async with self._database.get_session() as session:
            statement = select(Preference).where(
                Preference.key.in_(wanted)  # type: ignore[attr-defined]
            )
            result = await session.execute(statement)
            stored = {p.key: p.value for p in result.scalars().all()}
        return {key: stored.get(key, False) for key in wanted}

    def register_listener(self, listener: PreferenceListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unregister_listener(self, listener: PreferenceListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, key: str, value: bool) -> None:
        for listener in list(self._listeners):
            try:
                listener(key, value)
            except Exception:
                self._logger.exception("Preference listener failed", key=key)
