"""PreferenceRepository protocol."""

from collections.abc import Callable, Iterable
from typing import Protocol

PreferenceListener = Callable[[str, bool], None]


class PreferenceRepository(Protocol):
    """Repository protocol for persisted boolean preferences."""

    async def get_boolean(self, key: str, default: bool = False) -> bool:
        """Return the stored value for key, or default if unset."""
        ...

    async def set_boolean(self, key: str, value: bool) -> None:
        """Store a value and notify listeners if it changed."""
        ...

    async def get_subscriptions(self, keys: Iterable[str]) -> dict[str, bool]:
        """Return the stored value for each key, defaulting to False."""
        ...

    def register_listener(self, listener: PreferenceListener) -> None:
        """Register a listener called with (key, value) on change."""
        ...

    def unregister_listener(self, listener: PreferenceListener) -> None:
        """Unregister a previously registered listener."""
        ...
