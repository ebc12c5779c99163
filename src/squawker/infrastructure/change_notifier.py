"""Scoped change notification for content URIs."""

from collections.abc import Callable

from structlog.stdlib import BoundLogger

ChangeListener = Callable[[str], None]


class ChangeNotifier:
    """Delivers change notifications to listeners registered per URI.

    A listener registered on a URI hears changes to that URI and to its
    descendants, so a listener on the message collection also hears changes
    to single messages. Delivery is synchronous and reaches only listeners
    registered at notify time; nothing is replayed to late registrations.
    """

    def __init__(self, logger: BoundLogger) -> None:
        self._logger = logger
        self._listeners: dict[str, list[ChangeListener]] = {}

    def register(self, uri: str, listener: ChangeListener) -> None:
        """Register a listener for changes under a URI.

        Args:
            uri: Scope to observe.
            listener: Callable invoked with the changed URI.
        """
        listeners = self._listeners.setdefault(uri, [])
        if listener not in listeners:
            listeners.append(listener)

    def unregister(self, uri: str, listener: ChangeListener) -> None:
        """Unregister a listener. Unknown listeners are ignored."""
        listeners = self._listeners.get(uri)
        if not listeners or listener not in listeners:
            return
        listeners.remove(listener)
        if not listeners:
            del self._listeners[uri]

    def listener_count(self, uri: str) -> int:
        """Return the number of listeners registered exactly on a URI."""
        return len(self._listeners.get(uri, []))

    def notify_change(self, uri: str) -> int:
        """Notify every listener whose scope contains the changed URI.

        A failing listener is logged and does not stop delivery to the rest.

        Args:
            uri: The URI that changed.

        Returns:
            Number of listeners notified.
        """
        targets = [
            listener
            for scope, listeners in list(self._listeners.items())
            if uri == scope or uri.startswith(scope + "/")
            for listener in list(listeners)
        ]

        for listener in targets:
            try:
                listener(uri)
            except Exception:
                self._logger.exception("Change listener failed", uri=uri)

        return len(targets)
