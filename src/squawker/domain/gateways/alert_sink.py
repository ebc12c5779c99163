"""AlertSink protocol."""

from typing import Protocol

from squawker.domain.entities.alert import Alert


class AlertSink(Protocol):
    """Surface that displays user alerts."""

    def show(self, alert: Alert) -> None:
        """Display an alert, replacing any alert with the same id."""
        ...
