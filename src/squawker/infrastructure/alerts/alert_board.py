"""In-process alert surface with one slot per alert id."""

from structlog.stdlib import BoundLogger

from squawker.domain.entities.alert import Alert


class AlertBoard:
    """Holds the alerts currently displayed to the user.

    Alerts are keyed by id; showing an alert replaces the one with the same
    id. Squawk alerts share a single id, so at most one is ever active.
    """

    def __init__(self, logger: BoundLogger) -> None:
        self._logger = logger
        self._alerts: dict[int, Alert] = {}

    @property
    def active(self) -> Alert | None:
        """Return the most recently shown alert still displayed."""
        if not self._alerts:
            return None
        return max(self._alerts.values(), key=lambda alert: alert.created_at)

    def get(self, alert_id: int) -> Alert | None:
        """Return the alert displayed in a slot, if any."""
        return self._alerts.get(alert_id)

    def show(self, alert: Alert) -> None:
        replaced = alert.id in self._alerts
        self._alerts[alert.id] = alert
        self._logger.info(
            "Alert shown",
            alert_id=alert.id,
            channel_id=alert.channel_id,
            title=alert.title,
            replaced=replaced,
        )

    def dismiss(self, alert_id: int) -> bool:
        """Remove an alert, as when the user taps an auto-cancel alert.

        Returns:
            True if an alert was removed.
        """
        return self._alerts.pop(alert_id, None) is not None
