"""Push payload ingestion: normalize, persist, alert."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from jinja2 import Template
from pydantic import ValidationError as PydanticValidationError
from structlog.stdlib import BoundLogger

from squawker.config.models import NotificationConfig
from squawker.domain.contract import MESSAGES_URI
from squawker.domain.entities.alert import Alert
from squawker.domain.entities.payload import SquawkPayload
from squawker.domain.errors import SquawkerError, ValidationError
from squawker.domain.gateways.alert_sink import AlertSink
from squawker.infrastructure.persistence.squawk_provider import SquawkProvider

ELLIPSIS = "…"


def truncate_message(message: str, max_characters: int) -> str:
    """Shorten a message for display.

    Messages up to max_characters are returned unchanged; longer ones are cut
    to max_characters and get a single ellipsis character appended.
    """
    if len(message) <= max_characters:
        return message
    return message[:max_characters] + ELLIPSIS


def parse_payload(data: Mapping[str, Any]) -> SquawkPayload:
    """Parse and normalize an inbound push payload.

    Raises:
        ValidationError: If a required field is missing or malformed.
    """
    try:
        return SquawkPayload.model_validate(dict(data))
    except PydanticValidationError as e:
        fields = sorted({".".join(str(loc) for loc in err["loc"]) for err in e.errors()})
        raise ValidationError(f"Invalid squawk payload: {', '.join(fields)}") from e


@dataclass(frozen=True)
class IngestionResult:
    """Outcome of ingesting one payload.

    Attributes:
        uri: Item URI of the stored squawk, or None if persisting failed.
        alert: The alert that was shown.
        error: The persistence error, if any.
    """

    uri: str | None
    alert: Alert
    error: SquawkerError | None = None


class SquawkIngestionService:
    """Turns push payloads into stored squawks and a user alert.

    Holds no state between payloads; concurrent calls are independent.
    Persisting and alerting are separate steps: a failed insert is logged
    and the alert is still shown.
    """

    def __init__(
        self,
        provider: SquawkProvider,
        alerts: AlertSink,
        config: NotificationConfig,
        logger: BoundLogger,
    ) -> None:
        self._provider = provider
        self._alerts = alerts
        self._config = config
        self._title_template = Template(config.title_template)
        self._logger = logger

    async def ingest(self, data: Mapping[str, Any]) -> IngestionResult | None:
        """Ingest one push payload.

        Args:
            data: Flat map with `author`, `authorKey`, `message` and `date`.

        Returns:
            The ingestion result, or None for an empty payload.

        Raises:
            ValidationError: If the payload is missing a field. Nothing is
                stored and no alert is shown.
        """
        if not data:
            return None

        self._logger.info("Message data payload", payload=dict(data))
        payload = parse_payload(data)

        result = await self._provider.insert(MESSAGES_URI, payload.to_values())
        if not result.ok:
            self._logger.error(
                "Failed to persist squawk",
                author_key=payload.author_key,
                uri=getattr(result.error, "uri", MESSAGES_URI),
                error=str(result.error),
            )

        alert = self.build_alert(payload)
        self._alerts.show(alert)

        return IngestionResult(uri=result.value, alert=alert, error=result.error)

    def build_alert(self, payload: SquawkPayload) -> Alert:
        """Build the alert for a normalized payload."""
        return Alert(
            channel_id=self._config.channel_id,
            title=self._title_template.render(author=payload.author),
            body=truncate_message(payload.message, self._config.max_characters),
        )
