"""HTTP server for push delivery and the squawk read model."""

import json
from collections.abc import Iterable

import structlog
from aiohttp import web

from squawker.config.models import ServerConfig
from squawker.domain.contract import message_uri
from squawker.domain.entities.event import EventType, PushEvent, TokenEvent
from squawker.domain.repositories.preference_repository import PreferenceRepository
from squawker.infrastructure.alerts.alert_board import AlertBoard
from squawker.infrastructure.event_queue import EventQueue
from squawker.infrastructure.persistence.squawk_provider import SquawkProvider
from squawker.presentation.feed import SquawkFeed


class HTTPServer:
    """HTTP server for push delivery, the squawk feed and following toggles.

    This server provides endpoints for:
    - POST /api/v1/events: Receive and enqueue push and token events
    - GET /api/v1/squawks: Squawks from followed authors, newest first
    - DELETE /api/v1/squawks/{id}: Delete a squawk
    - GET /api/v1/following: Current following toggles
    - PUT /api/v1/following/{author_key}: Change a following toggle
    - GET /api/v1/alert: The alert currently displayed
    - GET /healthz: Kubernetes liveness probe

    Args:
        config: Server configuration containing host and port.
        event_queue: EventQueue instance for enqueuing received events.
        feed: Live feed served by the squawk listing.
        provider: Store dispatcher used for deletes.
        preferences: Preference store holding the following toggles.
        alerts: Alert surface.
        toggle_keys: Author keys exposed as following toggles.
        logger: Structured logger for logging.
    """

    # Mapping from event type string to event class
    EVENT_TYPE_MAP: dict[str, type] = {
        EventType.PUSH.value: PushEvent,
        EventType.NEW_TOKEN.value: TokenEvent,
    }

    def __init__(
        self,
        config: ServerConfig,
        event_queue: EventQueue,
        feed: SquawkFeed,
        provider: SquawkProvider,
        preferences: PreferenceRepository,
        alerts: AlertBoard,
        toggle_keys: Iterable[str],
        logger: structlog.BoundLogger,
    ) -> None:
        self.config = config
        self._event_queue = event_queue
        self._feed = feed
        self._provider = provider
        self._preferences = preferences
        self._alerts = alerts
        self._toggle_keys = tuple(toggle_keys)
        self._logger = logger
        self._app: web.Application | None = None
        self._runner: web.AppRunner | None = None
        self._site: web.TCPSite | None = None

    @property
    def is_running(self) -> bool:
        """Return True if the server is running."""
        return self._site is not None

    @property
    def actual_port(self) -> int:
        """Return the actual port the server is listening on.

        This is useful when port 0 is configured to get a random port.

        Raises:
            RuntimeError: If the server is not running.
        """
        if self._site is None:
            raise RuntimeError("Server is not running")
        # aiohttp does not expose the bound sockets publicly
        server = getattr(self._site, "_server", None)
        if server is None:
            raise RuntimeError("Server is not running")
        sockets = getattr(server, "sockets", None)
        if sockets:
            return sockets[0].getsockname()[1]
        raise RuntimeError("No sockets available")

    def create_app(self) -> web.Application:
        """Create and return the aiohttp Application.

        This method is exposed for testing purposes.

        Returns:
            Configured aiohttp Application.
        """
        app = web.Application()
        app.router.add_get("/healthz", self._handle_health_check)
        app.router.add_post("/api/v1/events", self._handle_event)
        app.router.add_get("/api/v1/squawks", self._handle_list_squawks)
        app.router.add_delete(r"/api/v1/squawks/{id:\d+}", self._handle_delete_squawk)
        app.router.add_get("/api/v1/following", self._handle_get_following)
        app.router.add_put("/api/v1/following/{author_key}", self._handle_set_following)
        app.router.add_get("/api/v1/alert", self._handle_get_alert)
        return app

    async def start(self) -> None:
        """Start the HTTP server."""
        self._app = self.create_app()
        self._runner = web.AppRunner(self._app)
        await self._runner.setup()
        self._site = web.TCPSite(self._runner, self.config.host, self.config.port)
        await self._site.start()
        self._logger.info(
            "HTTP server started",
            host=self.config.host,
            port=self.actual_port,
        )

    async def stop(self) -> None:
        """Stop the HTTP server."""
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
            self._site = None
            self._app = None
            self._logger.info("HTTP server stopped")

    async def _handle_health_check(self, request: web.Request) -> web.Response:
        return web.json_response({"status": "ok"})

    async def _handle_event(self, request: web.Request) -> web.Response:
        """Handle POST /api/v1/events requests.

        Args:
            request: The incoming request.

        Returns:
            JSON response with event_id on success, or error message on failure.
        """
        try:
            body = await request.json()
        except json.JSONDecodeError:
            return web.json_response({"error": "Invalid JSON"}, status=400)

        if not isinstance(body, dict) or "type" not in body:
            return web.json_response(
                {"error": "Missing required field: type"}, status=400
            )

        event_type = body["type"]

        if event_type not in self.EVENT_TYPE_MAP:
            return web.json_response(
                {"error": f"Invalid event type: {event_type}"}, status=400
            )

        event_class = self.EVENT_TYPE_MAP[event_type]
        payload = body.get("payload", {})
        if not isinstance(payload, dict):
            return web.json_response(
                {"error": "Invalid field: payload must be an object"}, status=400
            )

        try:
            event = event_class(payload=payload)
        except Exception as e:
            self._logger.error("Failed to create event", error=str(e))
            return web.json_response({"error": "Failed to create event"}, status=500)

        try:
            await self._event_queue.enqueue(event)
        except Exception as e:
            self._logger.error("Failed to enqueue event", error=str(e))
            return web.json_response({"error": "Failed to enqueue event"}, status=500)

        self._logger.info(
            "Event received",
            event_id=event.id,
            event_type=event_type,
        )

        return web.json_response({"event_id": event.id})

    async def _handle_list_squawks(self, request: web.Request) -> web.Response:
        squawks = [
            {
                "author": row.author,
                "message": row.message,
                "date": row.date,
                "authorKey": row.author_key,
            }
            for row in self._feed.rows
        ]
        return web.json_response({"squawks": squawks})

    async def _handle_delete_squawk(self, request: web.Request) -> web.Response:
        uri = message_uri(int(request.match_info["id"]))
        result = await self._provider.delete(uri)
        if not result.ok:
            self._logger.error("Failed to delete squawk", uri=uri, error=str(result.error))
            return web.json_response({"error": "Failed to delete squawk"}, status=500)
        if not result.value:
            return web.json_response({"error": "Squawk not found"}, status=404)
        return web.json_response({"deleted": result.value})

    async def _handle_get_following(self, request: web.Request) -> web.Response:
        following = await self._preferences.get_subscriptions(self._toggle_keys)
        return web.json_response({"following": following})

    async def _handle_set_following(self, request: web.Request) -> web.Response:
        """Handle PUT /api/v1/following/{author_key} requests.

        The body is `{"enabled": true|false}`. Storing the toggle triggers the
        topic subscription change through the preference listeners.
        """
        author_key = request.match_info["author_key"]
        if author_key not in self._toggle_keys:
            return web.json_response(
                {"error": f"Unknown author key: {author_key}"}, status=404
            )

        try:
            body = await request.json()
        except json.JSONDecodeError:
            return web.json_response({"error": "Invalid JSON"}, status=400)

        enabled = body.get("enabled") if isinstance(body, dict) else None
        if not isinstance(enabled, bool):
            return web.json_response(
                {"error": "Missing required field: enabled"}, status=400
            )

        await self._preferences.set_boolean(author_key, enabled)
        self._logger.info("Following changed", author_key=author_key, enabled=enabled)
        return web.json_response({"authorKey": author_key, "enabled": enabled})

    async def _handle_get_alert(self, request: web.Request) -> web.Response:
        alert = self._alerts.active
        return web.json_response(
            {"alert": alert.model_dump(mode="json") if alert is not None else None}
        )
