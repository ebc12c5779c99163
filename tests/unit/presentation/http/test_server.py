"""Tests for HTTPServer."""

import asyncio
from collections.abc import AsyncIterator

import aiohttp
import pytest
import structlog
from aiohttp.test_utils import TestClient

from squawker.config.models import ServerConfig
from squawker.domain.contract import INSTRUCTOR_KEYS, MESSAGES_URI
from squawker.domain.entities.alert import Alert
from squawker.domain.entities.event import PushEvent, TokenEvent
from squawker.infrastructure.alerts.alert_board import AlertBoard
from squawker.infrastructure.change_notifier import ChangeNotifier
from squawker.infrastructure.event_queue import EventQueue
from squawker.infrastructure.persistence.database import Database
from squawker.infrastructure.persistence.preference_store import SqlitePreferenceStore
from squawker.infrastructure.persistence.squawk_provider import SquawkProvider
from squawker.infrastructure.persistence.squawk_store import SqliteSquawkStore
from squawker.presentation.feed import SquawkFeed
from squawker.presentation.http.server import HTTPServer

VALUES = {
    "author": "TestAccount",
    "authorKey": "key_test",
    "message": "Hello",
    "date": 1,
}


@pytest.fixture
def event_queue() -> EventQueue:
    return EventQueue()


@pytest.fixture
def notifier(logger: structlog.stdlib.BoundLogger) -> ChangeNotifier:
    return ChangeNotifier(logger=logger)


@pytest.fixture
def provider(database: Database, notifier: ChangeNotifier) -> SquawkProvider:
    return SquawkProvider(SqliteSquawkStore(database, notifier))


@pytest.fixture
def preferences(
    database: Database, logger: structlog.stdlib.BoundLogger
) -> SqlitePreferenceStore:
    return SqlitePreferenceStore(database, logger=logger)


@pytest.fixture
def alerts(logger: structlog.stdlib.BoundLogger) -> AlertBoard:
    return AlertBoard(logger=logger)


@pytest.fixture
async def feed(
    provider: SquawkProvider,
    notifier: ChangeNotifier,
    preferences: SqlitePreferenceStore,
    logger: structlog.stdlib.BoundLogger,
) -> AsyncIterator[SquawkFeed]:
    feed = SquawkFeed(provider, notifier, preferences, INSTRUCTOR_KEYS, logger=logger)
    feed.start()
    await feed.wait_idle()
    yield feed
    await feed.close()


def make_server(
    config: ServerConfig,
    event_queue: EventQueue,
    feed: SquawkFeed,
    provider: SquawkProvider,
    preferences: SqlitePreferenceStore,
    alerts: AlertBoard,
    logger: structlog.stdlib.BoundLogger,
) -> HTTPServer:
    return HTTPServer(
        config=config,
        event_queue=event_queue,
        feed=feed,
        provider=provider,
        preferences=preferences,
        alerts=alerts,
        toggle_keys=INSTRUCTOR_KEYS,
        logger=logger,
    )


@pytest.fixture
def http_server(
    event_queue: EventQueue,
    feed: SquawkFeed,
    provider: SquawkProvider,
    preferences: SqlitePreferenceStore,
    alerts: AlertBoard,
    logger: structlog.stdlib.BoundLogger,
) -> HTTPServer:
    config = ServerConfig(host="127.0.0.1", port=8080)
    return make_server(
        config, event_queue, feed, provider, preferences, alerts, logger
    )


@pytest.fixture
async def client(http_server: HTTPServer, aiohttp_client) -> TestClient:
    return await aiohttp_client(http_server.create_app())


class TestEvents:
    """Tests for POST /api/v1/events."""

    async def test_health_check(self, client: TestClient) -> None:
        """Health check endpoint returns ok status."""
        response = await client.get("/healthz")

        assert response.status == 200
        assert response.content_type == "application/json"
        assert await response.json() == {"status": "ok"}

    async def test_push_event_received(
        self, client: TestClient, event_queue: EventQueue
    ) -> None:
        """Push event is received and enqueued with its payload."""
        payload = {"from": "/topics/key_test", "data": dict(VALUES, date="1")}
        response = await client.post(
            "/api/v1/events",
            json={"type": "push", "payload": payload},
        )

        assert response.status == 200
        data = await response.json()

        event = await asyncio.wait_for(event_queue.dequeue(), timeout=1.0)
        assert isinstance(event, PushEvent)
        assert event.id == data["event_id"]
        assert event.payload == payload

    async def test_token_event_received(
        self, client: TestClient, event_queue: EventQueue
    ) -> None:
        """Token event is received and enqueued."""
        response = await client.post(
            "/api/v1/events",
            json={"type": "new_token", "payload": {"token": "abc"}},
        )

        assert response.status == 200
        event = await asyncio.wait_for(event_queue.dequeue(), timeout=1.0)
        assert isinstance(event, TokenEvent)
        assert event.token == "abc"

    async def test_missing_type_field(self, client: TestClient) -> None:
        """Request without type field returns 400."""
        response = await client.post("/api/v1/events", json={"payload": {}})

        assert response.status == 400
        assert await response.json() == {"error": "Missing required field: type"}

    async def test_invalid_json(self, client: TestClient) -> None:
        """Invalid JSON returns 400."""
        response = await client.post(
            "/api/v1/events",
            data="not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status == 400
        assert await response.json() == {"error": "Invalid JSON"}

    async def test_invalid_event_type(self, client: TestClient) -> None:
        """Unknown event type returns 400."""
        response = await client.post("/api/v1/events", json={"type": "ping"})

        assert response.status == 400
        assert await response.json() == {"error": "Invalid event type: ping"}

    @pytest.mark.parametrize("payload", [["author"], "squawk", 42])
    async def test_non_object_payload(
        self, client: TestClient, event_queue: EventQueue, payload: object
    ) -> None:
        """A payload that is not an object returns 400 and enqueues nothing."""
        response = await client.post(
            "/api/v1/events", json={"type": "push", "payload": payload}
        )

        assert response.status == 400
        assert await response.json() == {
            "error": "Invalid field: payload must be an object"
        }
        assert event_queue.pending_count == 0


class TestSquawks:
    """Tests for the squawk listing and deletion."""

    async def test_list_squawks(
        self, client: TestClient, provider: SquawkProvider, feed: SquawkFeed
    ) -> None:
        """The listing serves the feed rows."""
        await provider.insert(MESSAGES_URI, VALUES)
        await provider.insert(MESSAGES_URI, {**VALUES, "authorKey": "key_asser"})
        await feed.wait_idle()

        response = await client.get("/api/v1/squawks")

        assert response.status == 200
        assert await response.json() == {
            "squawks": [
                {
                    "author": "TestAccount",
                    "message": "Hello",
                    "date": 1,
                    "authorKey": "key_test",
                }
            ]
        }

    async def test_delete_squawk(
        self, client: TestClient, provider: SquawkProvider, feed: SquawkFeed
    ) -> None:
        """Deleting a squawk removes it from the listing."""
        inserted = await provider.insert(MESSAGES_URI, VALUES)
        assert inserted.value is not None
        message_id = inserted.value.rsplit("/", 1)[1]

        response = await client.delete(f"/api/v1/squawks/{message_id}")
        await feed.wait_idle()

        assert response.status == 200
        assert await response.json() == {"deleted": 1}
        assert feed.rows == []

    async def test_delete_missing_squawk(self, client: TestClient) -> None:
        """Deleting an unknown id returns 404."""
        response = await client.delete("/api/v1/squawks/999")

        assert response.status == 404
        assert await response.json() == {"error": "Squawk not found"}


class TestFollowing:
    """Tests for the following toggles."""

    async def test_get_following_defaults(self, client: TestClient) -> None:
        """All toggles start off."""
        response = await client.get("/api/v1/following")

        assert response.status == 200
        assert await response.json() == {
            "following": {key: False for key in INSTRUCTOR_KEYS}
        }

    async def test_set_following(
        self,
        client: TestClient,
        preferences: SqlitePreferenceStore,
        provider: SquawkProvider,
        feed: SquawkFeed,
    ) -> None:
        """Enabling a toggle stores it and widens the feed."""
        await provider.insert(MESSAGES_URI, {**VALUES, "authorKey": "key_lyla"})
        await feed.wait_idle()
        assert feed.rows == []

        response = await client.put(
            "/api/v1/following/key_lyla", json={"enabled": True}
        )
        await feed.wait_idle()

        assert response.status == 200
        assert await response.json() == {"authorKey": "key_lyla", "enabled": True}
        assert await preferences.get_boolean("key_lyla") is True
        assert [row.author_key for row in feed.rows] == ["key_lyla"]

    async def test_unknown_author_key(self, client: TestClient) -> None:
        """The test key and unknown keys are not toggles."""
        for key in ("key_test", "key_nobody"):
            response = await client.put(
                f"/api/v1/following/{key}", json={"enabled": True}
            )
            assert response.status == 404

    @pytest.mark.parametrize("body", [{}, {"enabled": "yes"}, ["enabled"]])
    async def test_invalid_body(self, client: TestClient, body: object) -> None:
        """enabled must be a boolean."""
        response = await client.put("/api/v1/following/key_asser", json=body)

        assert response.status == 400
        assert await response.json() == {"error": "Missing required field: enabled"}

    async def test_invalid_json_body(self, client: TestClient) -> None:
        response = await client.put(
            "/api/v1/following/key_asser",
            data="nope",
            headers={"Content-Type": "application/json"},
        )

        assert response.status == 400


class TestAlert:
    """Tests for GET /api/v1/alert."""

    async def test_no_alert(self, client: TestClient) -> None:
        response = await client.get("/api/v1/alert")

        assert await response.json() == {"alert": None}

    async def test_active_alert(self, client: TestClient, alerts: AlertBoard) -> None:
        """The displayed alert is returned."""
        alerts.show(Alert(channel_id="Squawker", title="Asser Samak", body="Hi"))

        response = await client.get("/api/v1/alert")
        data = await response.json()

        assert data["alert"]["id"] == 0
        assert data["alert"]["title"] == "Asser Samak"
        assert data["alert"]["body"] == "Hi"
        assert data["alert"]["target"] == "/"


class TestServerLifecycle:
    """Tests for starting and stopping the server."""

    async def test_server_start_stop(
        self,
        event_queue: EventQueue,
        feed: SquawkFeed,
        provider: SquawkProvider,
        preferences: SqlitePreferenceStore,
        alerts: AlertBoard,
        logger: structlog.stdlib.BoundLogger,
    ) -> None:
        """Server can be started and stopped."""
        config = ServerConfig(host="127.0.0.1", port=0)
        server = make_server(
            config, event_queue, feed, provider, preferences, alerts, logger
        )

        await server.start()
        try:
            assert server.is_running

            async with aiohttp.ClientSession() as session:
                async with session.get(
                    f"http://127.0.0.1:{server.actual_port}/healthz"
                ) as response:
                    assert response.status == 200
        finally:
            await server.stop()

        assert not server.is_running
