"""Topic transport backed by the instance-ID topic management API."""

import os

import aiohttp

from squawker.config.models import TransportConfig
from squawker.domain.errors import TopicTransportError
from squawker.domain.gateways.topic_transport import TopicTransport
from squawker.infrastructure.transport.in_memory_transport import (
    InMemoryTopicTransport,
)


class HttpTopicTransport:
    """Manages this device's topic subscriptions over HTTP.

    Subscribing posts to `/iid/v1/{token}/rel/topics/{topic}`; unsubscribing
    posts a batch removal for the registration token. Calls are made once,
    with no retry.

    Args:
        config: Transport configuration with base URL and server key.
        session: Optional client session; one is created on first use
            otherwise and closed by close().
    """

    def __init__(
        self,
        config: TransportConfig,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._base_url = config.base_url.rstrip("/")
        self._server_key = config.server_key
        self._token = config.registration_token
        self._session = session
        self._owns_session = session is None

    @property
    def token(self) -> str | None:
        """Return the registration token in use."""
        return self._token

    def update_token(self, token: str) -> None:
        self._token = token

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    def _require_token(self, topic: str) -> str:
        if not self._token:
            raise TopicTransportError("No registration token available", topic=topic)
        return self._token

    async def subscribe(self, topic: str) -> None:
        token = self._require_token(topic)
        url = f"{self._base_url}/iid/v1/{token}/rel/topics/{topic}"
        await self._post(url, topic, json_body=None)

    async def unsubscribe(self, topic: str) -> None:
        token = self._require_token(topic)
        url = f"{self._base_url}/iid/v1:batchRemove"
        body = {"to": f"/topics/{topic}", "registration_tokens": [token]}
        await self._post(url, topic, json_body=body)

    async def _post(self, url: str, topic: str, json_body: dict | None) -> None:
        session = self._get_session()
        try:
            async with session.post(
                url,
                json=json_body,
                headers={"Authorization": f"key={self._server_key}"},
            ) as response:
                if response.status >= 300:
                    body = await response.text()
                    raise TopicTransportError(
                        f"Topic request failed: {response.status} {body}",
                        topic=topic,
                    )
        except (aiohttp.ClientError, TimeoutError) as e:
            raise TopicTransportError(f"Topic request failed: {e}", topic=topic) from e

    async def close(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
        self._session = None


def create_transport(config: TransportConfig | None) -> TopicTransport:
    """Create a topic transport based on configuration and environment.

    Args:
        config: Transport configuration, or None if not configured.

    Returns:
        InMemoryTopicTransport if MOCK_TRANSPORT=true or no transport is
        configured, otherwise HttpTopicTransport.
    """
    mock_transport = os.getenv("MOCK_TRANSPORT", "").lower()

    if mock_transport == "true" or config is None:
        return InMemoryTopicTransport()

    return HttpTopicTransport(config)
