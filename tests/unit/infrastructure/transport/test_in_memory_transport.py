"""Tests for InMemoryTopicTransport and create_transport."""

import os
from unittest.mock import patch

import pytest

from squawker.config.models import TransportConfig
from squawker.domain.errors import TopicTransportError
from squawker.infrastructure.transport import (
    HttpTopicTransport,
    InMemoryTopicTransport,
    create_transport,
)


class TestInMemoryTopicTransport:
    """Tests for InMemoryTopicTransport."""

    async def test_subscribe_and_unsubscribe(self) -> None:
        """購読状態が記録される."""
        transport = InMemoryTopicTransport()

        await transport.subscribe("key_asser")
        await transport.subscribe("key_jlin")
        await transport.unsubscribe("key_asser")

        assert transport.topics == {"key_jlin"}
        assert transport.calls == [
            ("subscribe", "key_asser"),
            ("subscribe", "key_jlin"),
            ("unsubscribe", "key_asser"),
        ]

    async def test_failing_topic_raises(self) -> None:
        """失敗指定のトピックは TopicTransportError."""
        transport = InMemoryTopicTransport(fail_topics={"key_lyla"})

        with pytest.raises(TopicTransportError) as exc_info:
            await transport.subscribe("key_lyla")

        assert exc_info.value.topic == "key_lyla"
        assert transport.topics == set()

    def test_update_token(self) -> None:
        transport = InMemoryTopicTransport()

        transport.update_token("token-1")

        assert transport.token == "token-1"


class TestCreateTransport:
    """Tests for create_transport."""

    def test_no_config_returns_in_memory(self) -> None:
        """設定が無ければメモリ実装."""
        with patch.dict(os.environ, {}, clear=True):
            assert isinstance(create_transport(None), InMemoryTopicTransport)

    def test_mock_env_returns_in_memory(self) -> None:
        """MOCK_TRANSPORT=true ならメモリ実装."""
        config = TransportConfig(server_key="secret")
        with patch.dict(os.environ, {"MOCK_TRANSPORT": "true"}, clear=False):
            assert isinstance(create_transport(config), InMemoryTopicTransport)

    def test_config_returns_http(self) -> None:
        """設定があれば HTTP 実装."""
        config = TransportConfig(server_key="secret")
        with patch.dict(os.environ, {"MOCK_TRANSPORT": "false"}, clear=False):
            assert isinstance(create_transport(config), HttpTopicTransport)
