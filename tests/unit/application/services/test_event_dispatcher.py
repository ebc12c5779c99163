"""Tests for EventDispatcher."""

from unittest.mock import MagicMock

import pytest

from squawker.application.handlers.event_handlers import EventHandlerRegistry
from squawker.application.services.event_dispatcher import EventDispatcher
from squawker.domain.entities.event import Event, EventType, PushEvent, TokenEvent


class RecordingHandler:
    """Handler that records the events it receives."""

    def __init__(self, error: Exception | None = None) -> None:
        self.events: list[Event] = []
        self._error = error

    async def handle(self, event: Event) -> None:
        self.events.append(event)
        if self._error is not None:
            raise self._error


@pytest.fixture
def logger() -> MagicMock:
    return MagicMock()


class TestEventDispatcher:
    """Tests for EventDispatcher."""

    async def test_dispatches_by_type(self, logger: MagicMock) -> None:
        """イベント種別ごとのハンドラに振り分ける."""
        push_handler = RecordingHandler()
        token_handler = RecordingHandler()
        registry = EventHandlerRegistry()
        registry.register(EventType.PUSH, push_handler)
        registry.register(EventType.NEW_TOKEN, token_handler)
        dispatcher = EventDispatcher(registry, logger=logger)
        push = PushEvent()
        token = TokenEvent(payload={"token": "t"})

        assert await dispatcher.process(push) is True
        assert await dispatcher.process(token) is True

        assert push_handler.events == [push]
        assert token_handler.events == [token]

    async def test_no_handler_returns_false(self, logger: MagicMock) -> None:
        """未登録の種別は警告して False."""
        dispatcher = EventDispatcher(EventHandlerRegistry(), logger=logger)

        assert await dispatcher.process(PushEvent()) is False
        logger.warning.assert_called_once()

    async def test_handler_error_logged_and_reraised(self, logger: MagicMock) -> None:
        """ハンドラの例外はログに残して再送出する."""
        registry = EventHandlerRegistry()
        registry.register(EventType.PUSH, RecordingHandler(RuntimeError("boom")))
        dispatcher = EventDispatcher(registry, logger=logger)
        event = PushEvent()

        with pytest.raises(RuntimeError):
            await dispatcher.process(event)

        logger.error.assert_called_once()
        assert logger.error.call_args.kwargs["event_id"] == event.id
