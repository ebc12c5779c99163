"""Tests for logging setup module."""

import json
import logging
import re
from datetime import datetime, timezone

import pytest

from squawker.config.models import LoggingConfig
from squawker.infrastructure.logging import get_logger, setup_logging
from squawker.infrastructure.logging.setup import NOISY_LOGGERS


@pytest.fixture(autouse=True)
def reset_root_logger() -> None:
    """ルートロガーの設定を毎回リセットする."""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(logging.WARNING)


def read_entry(capsys: pytest.CaptureFixture[str]) -> dict:
    """Parse the single JSON log line written to stdout."""
    return json.loads(capsys.readouterr().out.strip())


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_json_format_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        """JSON形式でログ出力される。"""
        setup_logging(LoggingConfig(level="INFO", format="json"))

        get_logger("test").info("Squawk stored")

        log_entry = read_entry(capsys)
        assert "timestamp" in log_entry
        assert log_entry["level"] == "info"
        assert log_entry["event"] == "Squawk stored"

    def test_service_name_included(self, capsys: pytest.CaptureFixture[str]) -> None:
        """service フィールドが付与される。"""
        setup_logging(LoggingConfig(level="INFO", format="json"))

        get_logger("test").info("Hello")

        assert read_entry(capsys)["service"] == "squawker"

    def test_non_ascii_kept(self, capsys: pytest.CaptureFixture[str]) -> None:
        """非 ASCII 文字はエスケープされない。"""
        setup_logging(LoggingConfig(level="INFO", format="json"))

        get_logger("test").info("Alert shown", body="Hello…")

        captured = capsys.readouterr()
        assert "Hello…" in captured.out

    def test_log_level_filtering_debug_not_shown(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """INFOレベル設定時、DEBUGログは出力されない。"""
        setup_logging(LoggingConfig(level="INFO", format="json"))

        get_logger("test").debug("Debug message")

        assert capsys.readouterr().out == ""

    def test_log_level_filtering_debug_level(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """DEBUGレベル設定時、DEBUGログも出力される。"""
        setup_logging(LoggingConfig(level="DEBUG", format="json"))

        get_logger("test").debug("Debug message")

        assert read_entry(capsys)["event"] == "Debug message"

    def test_noisy_loggers_raised_to_warning(self) -> None:
        """DEBUG設定でもライブラリのロガーは WARNING 以上になる。"""
        setup_logging(LoggingConfig(level="DEBUG", format="json"))

        for name in NOISY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

    def test_context_binding(self, capsys: pytest.CaptureFixture[str]) -> None:
        """bindしたコンテキストがログに含まれる。"""
        setup_logging(LoggingConfig(level="INFO", format="json"))

        logger = get_logger("test").bind(event_id="01HXYZ", event_type="push")
        logger.info("Processing event")

        log_entry = read_entry(capsys)
        assert log_entry["event_id"] == "01HXYZ"
        assert log_entry["event_type"] == "push"

    def test_exception_logging(self, capsys: pytest.CaptureFixture[str]) -> None:
        """例外情報がログに含まれる。"""
        setup_logging(LoggingConfig(level="INFO", format="json"))
        logger = get_logger("test")

        try:
            raise ValueError("Test error")
        except ValueError:
            logger.exception("An error occurred")

        log_entry = read_entry(capsys)
        assert "ValueError" in log_entry["exception"]
        assert "Test error" in log_entry["exception"]

    def test_timestamp_is_iso8601_utc(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """タイムスタンプがUTCのISO 8601形式である。"""
        setup_logging(LoggingConfig(level="INFO", format="json"))

        before = datetime.now(timezone.utc)
        get_logger("test").info("Test message")
        after = datetime.now(timezone.utc)

        timestamp = read_entry(capsys)["timestamp"]
        assert re.match(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d+Z", timestamp)
        log_time = datetime.fromisoformat(timestamp.rstrip("Z")).replace(
            tzinfo=timezone.utc
        )
        assert before <= log_time <= after

    def test_text_format_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        """textフォーマット設定時、テキスト形式で出力される。"""
        setup_logging(LoggingConfig(level="INFO", format="text"))

        get_logger("test").info("Text message")

        captured = capsys.readouterr()
        with pytest.raises(json.JSONDecodeError):
            json.loads(captured.out.strip())
        assert "Text message" in captured.out


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_logger_with_name(self, capsys: pytest.CaptureFixture[str]) -> None:
        """名前付きロガーを取得できる。"""
        setup_logging(LoggingConfig(level="INFO", format="json"))

        get_logger("ingestion").info("Test message")

        assert read_entry(capsys)["logger"] == "ingestion"

    def test_get_logger_without_name(self, capsys: pytest.CaptureFixture[str]) -> None:
        """名前なしでロガーを取得できる。"""
        setup_logging(LoggingConfig(level="INFO", format="json"))

        get_logger().info("Test message")

        assert read_entry(capsys)["event"] == "Test message"
