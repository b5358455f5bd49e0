import io
import json
import logging
import sys

import pytest
import structlog

from scoreboard.logic.enums import GameType, RoundKind
from shared.logging import _serialize_enums, bind_session_context, configure_structlog, setup_logging


@pytest.fixture(autouse=True)
def _cleanup_root_logger():
    """Close and remove all handlers from the root logger after each test."""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        handler.close()
        root.removeHandler(handler)
    configure_structlog(timestamps=False)


class TestSetupLogging:
    def test_configures_stderr_handler(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        handler = setup_logging()
        root = logging.getLogger()

        assert root.level == logging.INFO
        assert root.handlers == [handler]
        assert isinstance(handler, logging.StreamHandler)
        assert handler.stream is sys.stderr
        assert isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter)

    def test_writes_to_given_stream(self):
        buffer = io.StringIO()
        setup_logging(stream=buffer)

        structlog.get_logger("test.stream").info("hello from test")

        assert "hello from test" in buffer.getvalue()

    def test_clears_existing_handlers_on_repeated_calls(self):
        setup_logging()
        setup_logging()

        assert len(logging.getLogger().handlers) == 1

    def test_custom_log_level(self):
        setup_logging(level=logging.DEBUG)

        assert logging.getLogger().level == logging.DEBUG

    def test_log_level_from_env(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        setup_logging()

        assert logging.getLogger().level == logging.DEBUG

    def test_events_below_level_are_dropped(self):
        buffer = io.StringIO()
        setup_logging(level=logging.WARNING, stream=buffer)

        structlog.get_logger("test.level").info("rankings computed")

        assert buffer.getvalue() == ""

    def test_invalid_log_level_raises(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "bogus")
        with pytest.raises(ValueError, match="Invalid LOG_LEVEL"):
            setup_logging()

    def test_invalid_log_format_raises(self, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "invalid_value")
        with pytest.raises(ValueError, match="Invalid LOG_FORMAT"):
            setup_logging()

    def test_json_mode_includes_session_context(self, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "json")
        buffer = io.StringIO()
        setup_logging(stream=buffer)

        bind_session_context("session-42")
        structlog.get_logger("test.json").info("settlement frozen", game_type=GameType.UNO)

        parsed = json.loads(buffer.getvalue().strip().splitlines()[0])
        assert parsed["event"] == "settlement frozen"
        assert parsed["session_id"] == "session-42"
        assert parsed["game_type"] == "uno"
        assert parsed["level"] == "info"
        assert "timestamp" in parsed


class TestSerializeEnums:
    def test_replaces_enum_with_value(self):
        result = _serialize_enums(None, "", {"game_type": GameType.RUMMY, "msg": "hello"})

        assert result == {"game_type": "rummy", "msg": "hello"}

    def test_replaces_enum_inside_dict_value(self):
        result = _serialize_enums(None, "", {"data": {"game_type": GameType.UNO, "count": 3}})

        assert result["data"] == {"game_type": "uno", "count": 3}

    def test_replaces_enum_inside_sequence(self):
        result = _serialize_enums(None, "", {"kinds": (RoundKind.JOIN, RoundKind.REBUY)})

        assert result["kinds"] == ["join", "rebuy"]

    def test_leaves_non_enum_values_unchanged(self):
        event_dict = {"count": 42, "name": "test"}

        assert _serialize_enums(None, "", event_dict) == {"count": 42, "name": "test"}
