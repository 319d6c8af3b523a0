"""Unit tests for structured logging."""
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'backend'))

import json
import logging
from datetime import datetime
from logger import JSONFormatter, setup_logging


def _record(message, **kwargs):
    return logging.LogRecord(
        name="services.conversation_engine",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
        **kwargs,
    )


def test_json_formatter_fields():
    entry = json.loads(JSONFormatter().format(_record("Initialized chat session chat_abc")))

    assert entry["level"] == "INFO"
    assert entry["logger"] == "services.conversation_engine"
    assert entry["message"] == "Initialized chat session chat_abc"
    assert entry["timestamp"].endswith("Z")


def test_json_formatter_merges_extra():
    record = _record("Delivered assistant reply")
    record.extra = {"session_id": "chat_abc", "message_count": 3}

    entry = json.loads(JSONFormatter().format(record))

    assert entry["session_id"] == "chat_abc"
    assert entry["message_count"] == 3


def test_setup_logging_replaces_handlers():
    root_logger = logging.getLogger()
    saved_handlers = list(root_logger.handlers)
    saved_level = root_logger.level
    try:
        setup_logging("debug", json_format=True)

        assert len(root_logger.handlers) == 1
        assert isinstance(root_logger.handlers[0].formatter, JSONFormatter)
        assert root_logger.level == logging.DEBUG
    finally:
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
        for handler in saved_handlers:
            root_logger.addHandler(handler)
        root_logger.setLevel(saved_level)


def test_json_formatter_uses_record_time():
    record = _record("Accepted user message")
    record.created = 0.0

    entry = json.loads(JSONFormatter().format(record))

    assert entry["timestamp"] == "1970-01-01T00:00:00.000Z"


def test_json_formatter_keeps_core_keys():
    record = _record("Closed chat session chat_abc")
    record.extra = {"message": "overridden", "session_id": "chat_abc"}

    entry = json.loads(JSONFormatter().format(record))

    assert entry["message"] == "Closed chat session chat_abc"
    assert entry["session_id"] == "chat_abc"


def test_json_formatter_serializes_unknown_types():
    record = _record("Delivered assistant reply")
    record.extra = {"sent_at": datetime(2024, 5, 1, 9, 5)}

    entry = json.loads(JSONFormatter().format(record))

    assert entry["sent_at"] == "2024-05-01 09:05:00"


def test_json_formatter_includes_exception():
    try:
        raise RuntimeError("render failed")
    except RuntimeError:
        record = _record("Listener failed")
        record.exc_info = sys.exc_info()

    entry = json.loads(JSONFormatter().format(record))

    assert "RuntimeError: render failed" in entry["exception"]
