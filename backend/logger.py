"""Structured logging configuration for the Estate Assistant chat widget."""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict


class JSONFormatter(logging.Formatter):
    """
    One JSON object per record.

    Chat services attach session fields with extra={"extra": {...}}; they are
    merged at the top level but never override the core keys.
    """

    CORE_KEYS = ("timestamp", "level", "logger", "message")

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        log_data: Dict[str, Any] = {
            "timestamp": created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        session_fields = getattr(record, "extra", None)
        if isinstance(session_fields, dict):
            for key, value in session_fields.items():
                if key not in self.CORE_KEYS:
                    log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            log_data["stack"] = self.formatStack(record.stack_info)

        # default=str keeps datetimes and ids from breaking a log line
        return json.dumps(log_data, default=str, ensure_ascii=False)


def setup_logging(log_level: str = "INFO", json_format: bool = True) -> None:
    """
    Set up logging for the chat widget.

    Replaces any handlers installed by config's basicConfig so records are
    not emitted twice.

    Args:
        log_level: Name of the root log level (e.g. "INFO", "DEBUG")
        json_format: Emit one JSON object per record instead of plain text
    """
    handler = logging.StreamHandler()
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        )

    root_logger = logging.getLogger()
    for existing in list(root_logger.handlers):
        root_logger.removeHandler(existing)
    root_logger.setLevel(getattr(logging, log_level.upper()))
    root_logger.addHandler(handler)
