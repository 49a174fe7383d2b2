"""JSON console logging for the weather applet.

Records carry the refresh session id stamped by the handler, and applet error
reports add their `service`/`detail`/`error_type` through `extra=`. Every string
field is redacted before it is written.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any

from .redaction import sanitize_text

# LogRecord attributes copied into the JSON line when a call site sets them.
APPLET_FIELDS = ("session_id", "service", "detail", "error_type", "user_error")


class SessionFilter(logging.Filter):
    """Stamp every record passing the handler with the current CLI session."""

    def __init__(self, session_id: str | None = None) -> None:
        super().__init__()
        self.session_id = session_id

    def filter(self, record: logging.LogRecord) -> bool:
        if self.session_id is not None and not hasattr(record, "session_id"):
            record.session_id = self.session_id
        return True


class JsonConsoleFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        event: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": sanitize_text(record.getMessage()),
        }
        for field in APPLET_FIELDS:
            value = getattr(record, field, None)
            if value is None:
                continue
            event[field] = sanitize_text(value) if isinstance(value, str) else value
        if record.exc_info:
            event["exception"] = sanitize_text(self.formatException(record.exc_info))
        return json.dumps(event, default=str)


def setup_logger(
    name: str = "weather_applet",
    level: int = logging.INFO,
    session_id: str | None = None,
) -> logging.Logger:
    """Configure the applet logger; repeated calls only move it to the new session."""
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    for handler in logger.handlers:
        for existing in handler.filters:
            if isinstance(existing, SessionFilter):
                existing.session_id = session_id
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(JsonConsoleFormatter())
    handler.addFilter(SessionFilter(session_id))
    logger.addHandler(handler)
    return logger
