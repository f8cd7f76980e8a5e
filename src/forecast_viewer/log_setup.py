"""JSON console logging for the forecast viewer.

Every line is one JSON object. Messages and exception text pass through
`sanitize_text`; structured values passed as ``extra={"context": {...}}``
pass through `sanitize_for_logging`, so the weatherapi.com key never
reaches the console.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any

from .redaction import sanitize_for_logging, sanitize_text

LOGGER_NAME = "forecast_viewer"
CONTEXT_ATTR = "context"


class JsonConsoleFormatter(logging.Formatter):
    """One JSON event per record, with redacted message and context."""

    def format(self, record: logging.LogRecord) -> str:
        event: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": sanitize_text(record.getMessage()),
        }
        context = getattr(record, CONTEXT_ATTR, None)
        if context is not None:
            event[CONTEXT_ATTR] = sanitize_for_logging(context)
        if record.exc_info:
            event["exception"] = sanitize_text(self.formatException(record.exc_info))
        return json.dumps(event, default=str, ensure_ascii=False)


def setup_logger(name: str = LOGGER_NAME, level: int | str = logging.INFO) -> logging.Logger:
    """Configure the package logger; child loggers (`forecast_viewer.*`) share its handler."""
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(JsonConsoleFormatter())
        logger.addHandler(handler)
    return logger
