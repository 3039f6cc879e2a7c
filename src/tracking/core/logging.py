from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

# `extra=` keys copied onto the JSON line when a record carries them
LOG_FIELDS = ("input_id", "method", "transport", "status", "reason", "url")


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts_utc": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key in LOG_FIELDS:
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, separators=(",", ":"), ensure_ascii=True, default=str)


def get_logger(name: str = "tracking", level: str = "INFO") -> logging.Logger:
    """
    JSON-lines logger on stdout. Module loggers (`tracking.*`) propagate here,
    so configuring the package logger once sets the level for the library.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level.upper())
    if logger.handlers:
        return logger  # avoid double handlers in tests

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)
    logger.propagate = False
    return logger
