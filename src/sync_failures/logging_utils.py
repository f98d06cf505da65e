from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from enum import Enum
from typing import IO, Any


FAILURE_LOG_FIELDS = ("job_id", "attempt_number", "failure_origin", "failure_count")


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value


class FailureJsonFormatter(logging.Formatter):
    """One JSON object per line, carrying the job/attempt context passed via ``extra``."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            {field: _plain(getattr(record, field)) for field in FAILURE_LOG_FIELDS if hasattr(record, field)}
        )
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


def configure_logging(level: str = "INFO", stream: IO[str] | None = None) -> logging.Handler:
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level.upper())

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(FailureJsonFormatter())
    root.addHandler(handler)
    return handler
