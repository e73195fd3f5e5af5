"""Structured logging configuration.

Uses standard library logging with a JSON formatter. Logs go to stderr so CLI
output on stdout stays machine-readable.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

_RESERVED_LOG_RECORD_ATTRS: set[str] = {
    "args",
    "asctime",
    "color_message",
    "created",
    "exc_info",
    "exc_text",
    "filename",
    "funcName",
    "levelname",
    "levelno",
    "lineno",
    "module",
    "msecs",
    "message",
    "msg",
    "name",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "stack_info",
    "taskName",
    "thread",
    "threadName",
}


# Ids the workflow service attaches via `extra=`; promoted to top-level keys so a
# single instance's or definition's trail can be filtered without digging into "extra".
WORKFLOW_CONTEXT_KEYS: tuple[str, ...] = ("definition_id", "instance_id", "action_id")


class JsonFormatter(logging.Formatter):
    """JSON formatter for workflow engine log records.

    Output keys: timestamp, level, logger, message, any workflow context ids
    present on the record, then remaining `extra=` fields under "extra".
    """

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (record)
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        fields = record.__dict__
        for key in WORKFLOW_CONTEXT_KEYS:
            if key in fields:
                payload[key] = fields[key]

        extra = {
            key: value
            for key, value in fields.items()
            if key not in _RESERVED_LOG_RECORD_ATTRS
            and key not in WORKFLOW_CONTEXT_KEYS
            and not key.startswith("_")
        }
        if extra:
            payload["extra"] = extra

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(level: str) -> None:
    """Configure root logging with structured JSON output."""

    root = logging.getLogger()

    # Remove any existing handlers to avoid duplicate logs when re-configuring.
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(JsonFormatter())

    root.addHandler(handler)
    root.setLevel(level.upper())

    # Keep the ASGI server's access log quiet unless explicitly configured.
    for name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
        logging.getLogger(name).setLevel(max(root.level, logging.INFO))
