"""
Logging configuration and structured event records.

Sets up stdlib logging with a consistent line format, and provides
``log()`` for structured lifecycle events: one JSON object per record,
always carrying ``level``, an ISO-8601 ``timestamp`` and the ``event``.
Logging must not change program behavior, so ``log()`` never raises.
Never logs sensitive data (request bodies, tokens, cookies).
"""

import json
import logging
import sys
from datetime import datetime, timezone
from collections.abc import Mapping
from typing import Any, Literal, Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

EVENT_LOGGER_NAME = "app.events"

LogLevel = Literal["info", "warn", "error"]

_LEVELS: dict[str, int] = {
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

event_logger = logging.getLogger(EVENT_LOGGER_NAME)


def configure_logging(level: str = "INFO") -> None:
    """Configure structured logging for the application.

    Args:
        level: The log level string (DEBUG, INFO, WARNING, ERROR).
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stdout,
        force=True,
    )

    # Suppress noisy third-party loggers
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def build_record(level: str, event: str, fields: Mapping[str, Any]) -> dict[str, Any]:
    """Assemble the record emitted for one event."""
    return {
        **fields,
        "level": level,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "event": event,
    }


def _serialize(record: dict[str, Any]) -> str:
    try:
        return json.dumps(record, default=str)
    except (TypeError, ValueError):
        # Circular references or keys json cannot encode.
        return json.dumps(
            {
                "level": record.get("level"),
                "timestamp": record.get("timestamp"),
                "event": str(record.get("event")),
                "payload": repr(record),
            },
            default=str,
        )


def log(level: LogLevel, event: str, fields: Optional[Mapping[str, Any]] = None) -> None:
    """Emit one structured event record.

    Args:
        level: One of ``info``, ``warn`` or ``error``. Unknown levels
            are logged at info.
        event: Dotted event name, e.g. ``request.completed``.
        fields: Extra context serialized into the record. Keys named
            ``level``, ``timestamp`` or ``event`` are overridden.
    """
    try:
        record = build_record(level, event, fields or {})
        event_logger.log(_LEVELS.get(level, logging.INFO), _serialize(record))
    except Exception:
        # A failing handler or a hostile repr() must not break the caller.
        pass
