"""Logging setup for command-line execution."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any

from .redaction import sanitize_text

ROOT_LOGGER_NAME = "snap_weather"


class JsonConsoleFormatter(logging.Formatter):
    """JSON formatter for structured console logs.

    Each line carries the component (the logger name below the package root)
    and, when set, the CLI session id also stamped on journal events.
    """

    def __init__(self, session_id: str | None = None) -> None:
        super().__init__()
        self.session_id = session_id

    def format(self, record: logging.LogRecord) -> str:
        event: dict[str, Any] = {
            "ts": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "component": _component(record.name),
            "message": sanitize_text(record.getMessage()),
        }
        if self.session_id:
            event["session_id"] = self.session_id
        if record.exc_info:
            event["exception"] = sanitize_text(self.formatException(record.exc_info))
        return json.dumps(event, default=str)


def _component(logger_name: str) -> str:
    prefix = f"{ROOT_LOGGER_NAME}."
    if logger_name.startswith(prefix):
        return logger_name[len(prefix):]
    return "cli" if logger_name == ROOT_LOGGER_NAME else logger_name


def setup_logger(
    name: str = ROOT_LOGGER_NAME,
    level: int | str = logging.INFO,
    session_id: str | None = None,
) -> logging.Logger:
    """Create and configure the package logger.

    Child loggers such as ``snap_weather.aggregator`` propagate into it, so a
    single handler covers every component. Calling it again re-stamps the
    existing handlers with the new session id.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False
    if logger.handlers:
        for handler in logger.handlers:
            handler.setFormatter(JsonConsoleFormatter(session_id=session_id))
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(JsonConsoleFormatter(session_id=session_id))
    logger.addHandler(handler)
    return logger
