"""
Structured logging setup for the account subsystem.

- Rich console handler for humans
- JSON file handler for downstream ingestion
- Throttling for warnings that repeat on every settings resolution
"""

from __future__ import annotations

import json
import logging
import sys
import time
from datetime import datetime
from typing import Dict, Optional, Set

from rich.logging import RichHandler

from src.core.json_utils import dumps

LOGGER_NAME = "account"


class JsonFormatter(logging.Formatter):
    """Compact JSON formatter for structured log ingestion."""

    def format(self, record: logging.LogRecord) -> str:
        ts = record.created
        payload = {
            "ts": ts,
            "ts_iso": datetime.fromtimestamp(ts).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, separators=(",", ":"))


class ThrottledFilter(logging.Filter):
    """
    Allows the first occurrence of a throttled event, then suppresses
    duplicates for cooldown_sec.
    """

    def __init__(self, cooldown_sec: float = 30.0, throttled_events: Optional[Set[str]] = None):
        super().__init__()
        self._cooldown = cooldown_sec
        self._last_seen: Dict[str, float] = {}
        self._throttled_events = throttled_events or {
            "account_empty_seed", "event_handler_error",
        }

    def filter(self, record: logging.LogRecord) -> bool:
        msg = record.getMessage()
        try:
            data = json.loads(msg)
            event = data.get("event", "")
        except (json.JSONDecodeError, TypeError, AttributeError):
            return True  # not a structured event

        if event not in self._throttled_events:
            return True

        now = time.time()
        key = f"{event}:{data.get('account_id', '')}"
        last = self._last_seen.get(key, 0)
        if now - last < self._cooldown:
            return False

        self._last_seen[key] = now
        return True


def build_logger(
    name: str = LOGGER_NAME,
    level: int = logging.INFO,
    file_path: Optional[str] = None,
    throttle_warnings: bool = True,
    rich_console: bool = True,
) -> logging.Logger:
    """
    Build the account logger.

    Args:
        name: Logger name
        level: Minimum log level
        file_path: Path to a JSON log file (None to disable file logging)
        throttle_warnings: Apply throttling filter to repetitive warnings
        rich_console: Rich console output; plain JSON to stdout otherwise

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Idempotent handler setup
    if logger.handlers:
        for h in logger.handlers:
            h.setLevel(level)
        return logger

    if rich_console:
        stream_handler: logging.Handler = RichHandler(
            rich_tracebacks=False,
            show_time=True,
            show_level=True,
            show_path=False,
            markup=False,
        )
        stream_handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        stream_handler = logging.StreamHandler(sys.stdout)
        stream_handler.setFormatter(JsonFormatter())
    stream_handler.setLevel(level)

    if throttle_warnings:
        stream_handler.addFilter(ThrottledFilter(cooldown_sec=30.0))

    logger.addHandler(stream_handler)

    if file_path:
        file_handler = logging.FileHandler(file_path)
        file_handler.setFormatter(JsonFormatter())
        file_handler.setLevel(level)
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger


def log_event(
    logger: logging.Logger,
    event: str,
    level: int = logging.INFO,
    **data
) -> None:
    """
    Log a structured event.

    Usage:
        log_event(log, "settings_resolved", mwm=14, depth=3)
    """
    payload = {"event": event, **data}
    logger.log(level, dumps(payload))
