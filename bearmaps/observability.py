"""Logging setup for bearmaps.

``configure_logging`` installs one root handler from ``ObservabilityConfig``,
plain or JSON. ``log_duration`` times a block and logs it at debug level.
"""

from __future__ import annotations

import json
import logging
import time
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from .config import ObservabilityConfig, get_config

logger = logging.getLogger("bearmaps")

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", None, None)).keys()
) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """One JSON object per record, including fields passed via ``extra``."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": self.formatTime(record),
            "logger": record.name,
            "level": record.levelname,
            "message": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(config: Optional[ObservabilityConfig] = None) -> None:
    """Install a root handler according to the observability settings."""
    config = config or get_config().observability

    handler = logging.StreamHandler()
    if config.structured:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(config.format))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(config.level.upper())


@contextmanager
def log_duration(
    log: logging.Logger, operation: str, **fields: Any
) -> Iterator[dict[str, Any]]:
    """Log how long the wrapped block took.

    The yielded dict can be filled with extra fields while the block runs.
    Nothing is logged if the block raises.
    """
    extra: dict[str, Any] = dict(fields)
    started = time.perf_counter()
    yield extra
    extra["elapsed_ms"] = round((time.perf_counter() - started) * 1000, 3)
    log.debug(f"{operation} finished", extra=extra)
