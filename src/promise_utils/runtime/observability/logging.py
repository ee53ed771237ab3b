"""Logging setup for promise_utils.

Library modules log through stdlib loggers under the ``promise_utils``
namespace and never configure handlers themselves. Applications that want
to see those records call ``configure_logging`` once at startup:

    >>> from promise_utils import configure_logging
    >>> configure_logging(format="json", level="DEBUG")

Without arguments the format and level come from ``LoggingSettings``
(``PROMISE_UTILS_LOG_FORMAT``, ``PROMISE_UTILS_LOG_LEVEL``).
"""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime
from typing import TextIO

import orjson

from promise_utils.foundation.config import get_settings

ROOT_LOGGER = "promise_utils"

# Attributes every LogRecord has; anything else came in through ``extra=``
_RESERVED = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


def get_logger(name: str) -> logging.Logger:
    """Logger for a library module, e.g. ``get_logger("retry")``."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def _extras(record: logging.LogRecord) -> dict[str, object]:
    return {k: v for k, v in vars(record).items() if k not in _RESERVED and not k.startswith("_")}


class TextFormatter(logging.Formatter):
    """Human-readable output. Format: timestamp [level] logger: message key=value ..."""

    def __init__(self, include_timestamps: bool = True) -> None:
        super().__init__()
        self.include_timestamps = include_timestamps

    def format(self, record: logging.LogRecord) -> str:
        parts = [self._timestamp(record)] if self.include_timestamps else []
        parts += [f"[{record.levelname.lower()}]", f"{record.name}:", record.getMessage()]
        parts += [f"{k}={v!r}" for k, v in sorted(_extras(record).items())]
        line = " ".join(parts)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line

    @staticmethod
    def _timestamp(record: logging.LogRecord) -> str:
        return datetime.fromtimestamp(record.created, tz=UTC).strftime("%H:%M:%S.%f")[:-3]


class JsonFormatter(logging.Formatter):
    """JSON Lines output for log aggregation. One object per record."""

    def __init__(self, include_timestamps: bool = True) -> None:
        super().__init__()
        self.include_timestamps = include_timestamps

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, object] = {}
        if self.include_timestamps:
            data["timestamp"] = datetime.fromtimestamp(record.created, tz=UTC).isoformat()
        data |= {"level": record.levelname.lower(), "logger": record.name, "event": record.getMessage()}
        data |= _extras(record)
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return orjson.dumps(data, default=repr, option=orjson.OPT_NON_STR_KEYS).decode()


def configure_logging(
    format: str | None = None,  # noqa: A002 - shadows builtin but matches stdlib
    level: str | None = None,
    *,
    output: TextIO | None = None,
) -> logging.Handler:
    """Install a single handler on the ``promise_utils`` logger.

    Calling it again replaces the previously installed handler.

    Args:
        format: "text" or "json" (default: from settings)
        level: DEBUG, INFO, WARNING, ... (default: from settings)
        output: Stream to write to (default: stderr)

    Returns:
        The installed handler
    """
    settings = get_settings()
    format = format or settings.logging.format
    level = (level or settings.effective_log_level).upper()

    formatter: logging.Formatter
    if format == "text":
        formatter = TextFormatter(settings.logging.include_timestamps)
    elif format == "json":
        formatter = JsonFormatter(settings.logging.include_timestamps)
    else:
        raise ValueError(f"Unknown format: {format}. Use 'text' or 'json'")

    logger = logging.getLogger(ROOT_LOGGER)
    for existing in [h for h in logger.handlers if getattr(h, "_promise_utils", False)]:
        logger.removeHandler(existing)

    handler = logging.StreamHandler(output or sys.stderr)
    handler.setFormatter(formatter)
    handler._promise_utils = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level, logging.WARNING))
    return handler
