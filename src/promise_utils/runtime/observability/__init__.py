"""Observability - logging setup for promise_utils."""

from .logging import ROOT_LOGGER, JsonFormatter, TextFormatter, configure_logging, get_logger

__all__ = ["ROOT_LOGGER", "JsonFormatter", "TextFormatter", "configure_logging", "get_logger"]
