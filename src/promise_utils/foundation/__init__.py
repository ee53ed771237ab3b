"""Foundation - Core building blocks for promise_utils.

Contains: error types, configuration.
"""

from __future__ import annotations

from .config import (
    LoggingSettings,
    PromiseUtilsSettings,
    RetrySettings,
    clear_settings_cache,
    get_settings,
)
from .errors import ErrorCode, InvalidArgumentError, PromiseUtilsError, RejectedError, as_exception, rejection_reason

__all__ = [
    # Errors
    "ErrorCode", "InvalidArgumentError", "PromiseUtilsError", "RejectedError", "as_exception", "rejection_reason",
    # Config
    "PromiseUtilsSettings", "LoggingSettings", "RetrySettings", "get_settings", "clear_settings_cache",
]
