"""promise_utils - Concurrency-control primitives for asyncio.

Retry with backoff, timeouts with fallbacks, bounded-parallelism job runs,
state inspection of pending futures, and per-key mutual exclusion.
All delays are in milliseconds.

Quick Start:
    >>> from promise_utils import with_retry, in_parallel, timeout_resolve, synchronized
    >>>
    >>> # Retry a flaky call: wait 100ms, 200ms, then 400ms between attempts
    >>> data = await with_retry(lambda *_: fetch(url), [100, 200, 400])
    >>>
    >>> # At most 5 requests in flight; failures are returned, not raised
    >>> outcomes = await in_parallel(5, urls, lambda url, i: fetch(url))
    >>>
    >>> # Give up waiting after 2s and use a default
    >>> page = await timeout_resolve(fetch(url), 2000, "")
    >>>
    >>> # Serialize token refreshes
    >>> token = await synchronized("token", lambda state, settled, previous: refresh())

Configuration:
    Environment variables with the PROMISE_UTILS_ prefix, see
    ``promise_utils.foundation.config``. Logging stays silent until
    ``configure_logging()`` is called.
"""

from __future__ import annotations

from promise_utils.facade import PromiseUtils
from promise_utils.foundation import (
    ErrorCode,
    InvalidArgumentError,
    LoggingSettings,
    PromiseUtilsError,
    PromiseUtilsSettings,
    RejectedError,
    RetrySettings,
    clear_settings_cache,
    get_settings,
)
from promise_utils.runtime.concurrency import (
    Chained,
    LockRegistry,
    PromiseState,
    Supplier,
    Value,
    delayed_reject,
    delayed_resolve,
    get_lock_registry,
    in_parallel,
    promise_state,
    reset_lock_registry,
    settlement_state,
    synchronised,
    synchronized,
    timeout_reject,
    timeout_resolve,
    with_concurrency,
)
from promise_utils.runtime.observability import configure_logging
from promise_utils.runtime.retry import (
    EXPONENTIAL_SEQUENCE,
    FIBONACCI_SEQUENCE,
    ConstantBackoff,
    ExponentialBackoff,
    LinearBackoff,
    jittered,
    repeat,
    with_retry,
)

__version__ = "1.0.0"

__all__ = [
    "PromiseUtils",
    # Core operations
    "repeat",
    "with_retry",
    "with_concurrency",
    "in_parallel",
    "delayed_resolve",
    "delayed_reject",
    "timeout_resolve",
    "timeout_reject",
    "promise_state",
    "settlement_state",
    "synchronized",
    "synchronised",
    # Types
    "PromiseState",
    "Value",
    "Supplier",
    "Chained",
    "LockRegistry",
    "get_lock_registry",
    "reset_lock_registry",
    # Backoff
    "FIBONACCI_SEQUENCE",
    "EXPONENTIAL_SEQUENCE",
    "ExponentialBackoff",
    "LinearBackoff",
    "ConstantBackoff",
    "jittered",
    # Errors
    "ErrorCode",
    "InvalidArgumentError",
    "PromiseUtilsError",
    "RejectedError",
    # Config & logging
    "PromiseUtilsSettings",
    "LoggingSettings",
    "RetrySettings",
    "get_settings",
    "clear_settings_cache",
    "configure_logging",
]
