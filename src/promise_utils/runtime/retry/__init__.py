"""Retry with backoff for async operations.

Example:
    >>> from promise_utils.runtime.retry import with_retry, ExponentialBackoff
    >>>
    >>> data = await with_retry(
    ...     lambda attempt, previous_result, previous_error: fetch(url),
    ...     ExponentialBackoff(base=200, max_retries=4),
    ...     lambda error, result, attempt: isinstance(error, ConnectionError),
    ... )
"""

from .backoff import (
    EXPONENTIAL_SEQUENCE,
    FIBONACCI_SEQUENCE,
    ConstantBackoff,
    ExponentialBackoff,
    LinearBackoff,
    jittered,
)
from .engine import Outcome, retry_on_error, with_retry
from .repeat import repeat

__all__ = [
    # Backoff tables and policies
    "FIBONACCI_SEQUENCE",
    "EXPONENTIAL_SEQUENCE",
    "ExponentialBackoff",
    "LinearBackoff",
    "ConstantBackoff",
    "jittered",
    # Execution
    "Outcome",
    "repeat",
    "retry_on_error",
    "with_retry",
]
