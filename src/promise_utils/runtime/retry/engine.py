"""Retry with backoff, built on ``repeat``.

Each iteration of the repeat loop runs one attempt and captures its outcome.
The next-parameter step decides whether another attempt is wanted
(``should_retry``, then ``backoff``) and, if so, hands the outcome to the
next iteration after the backoff delay.

Example:
    >>> result = await with_retry(lambda *_: do_something(), [100, 200, 300, 500, 800, 1000])
    >>> result = await with_retry(
    ...     lambda *_: do_something(),
    ...     lambda attempt, *_: 1000 * min(FIBONACCI_SEQUENCE[attempt - 1], 10) if attempt <= 8 else None,
    ...     lambda err, *_: getattr(err, "status_code", None) == 429,
    ... )
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from promise_utils.foundation.errors import InvalidArgumentError
from promise_utils.runtime.concurrency.delay import delayed_resolve
from promise_utils.runtime.observability import get_logger

from .repeat import repeat

R = TypeVar("R")

RetryOperation = Callable[[int, R | None, BaseException | None], Awaitable[R]]
BackoffFunction = Callable[[int, R | None, BaseException | None], float | None]
ShouldRetry = Callable[[BaseException | None, R | None, int], bool]

logger = get_logger("retry")


@dataclass(frozen=True, slots=True)
class Outcome(Generic[R]):
    """Result xor error of one attempt. ``Outcome()`` means no attempt yet."""

    result: R | None = None
    error: BaseException | None = None


def retry_on_error(previous_error: BaseException | None, previous_result: object, attempt: int) -> bool:
    """Default ``should_retry``: retry whenever the attempt raised."""
    return previous_error is not None


def _backoff_delay(
    backoff: Sequence[float] | BackoffFunction[R], attempt: int, outcome: Outcome[R],
) -> float | None:
    if callable(backoff):
        return backoff(attempt, outcome.result, outcome.error)
    return backoff[attempt - 1] if attempt <= len(backoff) else None


async def with_retry(
    operation: RetryOperation[R],
    backoff: Sequence[float] | BackoffFunction[R],
    should_retry: ShouldRetry[R] | None = None,
) -> R:
    """Repeatedly perform an operation until it no longer needs a retry.

    Args:
        operation: ``operation(attempt, previous_result, previous_error)``;
            ``attempt`` starts from 1 and both previous values are None on
            the first call.
        backoff: Delays in ms, or a function computing them from
            ``(attempt, previous_result, previous_error)``. Running out of
            elements, None, or a negative delay stops retrying. ``attempt``
            starts from 1: it is consulted right after the first attempt.
        should_retry: ``should_retry(previous_error, previous_result, attempt)``
            decides whether another call should occur; evaluated before
            ``backoff``. Default: retry whenever the operation raised.

    Returns:
        The result of the last attempt

    Raises:
        The exception of the last attempt, if it failed
    """
    if not callable(backoff) and not isinstance(backoff, Sequence):
        raise InvalidArgumentError(f"backoff must be a sequence of delays or a function, got {type(backoff).__name__}")
    decide = should_retry or retry_on_error
    attempt = 1

    async def attempt_once(previous: Outcome[R]) -> Outcome[R]:
        try:
            return Outcome(result=await operation(attempt, previous.result, previous.error))
        except Exception as e:
            return Outcome(error=e)

    def next_outcome(outcome: Outcome[R]) -> asyncio.Future[Outcome[R]] | None:
        nonlocal attempt
        if not decide(outcome.error, outcome.result, attempt):
            return None
        delay = _backoff_delay(backoff, attempt, outcome)
        if delay is None or delay < 0:
            return None
        logger.debug("Retry %d after %.0fms (error: %r)", attempt, delay, outcome.error)
        attempt += 1
        return delayed_resolve(delay, outcome)

    final: Outcome[R] = await repeat(attempt_once, next_outcome, lambda _, outcome: outcome, Outcome(), Outcome())
    if final.error is not None:
        raise final.error
    return final.result  # type: ignore[return-value]
