"""Backoff tables and policies for ``with_retry``.

``with_retry`` takes either a sequence of delays (milliseconds, indexed by
``attempt - 1``) or a function ``(attempt, previous_result, previous_error)``
returning the next delay, or None to stop. This module provides both:

- FIBONACCI_SEQUENCE / EXPONENTIAL_SEQUENCE: ready-made tables to slice,
  scale or cap
- ExponentialBackoff, LinearBackoff, ConstantBackoff: callable policies
- jittered: randomize a table to avoid synchronized retries

Example:
    >>> # 1ms, 2ms, 3ms, 5ms, 8ms
    >>> await with_retry(op, FIBONACCI_SEQUENCE[:5], lambda err, *_: is_throttled(err))
    >>> # 1s, 2s, 3s, 5s, 8s, 10s, 10s, ... (10 retries)
    >>> await with_retry(op, [1000 * min(n, 10) for n in FIBONACCI_SEQUENCE[:10]])
    >>> # with +-10% randomness
    >>> await with_retry(op, jittered([1000 * n for n in FIBONACCI_SEQUENCE[:5]]))
    >>> # 100ms, 200ms, 400ms, ... capped at 5s, at most 8 retries
    >>> await with_retry(op, ExponentialBackoff(base=100, max_delay=5000, max_retries=8))
"""

from __future__ import annotations

import random
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Self

from promise_utils.foundation.config import get_settings

FIBONACCI_SEQUENCE: tuple[int, ...] = (
    1, 2, 3, 5, 8, 13, 21, 34, 55, 89, 144, 233, 377, 610, 987, 1597, 2584,
    4181, 6765, 10946, 17711, 28657, 46368, 75025, 121393, 196418, 317811,
)

EXPONENTIAL_SEQUENCE: tuple[int, ...] = tuple(2 ** n for n in range(26))


def jittered(delays: Iterable[float], ratio: float = 0.1) -> list[float]:
    """Scale each delay by a random factor in ``[1 - ratio, 1 + ratio]``."""
    return [d * (1 + ratio * (2 * random.random() - 1)) for d in delays]


@dataclass(frozen=True, slots=True)
class ExponentialBackoff:
    """Exponential backoff with optional jitter.

    Delay = min(base * (multiplier ^ (attempt - 1)), max_delay) * jitter

    Attributes:
        base: First delay in ms (default: 100)
        multiplier: Exponential growth factor (default: 2.0)
        max_delay: Cap in ms (default: 10000)
        max_retries: Retries before giving up (default: 5)
        jitter: Randomize each delay to 0.5-1.5x (default: False)
    """

    base: float = 100.0
    multiplier: float = 2.0
    max_delay: float = 10_000.0
    max_retries: int = 5
    jitter: bool = False

    @classmethod
    def from_settings(cls) -> Self:
        """Policy with the defaults from ``RetrySettings``."""
        s = get_settings().retry
        return cls(base=s.base_delay, multiplier=s.multiplier, max_delay=s.max_delay,
                   max_retries=s.max_retries, jitter=s.jitter)

    def delay(self, attempt: int) -> float:
        d = min(self.base * (self.multiplier ** (attempt - 1)), self.max_delay)
        return d * (0.5 + random.random()) if self.jitter else d

    def __call__(self, attempt: int, previous_result: object = None, previous_error: object = None) -> float | None:
        return self.delay(attempt) if attempt <= self.max_retries else None


@dataclass(frozen=True, slots=True)
class LinearBackoff:
    """Linear backoff with cap.

    Delay = min(base + (increment * (attempt - 1)), max_delay)
    """

    base: float = 100.0
    increment: float = 100.0
    max_delay: float = 10_000.0
    max_retries: int = 5

    def __call__(self, attempt: int, previous_result: object = None, previous_error: object = None) -> float | None:
        if attempt > self.max_retries:
            return None
        return min(self.base + (self.increment * (attempt - 1)), self.max_delay)


@dataclass(frozen=True, slots=True)
class ConstantBackoff:
    """Fixed delay between retries.

    Simple strategy for rate-limited APIs with known cooldown.
    """

    delay: float = 1000.0
    max_retries: int = 5

    def __call__(self, attempt: int, previous_result: object = None, previous_error: object = None) -> float | None:
        return self.delay if attempt <= self.max_retries else None
