"""Futures that settle after a fixed delay.

Example:
    >>> await delayed_resolve(50, "x")          # "x" after ~50ms
    >>> await delayed_resolve(50, make_value)   # make_value() called at 50ms
    >>> await delayed_reject(60, "boom")        # RejectedError("boom") after ~60ms
    >>> await delayed_reject(60, ValueError())  # raises the ValueError itself
"""

from __future__ import annotations

import asyncio
from typing import NoReturn, TypeVar

from promise_utils.foundation.errors import as_exception

from .sources import Source, resolve, to_source

T = TypeVar("T")


async def sleep_ms(ms: float) -> None:
    await asyncio.sleep(max(ms, 0) / 1000)


async def _resolve_later(ms: float, source: Source[T]) -> T:
    await sleep_ms(ms)
    return await resolve(source)


async def _reject_later(ms: float, source: Source[object]) -> NoReturn:
    await sleep_ms(ms)
    # A chained failure is adopted as is; a chained success becomes the reason
    raise as_exception(await resolve(source))


def delayed_resolve(ms: float, result: object = None) -> asyncio.Future[T]:
    """Create a future that resolves after ``ms`` milliseconds.

    Args:
        ms: Delay in milliseconds
        result: The value to resolve with, a zero-argument function supplying
            it (called when the delay has elapsed), or an awaitable whose
            outcome is adopted. Explicit ``Value``/``Supplier``/``Chained``
            variants are accepted too.

    Returns:
        A future scheduled on the running event loop
    """
    return asyncio.ensure_future(_resolve_later(ms, to_source(result)))


def delayed_reject(ms: float, reason: object) -> asyncio.Future[NoReturn]:
    """Create a future that fails after ``ms`` milliseconds.

    Args:
        ms: Delay in milliseconds
        reason: The failure reason, a function supplying it, or an awaitable.
            If the awaitable fails, its failure is used; if it succeeds, its
            value becomes the reason. Non-exception reasons are raised as
            ``RejectedError(reason)``.

    Returns:
        A future scheduled on the running event loop
    """
    return asyncio.ensure_future(_reject_later(ms, to_source(reason)))
