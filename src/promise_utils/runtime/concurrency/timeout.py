"""Timeouts that settle with a fallback instead of cancelling.

The operation is raced against a delayed settlement. Whichever settles first
decides the outcome; the loser is not cancelled, it just stops being
observed. Callers that drop a still-running operation are responsible for
its eventual failure. A fallback awaitable is not cancelled either; a
fallback coroutine that ends up unused is closed without running.

Example:
    >>> # Resolve with None if fetch() takes longer than 500ms
    >>> data = await timeout_resolve(fetch(), 500)

    >>> # Fail with a custom reason; the supplier only runs on timeout
    >>> data = await timeout_reject(fetch, 500, lambda: LookupError("too slow"))
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from typing import TypeVar

from promise_utils.foundation.errors import InvalidArgumentError, RejectedError, rejection_reason

from .delay import delayed_reject, delayed_resolve
from .sources import Chained, Source, Supplier, resolve, to_source
from .state import PromiseState, settled_value, settlement_state

T = TypeVar("T")

Operation = Awaitable[T] | Callable[[], Awaitable[T]]

# Produced by a timer that fired after the operation had already settled.
# The race is decided by then, so nobody ever observes it.
_UNUSED = object()


def _start(operation: Operation[T]) -> asyncio.Future[T]:
    awaitable = operation() if callable(operation) else operation
    if not inspect.isawaitable(awaitable):
        raise InvalidArgumentError(f"operation must be awaitable or return an awaitable, got {type(awaitable).__name__}")
    return asyncio.ensure_future(awaitable)


def _discard(source: Source[object]) -> None:
    """Close a fallback coroutine that will never be awaited."""
    match source:
        case Chained(awaitable=awaitable) if (
            inspect.iscoroutine(awaitable) and inspect.getcoroutinestate(awaitable) == inspect.CORO_CREATED
        ):
            awaitable.close()


def _fallback(future: asyncio.Future[T], source: Source[object], *, reject: bool) -> Supplier[object]:
    """Fallback supplier that only resolves ``source`` if ``future`` is still pending."""
    async def supply() -> object:
        match settlement_state(future):
            case PromiseState.PENDING:
                value = await resolve(source)
                if reject and not isinstance(value, BaseException):
                    return RejectedError.timeout(value)
                return value
            case PromiseState.FULFILLED | PromiseState.REJECTED:
                _discard(source)
                return _UNUSED
    return Supplier(supply)


def _observer(source: Source[object]) -> Callable[[asyncio.Future[object]], None]:
    """Done callback retrieving the timer's failure, or discarding the
    fallback if the timer was cancelled before it fired."""
    def observe(timer: asyncio.Future[object]) -> None:
        if timer.cancelled():
            _discard(source)
        else:
            timer.exception()
    return observe


async def _race(future: asyncio.Future[T], timer: asyncio.Future[T]) -> T:
    try:
        await asyncio.wait({future, timer}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        timer.cancel()  # no-op once it fired
    # Both may be done by now; the timer only won if it produced a real fallback
    if timer.done() and not timer.cancelled() and rejection_reason(settled_value(timer)) is not _UNUSED:
        return timer.result()
    return future.result()


def timeout_resolve(operation: Operation[T], ms: float, result: object = None) -> asyncio.Future[T]:
    """Apply a timeout that resolves with ``result``.

    If the timeout does not occur, the returned future mirrors the outcome
    of ``operation``. If ``result`` is a function and the timeout does not
    occur, the function is never called.

    Args:
        operation: An awaitable, or a function returning one (called once, now)
        ms: Timeout in milliseconds
        result: Fallback value, a function supplying it, or an awaitable

    Returns:
        A future with the operation's outcome or the fallback
    """
    future = _start(operation)
    source = to_source(result)
    timer: asyncio.Future[T] = delayed_resolve(ms, _fallback(future, source, reject=False))
    timer.add_done_callback(_observer(source))
    return asyncio.ensure_future(_race(future, timer))


def timeout_reject(operation: Operation[T], ms: float, reason: object) -> asyncio.Future[T]:
    """Apply a timeout that fails with ``reason``.

    If the timeout does not occur, the returned future mirrors the outcome
    of ``operation``. If ``reason`` is a function and the timeout does not
    occur, the function is never called. A reason that is not an exception
    is raised as ``RejectedError`` with code TIMEOUT.

    Args:
        operation: An awaitable, or a function returning one (called once, now)
        ms: Timeout in milliseconds
        reason: Failure reason, a function supplying it, or an awaitable

    Returns:
        A future with the operation's outcome or the timeout failure
    """
    future = _start(operation)
    source = to_source(reason)
    timer: asyncio.Future[T] = delayed_reject(ms, _fallback(future, source, reject=True))
    timer.add_done_callback(_observer(source))
    return asyncio.ensure_future(_race(future, timer))
