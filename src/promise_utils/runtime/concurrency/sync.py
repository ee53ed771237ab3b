"""Per-key mutual exclusion for async operations.

``synchronized(lock, operation)`` makes sure operations registered under the
same lock key never run concurrently, similar to ``synchronized`` in Java.
Each operation is told how its predecessor went:

    operation(previous_state, previous_settled_state, previous_result)

- previous_state: state of the predecessor when ``synchronized`` was called
  (None if there was none)
- previous_settled_state: state of the predecessor once it settled
- previous_result: its fulfilled value or its exception

Example:
    >>> async def refresh(state, settled_state, previous):
    ...     if settled_state is PromiseState.FULFILLED:
    ...         return previous  # reuse the token fetched a moment ago
    ...     return await fetch_token()
    >>> token = await synchronized("token", refresh)
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable, Hashable
from typing import TypeVar

from promise_utils.foundation.errors import InvalidArgumentError
from promise_utils.runtime.observability import get_logger

from .state import PromiseState, settled_value, settlement_state

T = TypeVar("T")

SynchronizedOperation = Callable[[PromiseState | None, PromiseState | None, object], Awaitable[T]]

logger = get_logger("sync")


def _invoke(operation: SynchronizedOperation[T], *args: object) -> Awaitable[T]:
    awaitable = operation(*args)
    if not inspect.isawaitable(awaitable):
        raise InvalidArgumentError(f"synchronized operation must return an awaitable, got {type(awaitable).__name__}")
    return awaitable


async def _after(previous: asyncio.Future[object], operation: SynchronizedOperation[T]) -> T:
    # asyncio.wait does not cancel ``previous`` if this task gets cancelled
    await asyncio.wait({previous})
    return await _invoke(operation, PromiseState.PENDING, settlement_state(previous), settled_value(previous))


class LockRegistry:
    """Lock table mapping each lock key to the last future registered for it.

    Entries are overwritten on every call and never removed, so the key
    space should be bounded. Use a dedicated registry to isolate a group of
    locks (tests, subsystems); module-level ``synchronized`` uses the
    process-wide default one.
    """

    __slots__ = ("_locks",)

    def __init__(self) -> None:
        self._locks: dict[Hashable, asyncio.Future[object]] = {}

    def __len__(self) -> int:
        return len(self._locks)

    def __contains__(self, lock: Hashable) -> bool:
        return lock in self._locks

    def get(self, lock: Hashable) -> asyncio.Future[object] | None:
        """Future most recently registered for ``lock``."""
        return self._locks.get(lock)

    def synchronized(self, lock: Hashable, operation: SynchronizedOperation[T]) -> asyncio.Future[T]:
        """Run ``operation`` once every operation registered before under ``lock`` settled.

        Reading the previous entry and registering the new future happen in
        one step with no suspension point in between, so concurrent calls
        for the same key always chain onto each other.

        Args:
            lock: Lock key (a string, a number, ``self`` in a class, ...)
            operation: Function performing the work and returning an awaitable

        Returns:
            Future of this call's operation
        """
        previous = self._locks.get(lock)
        state = settlement_state(previous) if previous is not None else None
        match state:
            case None:
                future = asyncio.ensure_future(_invoke(operation, None, None, None))
            case PromiseState.PENDING:
                logger.debug("Lock %r busy, queueing operation", lock)
                future = asyncio.ensure_future(_after(previous, operation))
            case PromiseState.FULFILLED | PromiseState.REJECTED:
                future = asyncio.ensure_future(_invoke(operation, state, state, settled_value(previous)))
        self._locks[lock] = future
        return future

    synchronised = synchronized

    def clear(self) -> None:
        """Forget all locks. Operations already registered keep running."""
        self._locks.clear()


_default_registry: LockRegistry | None = None


def get_lock_registry() -> LockRegistry:
    """Get or create the process-wide registry."""
    global _default_registry
    if _default_registry is None:
        _default_registry = LockRegistry()
    return _default_registry


def reset_lock_registry() -> None:
    """Drop the process-wide registry (useful for testing)."""
    global _default_registry
    _default_registry = None


def synchronized(lock: Hashable, operation: SynchronizedOperation[T]) -> asyncio.Future[T]:
    """``LockRegistry.synchronized`` on the process-wide registry."""
    return get_lock_registry().synchronized(lock, operation)


def synchronised(lock: Hashable, operation: SynchronizedOperation[T]) -> asyncio.Future[T]:
    """Another spelling of ``synchronized``."""
    return synchronized(lock, operation)
