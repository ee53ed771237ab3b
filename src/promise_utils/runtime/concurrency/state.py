"""Settlement state of a deferred value.

A future is either still PENDING, or it settled exactly once into FULFILLED
or REJECTED. Inspecting it never waits for it and never changes it.

Example:
    >>> fut = delayed_resolve(50, "x")
    >>> await promise_state(fut)
    <PromiseState.PENDING: 'Pending'>
    >>> await fut
    'x'
    >>> await promise_state(fut)
    <PromiseState.FULFILLED: 'Fulfilled'>
"""

from __future__ import annotations

import asyncio
from enum import StrEnum

from promise_utils.foundation.errors import InvalidArgumentError


class PromiseState(StrEnum):
    """The three externally observable states of a future."""
    PENDING = "Pending"
    FULFILLED = "Fulfilled"
    REJECTED = "Rejected"


def settlement_state(future: asyncio.Future[object]) -> PromiseState:
    """Current state of ``future``, computed without suspending.

    A cancelled future counts as REJECTED since awaiting it raises
    ``CancelledError``.

    Raises:
        InvalidArgumentError: If ``future`` is not an asyncio future/task
            (a ``TypeError``)
    """
    if not asyncio.isfuture(future):
        raise InvalidArgumentError(f"Expected an asyncio future, got {type(future).__name__}")
    if not future.done():
        return PromiseState.PENDING
    if future.cancelled() or future.exception() is not None:
        return PromiseState.REJECTED
    return PromiseState.FULFILLED


async def promise_state(future: asyncio.Future[object]) -> PromiseState:
    """Retrieve the state of ``future``.

    Resolves immediately whatever the state is: the target is inspected,
    never awaited, so a pending target cannot block the probe and a failed
    one does not make it raise.
    """
    return settlement_state(future)


def settled_value(future: asyncio.Future[object]) -> object:
    """Fulfilled value or failure of a settled future, without raising."""
    if future.cancelled():
        return asyncio.CancelledError()
    exc = future.exception()
    return exc if exc is not None else future.result()
