"""Value sources for delayed and fallback settlement.

Several operations accept "a value, a function supplying the value, or an
awaitable that will produce the value". Arguments are classified once into
an explicit variant at the API boundary, and ``resolve`` is the only place
that knows how to turn a variant into a value:

    - Value(x): settle with ``x`` as is
    - Supplier(fn): call ``fn()`` at settlement time; await the result if
      it is awaitable
    - Chained(aw): await ``aw`` at settlement time

Example:
    >>> to_source(42)
    Value(value=42)
    >>> to_source(lambda: 42)
    Supplier(fn=<function <lambda> at ...>)
    >>> # Resolve with a function object itself instead of calling it
    >>> delayed_resolve(10, Value(print))
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

from promise_utils.foundation.errors import InvalidArgumentError

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Value(Generic[T]):
    """A literal value."""

    value: T


@dataclass(frozen=True, slots=True)
class Supplier(Generic[T]):
    """A zero-argument function invoked lazily, at settlement time."""

    fn: Callable[[], T | Awaitable[T]]


@dataclass(frozen=True, slots=True)
class Chained(Generic[T]):
    """An awaitable whose outcome is adopted."""

    awaitable: Awaitable[T]


Source: TypeAlias = Value[T] | Supplier[T] | Chained[T]


def to_source(value: object) -> Source[object]:
    """Classify a raw argument. Explicit variants pass through unchanged."""
    match value:
        case Value() | Supplier() | Chained():
            return value
    if inspect.isawaitable(value):
        return Chained(value)
    if callable(value):
        return Supplier(value)
    return Value(value)


async def resolve(source: Source[T]) -> T:
    """Produce the value of a source. Failures of suppliers and chained
    awaitables propagate.

    Awaitables are awaited through ``asyncio.shield``: cancelling the task
    that resolves a source never cancels a future the caller handed in.
    """
    match source:
        case Value(value=value):
            return value
        case Supplier(fn=fn):
            produced = fn()
            return await asyncio.shield(produced) if inspect.isawaitable(produced) else produced
        case Chained(awaitable=awaitable):
            return await asyncio.shield(awaitable)
    raise InvalidArgumentError(f"Not a value source: {source!r}")
