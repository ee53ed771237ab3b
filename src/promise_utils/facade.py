"""PromiseUtils - every primitive behind one namespace.

    >>> from promise_utils import PromiseUtils
    >>> await PromiseUtils.with_retry(op, [100, 200, 300])
    >>> await PromiseUtils.synchronized("cache", refresh)

The module-level functions are the same objects; use whichever reads better.
"""

from __future__ import annotations

from promise_utils.runtime.concurrency import (
    delayed_reject,
    delayed_resolve,
    in_parallel,
    promise_state,
    synchronised,
    synchronized,
    timeout_reject,
    timeout_resolve,
    with_concurrency,
)
from promise_utils.runtime.retry import repeat, with_retry


class PromiseUtils:
    """Static namespace over the promise_utils functions."""

    __slots__ = ()

    repeat = staticmethod(repeat)
    with_retry = staticmethod(with_retry)
    with_concurrency = staticmethod(with_concurrency)
    in_parallel = staticmethod(in_parallel)
    delayed_resolve = staticmethod(delayed_resolve)
    delayed_reject = staticmethod(delayed_reject)
    timeout_resolve = staticmethod(timeout_resolve)
    timeout_reject = staticmethod(timeout_reject)
    promise_state = staticmethod(promise_state)
    synchronized = staticmethod(synchronized)
    synchronised = staticmethod(synchronised)

    def __new__(cls) -> PromiseUtils:
        raise TypeError("PromiseUtils is a namespace and cannot be instantiated")
