"""Concurrency-control primitives on asyncio futures.

Key Components:
    - State probe: promise_state, settlement_state, PromiseState
    - Delayed settlement: delayed_resolve, delayed_reject
    - Timeouts: timeout_resolve, timeout_reject
    - Bounded parallelism: in_parallel, with_concurrency
    - Keyed mutex: synchronized / synchronised, LockRegistry
    - Value sources: Value, Supplier, Chained

Design Philosophy:
    - Nothing owned by the caller is ever cancelled; timeouts stop waiting
    - Caller errors pass through unchanged
    - Functions returning futures schedule work at call time and need a
      running event loop

Example:
    >>> from promise_utils.runtime.concurrency import in_parallel, timeout_resolve
    >>>
    >>> outcomes = await in_parallel(10, urls, lambda url, i: fetch(url))
    >>> page = await timeout_resolve(fetch(url), 2000, "<empty/>")
"""

from __future__ import annotations

# State probe
from .state import (
    PromiseState,
    promise_state,
    settled_value,
    settlement_state,
)

# Value sources
from .sources import (
    Chained,
    Source,
    Supplier,
    Value,
    resolve,
    to_source,
)

# Delayed settlement
from .delay import (
    delayed_reject,
    delayed_resolve,
    sleep_ms,
)

# Timeouts
from .timeout import (
    timeout_reject,
    timeout_resolve,
)

# Bounded parallelism
from .parallel import (
    in_parallel,
    with_concurrency,
    worker_count,
)

# Keyed mutex
from .sync import (
    LockRegistry,
    get_lock_registry,
    reset_lock_registry,
    synchronised,
    synchronized,
)

__all__ = [
    # State probe
    "PromiseState",
    "promise_state",
    "settled_value",
    "settlement_state",
    # Sources
    "Chained",
    "Source",
    "Supplier",
    "Value",
    "resolve",
    "to_source",
    # Delayed settlement
    "delayed_reject",
    "delayed_resolve",
    "sleep_ms",
    # Timeouts
    "timeout_reject",
    "timeout_resolve",
    # Parallelism
    "in_parallel",
    "with_concurrency",
    "worker_count",
    # Mutex
    "LockRegistry",
    "get_lock_registry",
    "reset_lock_registry",
    "synchronised",
    "synchronized",
]
