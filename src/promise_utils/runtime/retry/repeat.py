"""Sequential repeat loop, e.g. for client-side pagination.

Example:
    >>> domain_names = await repeat(
    ...     lambda paging: apig.get_domain_names(limit=500, **paging),
    ...     lambda response: {"position": response["position"]} if response.get("position") else None,
    ...     lambda collection, response: collection + response["items"],
    ...     [],
    ... )
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

R = TypeVar("R")
P = TypeVar("P")
C = TypeVar("C")


async def repeat(
    operation: Callable[[P], Awaitable[R]],
    next_parameter: Callable[[R], P | Awaitable[P] | None],
    collect: Callable[[C, R], C],
    initial_collection: C,
    initial_parameter: P | None = None,
) -> C:
    """Execute an operation repeatedly and collect all the results.

    Args:
        operation: Takes a parameter (typically paging fields) and returns a result
        next_parameter: Computes the next parameter from a result; returns
            None when no further invocation is desired. May return an
            awaitable of the parameter.
        collect: Merges a result into the collection
        initial_collection: First argument of the first ``collect`` call
        initial_parameter: Parameter of the first operation (default: ``{}``)

    Returns:
        The collection after merging every result
    """
    collection = initial_collection
    param: Any = {} if initial_parameter is None else initial_parameter
    while True:
        result = await operation(param)
        collection = collect(collection, result)
        next_param = next_parameter(result)
        if next_param is None:
            return collection
        param = await next_param if inspect.isawaitable(next_param) else next_param
