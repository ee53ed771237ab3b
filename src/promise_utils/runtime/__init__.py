"""Runtime - Execution flow and control.

Contains: concurrency, retry, observability.
"""

from __future__ import annotations

__all__ = [
    # Concurrency
    "PromiseState", "promise_state", "settlement_state", "settled_value",
    "Value", "Supplier", "Chained", "Source", "resolve", "to_source",
    "delayed_resolve", "delayed_reject", "sleep_ms",
    "timeout_resolve", "timeout_reject",
    "in_parallel", "with_concurrency", "worker_count",
    "LockRegistry", "get_lock_registry", "reset_lock_registry", "synchronized", "synchronised",
    # Retry
    "FIBONACCI_SEQUENCE", "EXPONENTIAL_SEQUENCE",
    "ExponentialBackoff", "LinearBackoff", "ConstantBackoff", "jittered",
    "Outcome", "repeat", "retry_on_error", "with_retry",
    # Observability
    "configure_logging", "get_logger", "JsonFormatter", "TextFormatter", "ROOT_LOGGER",
]


def __getattr__(name: str):
    """Lazy imports to avoid circular dependencies."""
    retry_attrs = {
        "FIBONACCI_SEQUENCE", "EXPONENTIAL_SEQUENCE",
        "ExponentialBackoff", "LinearBackoff", "ConstantBackoff", "jittered",
        "Outcome", "repeat", "retry_on_error", "with_retry",
    }
    if name in retry_attrs:
        from . import retry
        return getattr(retry, name)

    observability_attrs = {"configure_logging", "get_logger", "JsonFormatter", "TextFormatter", "ROOT_LOGGER"}
    if name in observability_attrs:
        from . import observability
        return getattr(observability, name)

    if name in __all__:
        from . import concurrency
        return getattr(concurrency, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
