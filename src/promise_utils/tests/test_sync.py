"""Tests for the keyed mutex (synchronized / synchronised)."""

from __future__ import annotations

import asyncio

import pytest

from promise_utils import (
    LockRegistry,
    PromiseState,
    PromiseUtils,
    RejectedError,
    delayed_reject,
    delayed_resolve,
    get_lock_registry,
    synchronised,
    synchronized,
)


class Recorder:
    """Builds operations that record their arguments and run for ``ms``."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, PromiseState | None, PromiseState | None, object]] = []
        self.events: list[str] = []

    def op(self, name: str, ms: float = 10, fail: bool = False):
        async def run(state: PromiseState | None, settled: PromiseState | None, previous: object) -> str:
            self.calls.append((name, state, settled, previous))
            self.events.append(f"start {name}")
            await asyncio.sleep(ms / 1000)
            self.events.append(f"end {name}")
            if fail:
                raise ValueError(name)
            return name
        return run


@pytest.mark.asyncio
async def test_three_calls_run_in_order_with_previous_info() -> None:
    rec = Recorder()
    first = synchronized("k", rec.op("a"))
    second = synchronized("k", rec.op("b"))
    third = synchronized("k", rec.op("c"))
    assert await asyncio.gather(first, second, third) == ["a", "b", "c"]
    assert rec.events == ["start a", "end a", "start b", "end b", "start c", "end c"]
    assert rec.calls == [
        ("a", None, None, None),
        ("b", PromiseState.PENDING, PromiseState.FULFILLED, "a"),
        ("c", PromiseState.PENDING, PromiseState.FULFILLED, "b"),
    ]


@pytest.mark.asyncio
async def test_failed_predecessor_is_reported_and_chain_continues() -> None:
    rec = Recorder()
    first = synchronized("k", rec.op("a", fail=True))
    second = synchronized("k", rec.op("b"))
    with pytest.raises(ValueError):
        await first
    assert await second == "b"
    name, state, settled, previous = rec.calls[1]
    assert (state, settled) == (PromiseState.PENDING, PromiseState.REJECTED)
    assert isinstance(previous, ValueError)


@pytest.mark.asyncio
async def test_settled_predecessor_runs_immediately() -> None:
    rec = Recorder()
    await synchronized("k", rec.op("a", ms=1))
    second = synchronized("k", rec.op("b", ms=1))
    assert await second == "b"
    assert rec.calls[1] == ("b", PromiseState.FULFILLED, PromiseState.FULFILLED, "a")


@pytest.mark.asyncio
async def test_distinct_keys_run_concurrently() -> None:
    rec = Recorder()
    await asyncio.gather(synchronized("x", rec.op("a", ms=20)), synchronized("y", rec.op("b", ms=20)))
    assert rec.events[:2] == ["start a", "start b"]


@pytest.mark.asyncio
async def test_chained_call_receives_rejected_error_reason() -> None:
    captured: list[object] = []

    async def after(state, settled, previous):
        captured.append(previous)

    first = synchronized("k", lambda *_: delayed_reject(5, "nope"))
    await synchronized("k", after)
    with pytest.raises(RejectedError):
        await first
    assert isinstance(captured[0], RejectedError) and captured[0].reason == "nope"


@pytest.mark.asyncio
async def test_registration_is_synchronous() -> None:
    future = synchronized("k", lambda *_: delayed_resolve(5, 1))
    assert get_lock_registry().get("k") is future
    assert await future == 1


@pytest.mark.asyncio
async def test_cancelling_follower_does_not_cancel_predecessor() -> None:
    rec = Recorder()
    first = synchronized("k", rec.op("a", ms=20))
    second = synchronized("k", rec.op("b"))
    second.cancel()
    assert await first == "a"
    assert [c[0] for c in rec.calls] == ["a"]


@pytest.mark.asyncio
async def test_operation_must_return_awaitable() -> None:
    with pytest.raises(TypeError):
        synchronized("free", lambda *_: 42)  # type: ignore[arg-type,return-value]
    # Behind a busy lock the operation only runs later, so the error surfaces on the future
    busy = synchronized("busy", lambda *_: delayed_resolve(5))
    queued = synchronized("busy", lambda *_: 42)  # type: ignore[arg-type,return-value]
    await busy
    with pytest.raises(TypeError):
        await queued


@pytest.mark.asyncio
async def test_isolated_registry() -> None:
    registry = LockRegistry()
    rec = Recorder()
    await registry.synchronized("k", rec.op("a", ms=1))
    assert "k" in registry and len(registry) == 1
    assert "k" not in get_lock_registry()
    registry.clear()
    assert len(registry) == 0


@pytest.mark.asyncio
async def test_british_spelling_shares_lock_table() -> None:
    rec = Recorder()
    first = synchronized("k", rec.op("a"))
    second = synchronised("k", rec.op("b"))
    third = PromiseUtils.synchronised("k", rec.op("c"))
    await asyncio.gather(first, second, third)
    assert [c[0] for c in rec.calls] == ["a", "b", "c"]
    assert rec.calls[2][3] == "b"


def test_namespace_cannot_be_instantiated() -> None:
    with pytest.raises(TypeError):
        PromiseUtils()
