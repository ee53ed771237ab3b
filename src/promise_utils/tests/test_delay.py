"""Tests for delayed settlement and the settlement-state probe."""

from __future__ import annotations

import asyncio

import pytest

from promise_utils import (
    ErrorCode,
    PromiseState,
    RejectedError,
    Value,
    delayed_reject,
    delayed_resolve,
    promise_state,
    settlement_state,
)


# ═════════════════════════════════════════════════════════════════════════════
# delayed_resolve
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_resolves_with_value_after_delay(stopwatch) -> None:
    assert await delayed_resolve(50, "x") == "x"
    assert stopwatch.ms >= 45


@pytest.mark.asyncio
async def test_resolves_with_none_by_default() -> None:
    assert await delayed_resolve(1) is None


@pytest.mark.asyncio
async def test_supplier_called_when_timer_fires() -> None:
    """A function result is invoked lazily, not at call time."""
    calls: list[str] = []
    fut = delayed_resolve(30, lambda: calls.append("called") or 42)
    await asyncio.sleep(0)
    assert calls == []
    assert await fut == 42
    assert calls == ["called"]


@pytest.mark.asyncio
async def test_chains_awaitable_outcome() -> None:
    async def produce() -> str:
        await asyncio.sleep(0.01)
        return "chained"

    assert await delayed_resolve(10, produce()) == "chained"


@pytest.mark.asyncio
async def test_supplier_returning_awaitable_is_chained() -> None:
    async def produce() -> int:
        return 7

    assert await delayed_resolve(10, produce) == 7


@pytest.mark.asyncio
async def test_chained_failure_is_adopted() -> None:
    async def fail() -> None:
        raise KeyError("gone")

    with pytest.raises(KeyError):
        await delayed_resolve(10, fail())


@pytest.mark.asyncio
async def test_value_variant_resolves_with_callable_itself() -> None:
    assert await delayed_resolve(1, Value(len)) is len


# ═════════════════════════════════════════════════════════════════════════════
# delayed_reject
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_rejects_with_exception_as_is(stopwatch) -> None:
    error = ValueError("bad")
    with pytest.raises(ValueError) as exc_info:
        await delayed_reject(60, error)
    assert exc_info.value is error
    assert stopwatch.ms >= 55


@pytest.mark.asyncio
async def test_non_exception_reason_is_wrapped() -> None:
    with pytest.raises(RejectedError) as exc_info:
        await delayed_reject(10, "boom")
    assert exc_info.value.reason == "boom"
    assert exc_info.value.code == ErrorCode.REJECTED


@pytest.mark.asyncio
async def test_reject_supplier_called_lazily() -> None:
    calls: list[int] = []

    def reason() -> Exception:
        calls.append(1)
        return RuntimeError("late")

    fut = delayed_reject(20, reason)
    await asyncio.sleep(0)
    assert calls == []
    with pytest.raises(RuntimeError, match="late"):
        await fut
    assert calls == [1]


@pytest.mark.asyncio
async def test_reject_with_fulfilled_awaitable_uses_value_as_reason() -> None:
    async def produce() -> str:
        return "why"

    with pytest.raises(RejectedError) as exc_info:
        await delayed_reject(10, produce())
    assert exc_info.value.reason == "why"


@pytest.mark.asyncio
async def test_reject_with_failing_awaitable_uses_its_failure() -> None:
    async def fail() -> None:
        raise LookupError("inner")

    with pytest.raises(LookupError, match="inner"):
        await delayed_reject(10, fail())


# ═════════════════════════════════════════════════════════════════════════════
# promise_state
# ═════════════════════════════════════════════════════════════════════════════


class TestPromiseState:
    """State probe never waits for nor raises from its target."""

    @pytest.mark.asyncio
    async def test_pending(self) -> None:
        fut = delayed_resolve(100, 1)
        assert await promise_state(fut) is PromiseState.PENDING
        fut.cancel()

    @pytest.mark.asyncio
    async def test_fulfilled(self) -> None:
        fut = delayed_resolve(1, 1)
        await fut
        assert await promise_state(fut) is PromiseState.FULFILLED

    @pytest.mark.asyncio
    async def test_rejected_without_raising(self) -> None:
        fut = delayed_reject(1, "boom")
        with pytest.raises(RejectedError):
            await fut
        assert await promise_state(fut) is PromiseState.REJECTED

    @pytest.mark.asyncio
    async def test_cancelled_counts_as_rejected(self) -> None:
        fut = delayed_resolve(100, 1)
        fut.cancel()
        with pytest.raises(asyncio.CancelledError):
            await fut
        assert settlement_state(fut) is PromiseState.REJECTED

    @pytest.mark.asyncio
    async def test_plain_future_transitions(self) -> None:
        fut: asyncio.Future[int] = asyncio.get_running_loop().create_future()
        assert await promise_state(fut) is PromiseState.PENDING
        fut.set_result(3)
        assert await promise_state(fut) is PromiseState.FULFILLED

    @pytest.mark.asyncio
    async def test_non_future_raises_type_error(self) -> None:
        with pytest.raises(TypeError):
            await promise_state("not a future")  # type: ignore[arg-type]

    def test_state_values(self) -> None:
        assert [s.value for s in PromiseState] == ["Pending", "Fulfilled", "Rejected"]
