"""Bounded-parallelism job execution.

A fixed number of workers drain one shared job cursor. Each worker pulls a
single job, runs it, stores the outcome at the job's index and pulls the
next, so at most ``parallelism`` operations are in flight and the job
iterable may be lazy or even infinite.

Example:
    >>> # Never more than 5 concurrent API calls; failures are collected
    >>> outcomes = await in_parallel(5, topic_arns, get_topic_attributes)
    >>> failed = [o for o in outcomes if isinstance(o, Exception)]

    >>> # Same, but give up on the first failure
    >>> attributes = await with_concurrency(5, topic_arns, get_topic_attributes)
"""

from __future__ import annotations

import asyncio
import math
from collections.abc import Awaitable, Callable, Iterable, Iterator
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from promise_utils.runtime.observability import get_logger

D = TypeVar("D")
R = TypeVar("R")

logger = get_logger("parallel")


def worker_count(parallelism: float) -> int:
    """Number of workers for a parallelism value: floored, at least 1."""
    return max(1, math.floor(parallelism))


@dataclass(slots=True)
class _JobCursor(Generic[D, R]):
    """Shared job iterator plus the outcome slots of one call."""

    jobs: Iterator[D]
    outcomes: list[R | BaseException | None] = field(default_factory=list)
    aborted: bool = False

    def pull(self) -> tuple[int, D] | None:
        """Next ``(index, job)``, or None once exhausted or aborted. Never suspends."""
        if self.aborted:
            return None
        try:
            job = next(self.jobs)
        except StopIteration:
            return None
        self.outcomes.append(None)
        return len(self.outcomes) - 1, job


async def _worker(
    cursor: _JobCursor[D, R],
    operation: Callable[[D, int], Awaitable[R]],
    abort_on_error: bool,
) -> None:
    while (pulled := cursor.pull()) is not None:
        index, job = pulled
        if abort_on_error:
            try:
                cursor.outcomes[index] = await operation(job, index)
            except Exception:
                cursor.aborted = True
                raise
        else:
            try:
                cursor.outcomes[index] = await operation(job, index)
            except Exception as e:
                cursor.outcomes[index] = e


def _discard_failure(task: asyncio.Task[None]) -> None:
    """Retrieve the failure of a worker that outlived an aborted call."""
    if not task.cancelled() and (exc := task.exception()) is not None:
        logger.debug("Discarding job failure after abort: %r", exc)


async def in_parallel(
    parallelism: float,
    jobs: Iterable[D],
    operation: Callable[[D, int], Awaitable[R]],
    *,
    abort_on_error: bool = False,
) -> list[R | BaseException]:
    """Execute jobs with a bounded number of concurrent operations.

    By default every job runs regardless of failures: exceptions raised by
    ``operation`` are returned in place of results, and the call completes
    once all jobs settled. With ``abort_on_error=True`` the first failure is
    raised immediately; jobs already running elsewhere are left to finish in
    the background and no further jobs are started.

    Args:
        parallelism: Maximum concurrent operations (floored, minimum 1)
        jobs: Job data; may be lazy or unbounded
        operation: ``operation(job, index)`` processing one job
        abort_on_error: Raise on the first failed operation

    Returns:
        Results (or exceptions) in the order of the corresponding jobs
    """
    cursor: _JobCursor[D, R] = _JobCursor(iter(jobs))
    workers = [
        asyncio.ensure_future(_worker(cursor, operation, abort_on_error))
        for _ in range(worker_count(parallelism))
    ]
    try:
        await asyncio.gather(*workers)
    except Exception:
        for task in workers:
            if not task.done():
                task.add_done_callback(_discard_failure)
        raise
    return cursor.outcomes  # type: ignore[return-value]


async def with_concurrency(
    concurrency: float,
    jobs: Iterable[D],
    operation: Callable[[D, int], Awaitable[R]],
) -> list[R]:
    """Execute jobs with bounded concurrency, raising the first failure.

    Unlike ``in_parallel``, remaining jobs are not started once one fails.
    Use ``in_parallel`` if every job must always run.

    Returns:
        Results in the order of the corresponding jobs
    """
    return await in_parallel(concurrency, jobs, operation, abort_on_error=True)  # type: ignore[return-value]
