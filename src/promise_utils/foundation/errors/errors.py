"""Error types raised by promise_utils itself.

The library passes caller errors through untouched. The only exceptions it
creates are for rejection reasons that are not exceptions (Python can only
raise ``BaseException`` instances) and for invalid arguments.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Self


class ErrorCode(StrEnum):
    """Machine-readable classification of library-raised errors."""
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    REJECTED = "REJECTED"
    TIMEOUT = "TIMEOUT"


class PromiseUtilsError(Exception):
    """Base class for errors synthesized by promise_utils."""

    __slots__ = ("code",)

    def __init__(self, message: str, code: ErrorCode = ErrorCode.INVALID_ARGUMENT) -> None:
        self.code = code
        super().__init__(message)


class InvalidArgumentError(PromiseUtilsError, TypeError):
    """An argument of the wrong kind, e.g. an operation that returns no awaitable.

    Subclasses ``TypeError`` so ``except TypeError`` keeps working.
    """

    __slots__ = ()

    def __init__(self, message: str) -> None:
        super().__init__(message, ErrorCode.INVALID_ARGUMENT)


class RejectedError(PromiseUtilsError):
    """Failure carrying a rejection reason that is not an exception.

    ``delayed_reject(10, "boom")`` fails with ``RejectedError`` whose
    ``reason`` is ``"boom"``. Reasons that already are exceptions are raised
    as they are and never wrapped.

    Attributes:
        reason: The original rejection payload, unmodified
    """

    __slots__ = ("reason",)

    def __init__(self, reason: object, code: ErrorCode = ErrorCode.REJECTED) -> None:
        self.reason = reason
        super().__init__(f"Rejected with {reason!r}", code)

    @classmethod
    def timeout(cls, reason: object) -> Self:
        """Rejection produced by a timeout fallback."""
        return cls(reason, ErrorCode.TIMEOUT)


def as_exception(reason: object) -> BaseException:
    """Exception to raise for a rejection payload."""
    return reason if isinstance(reason, BaseException) else RejectedError(reason)


def rejection_reason(outcome: object) -> object:
    """Inverse of ``as_exception``: the payload a failure was created from."""
    return outcome.reason if isinstance(outcome, RejectedError) else outcome
