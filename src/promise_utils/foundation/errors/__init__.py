"""Error handling for promise_utils.

- ErrorCode: Classification of library-raised errors
- PromiseUtilsError: Base exception
- InvalidArgumentError: Wrong kind of argument (also a TypeError)
- RejectedError: Wrapper for non-exception rejection reasons
"""

from .errors import ErrorCode, InvalidArgumentError, PromiseUtilsError, RejectedError, as_exception, rejection_reason

__all__ = [
    "ErrorCode",
    "InvalidArgumentError",
    "PromiseUtilsError",
    "RejectedError",
    "as_exception",
    "rejection_reason",
]
