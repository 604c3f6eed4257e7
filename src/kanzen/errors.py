"""Faults raised by the outcome algebra itself rather than carried in a Failure."""

from __future__ import annotations

from typing import Any

__all__ = ['AbandonedError', 'UnwrapError']


class UnwrapError(RuntimeError):
    """Outcome was unwrapped on the variant that holds no such payload.

    Raised by ``unwrap()``/``expect()`` on a Failure (``error`` is the failure
    payload) and by ``unwrap_err()`` on a Success (``error`` is the success
    payload).
    """

    def __init__(self, error: Any, message: str | None = None) -> None:
        self.error = error
        super().__init__(message or f'Called unwrap on Failure: {error!r}')


class AbandonedError(RuntimeError):
    """An AsyncOutcome was abandoned before it settled.

    Raised to awaiters of a shared AsyncOutcome whose first awaiter was
    cancelled (or interrupted) while driving it. The interruption itself is
    available as ``__cause__``.
    """

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f'AsyncOutcome was abandoned before it settled: {type(cause).__name__}')
        self.__cause__ = cause
