"""AsyncOutcome type for async-aware Outcome operations.

AsyncOutcome wraps an Awaitable[Outcome[T, E]] and exposes the same operator
surface as Outcome. Operators return new AsyncOutcome instances immediately;
nothing runs until the chain is awaited.

Example:
    ```python
    async def fetch_user(id: int) -> Outcome[User, NotFound]:
        ...

    outcome = await (
        AsyncOutcome(fetch_user(1))
        .and_then(validate_user)
        .map(format_response)
    )
    ```
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Generator
from typing import Any

import anyio
import wrapt

from kanzen.errors import AbandonedError
from kanzen.outcome import Failure, Outcome, Success

__all__ = [
    'AsyncOutcome',
    'async_failure',
    'async_success',
    'infer',
    'to_async',
]

# What and_then/or_else transformers may return.
type Eventual[T, E] = Outcome[T, E] | Awaitable[Outcome[T, E]] | AsyncOutcome[T, E]


async def _settle[T, E](produced: Eventual[T, E]) -> Outcome[T, E]:
    """Normalise any eventual-outcome shape into the settled Outcome."""
    if isinstance(produced, AsyncOutcome):
        return await produced._resolve()
    if inspect.isawaitable(produced):
        return await produced
    return produced


async def _run_effect(effect: object) -> None:
    if inspect.isawaitable(effect):
        await effect


class AsyncOutcome[T, E]:
    """Async-aware Outcome wrapper for composing async Outcome operations.

    AsyncOutcome owns an Awaitable[Outcome[T, E]]. Awaiting it yields the
    Outcome. Resolution happens once: the first await drives the wrapped
    awaitable and later (or concurrent) awaits observe the same Outcome, so a
    single AsyncOutcome may feed several chains. If the first awaiter is
    cancelled while driving the awaitable, the cancellation propagates in its
    own task and every other awaiter gets an AbandonedError instead.

    Operators never touch the receiver's awaitable; each one returns a new
    AsyncOutcome over a coroutine that awaits the receiver. Operators along a
    single chain run in the order they were attached.

    Example:
        ```python
        async def main():
            outcome = await async_success(10).and_then(lambda x: async_success(x * 2))
            assert outcome == Success(20)
        ```
    """

    __slots__ = ('_awaitable', '_fault', '_outcome', '_settled')

    def __init__(self, awaitable: Awaitable[Outcome[T, E]]) -> None:
        """Create an AsyncOutcome from an awaitable.

        Args:
            awaitable: An awaitable that produces an Outcome[T, E].
        """
        self._awaitable = awaitable
        self._settled: anyio.Event | None = None
        self._outcome: Outcome[T, E] | None = None
        self._fault: BaseException | None = None

    def __await__(self) -> Generator[Any, Any, Outcome[T, E]]:
        """Support await syntax to get the underlying Outcome."""
        return self._resolve().__await__()

    async def _resolve(self) -> Outcome[T, E]:
        if self._settled is None:
            self._settled = anyio.Event()
            try:
                self._outcome = await self._awaitable
            except Exception as exc:
                self._fault = exc
                raise
            except BaseException as exc:
                # Cancellation belongs to the first awaiter's task only.
                self._fault = AbandonedError(exc)
                raise
            finally:
                self._settled.set()
        else:
            await self._settled.wait()
            if self._fault is not None:
                raise self._fault
        return self._outcome  # type: ignore[return-value]

    @classmethod
    def from_success(cls, value: T) -> AsyncOutcome[T, E]:
        """Create an AsyncOutcome that resolves to Success(value)."""
        return cls.from_outcome(Success(value))

    @classmethod
    def from_failure(cls, error: E) -> AsyncOutcome[T, E]:
        """Create an AsyncOutcome that resolves to Failure(error)."""
        return cls.from_outcome(Failure(error))

    @classmethod
    def from_outcome(cls, outcome: Outcome[T, E]) -> AsyncOutcome[T, E]:
        """Lift a synchronous Outcome into async form.

        Args:
            outcome: An Outcome[T, E] value.

        Returns:
            AsyncOutcome wrapping a coroutine that returns the outcome.
        """

        async def _outcome() -> Outcome[T, E]:
            return outcome

        return cls(_outcome())

    # --- Terminal operations ---

    async def is_success(self) -> bool:
        """Resolve and report whether the outcome is Success."""
        return (await self).is_success()

    async def is_failure(self) -> bool:
        """Resolve and report whether the outcome is Failure."""
        return (await self).is_failure()

    async def unwrap(self) -> T:
        """Resolve and return the success value.

        Raises:
            UnwrapError: At the await point, when the outcome is Failure.
        """
        return (await self).unwrap()

    async def unwrap_or[U](self, fallback: U) -> T | U:
        """Resolve and return the success value or the fallback."""
        return (await self).unwrap_or(fallback)

    async def unwrap_or_else[U](self, f: Callable[[E], U]) -> T | U:
        """Resolve and return the success value or f(error)."""
        return (await self).unwrap_or_else(f)

    async def match[U](self, *, success: Callable[[T], U], failure: Callable[[E], U]) -> U:
        """Resolve and apply exactly one of the two branches.

        Example:
            ```python
            message = await safe_fetch(url).match(
                success=lambda response: f'status {response.status}',
                failure=lambda error: f'failed: {error}',
            )
            ```
        """
        return (await self).match(success=success, failure=failure)

    # --- Operators ---

    def map[U](self, f: Callable[[T], U]) -> AsyncOutcome[U, E]:
        """Apply a sync function to the success value.

        Args:
            f: Function to apply to the success value.

        Returns:
            New AsyncOutcome with the transformed value.
        """

        async def _mapped() -> Outcome[U, E]:
            return (await self).map(f)

        return AsyncOutcome(_mapped())

    def map_async[U](self, f: Callable[[T], Awaitable[U]]) -> AsyncOutcome[U, E]:
        """Apply an async function to the success value."""

        async def _mapped() -> Outcome[U, E]:
            outcome = await self
            if isinstance(outcome, Success):
                return Success(await f(outcome.value))
            return outcome

        return AsyncOutcome(_mapped())

    def map_err[F](self, f: Callable[[E], F]) -> AsyncOutcome[T, F]:
        """Apply a sync function to the failure payload."""

        async def _mapped() -> Outcome[T, F]:
            return (await self).map_err(f)

        return AsyncOutcome(_mapped())

    def map_err_async[F](self, f: Callable[[E], Awaitable[F]]) -> AsyncOutcome[T, F]:
        """Apply an async function to the failure payload."""

        async def _mapped() -> Outcome[T, F]:
            outcome = await self
            if isinstance(outcome, Failure):
                return Failure(await f(outcome.error))
            return outcome

        return AsyncOutcome(_mapped())

    def and_then[U, F](self, f: Callable[[T], Eventual[U, F]]) -> AsyncOutcome[U, E | F]:
        """Chain a function returning an Outcome, an awaitable Outcome or an AsyncOutcome.

        If the outcome is Success, the result of f(value) is settled and
        becomes the new outcome. If Failure, f is never called and the
        failure passes through.

        Args:
            f: Function that takes T and returns any eventual outcome.

        Returns:
            New AsyncOutcome with the chained outcome.

        Example:
            ```python
            async def load(id: int) -> Outcome[dict, str]:
                return Success({'id': id})

            outcome = await async_success(1).and_then(load)
            # Success(value={'id': 1})
            ```
        """

        async def _chained() -> Outcome[U, E | F]:
            outcome = await self
            if isinstance(outcome, Success):
                return await _settle(f(outcome.value))
            return outcome

        return AsyncOutcome(_chained())

    def or_else[U, F](self, f: Callable[[E], Eventual[U, F]]) -> AsyncOutcome[T | U, F]:
        """Recover from a Failure with a function returning any eventual outcome.

        If the outcome is Success, f is never called and the success passes
        through.
        """

        async def _recovered() -> Outcome[T | U, F]:
            outcome = await self
            if isinstance(outcome, Failure):
                return await _settle(f(outcome.error))
            return outcome

        return AsyncOutcome(_recovered())

    def and_tee(self, f: Callable[[T], object]) -> AsyncOutcome[T, E]:
        """Call f with the success value for its side effect.

        An awaitable returned by f is awaited; its result is discarded.
        """

        async def _teed() -> Outcome[T, E]:
            outcome = await self
            if isinstance(outcome, Success):
                await _run_effect(f(outcome.value))
            return outcome

        return AsyncOutcome(_teed())

    def or_tee(self, f: Callable[[E], object]) -> AsyncOutcome[T, E]:
        """Call f with the failure payload for its side effect."""

        async def _teed() -> Outcome[T, E]:
            outcome = await self
            if isinstance(outcome, Failure):
                await _run_effect(f(outcome.error))
            return outcome

        return AsyncOutcome(_teed())

    def __repr__(self) -> str:
        if self._settled is not None and self._settled.is_set() and self._fault is None:
            return f'AsyncOutcome({self._outcome!r})'
        return 'AsyncOutcome(<pending>)'


def to_async[T, E](outcome: Outcome[T, E]) -> AsyncOutcome[T, E]:
    """Lift a synchronous Outcome so it can be chained with async steps."""
    return AsyncOutcome.from_outcome(outcome)


def async_success[T](value: T) -> AsyncOutcome[T, Any]:
    """Create an AsyncOutcome that resolves to Success(value)."""
    return AsyncOutcome.from_success(value)


def async_failure[E](error: E) -> AsyncOutcome[Any, E]:
    """Create an AsyncOutcome that resolves to Failure(error)."""
    return AsyncOutcome.from_failure(error)


def infer[**P, T, E](fn: Callable[P, Eventual[T, E]]) -> Callable[P, AsyncOutcome[T, E]]:
    """Make a function that produces any eventual outcome return an AsyncOutcome.

    Useful for ``async def`` helpers that return plain Outcomes but should be
    chainable at the call site. Functions that already return an AsyncOutcome
    pass their result through untouched.

    Example:
        ```python
        @infer
        async def parse(raw: str) -> Outcome[int, str]:
            return Success(int(raw)) if raw.isdigit() else Failure('nan')

        await parse('4').map(lambda x: x + 1)
        # Success(value=5)
        ```
    """

    @wrapt.decorator
    def wrapper(
        wrapped: Callable[P, Eventual[T, E]],
        instance: Any,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> AsyncOutcome[T, E]:
        produced = wrapped(*args, **kwargs)
        if isinstance(produced, AsyncOutcome):
            return produced
        return AsyncOutcome(_settle(produced))

    return wrapper(fn)
