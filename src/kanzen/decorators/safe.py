"""@safe and @safe_async decorators for turning exceptions into Failures."""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from typing import Any, overload

import wrapt

from kanzen._logging import get_logger
from kanzen.async_.outcome import AsyncOutcome
from kanzen.outcome import Failure, Outcome, Success

__all__ = ['safe', 'safe_async']

logger = get_logger(__name__)


class _Guard:
    """Exception types to catch plus the optional translator for them."""

    __slots__ = ('catch', 'exceptions')

    def __init__(
        self,
        catch: Callable[[Any], Any] | None,
        exceptions: tuple[type[BaseException], ...] | None,
    ) -> None:
        self.catch = catch
        self.exceptions = exceptions if exceptions is not None else (Exception,)

    def failure(self, wrapped: Callable[..., Any], exc: BaseException) -> Failure[Any]:
        logger.debug(
            'safe.caught',
            function=getattr(wrapped, '__qualname__', repr(wrapped)),
            error=repr(exc),
        )
        if self.catch is not None:
            return Failure(self.catch(exc))
        return Failure(exc)

    async def settle(self, wrapped: Callable[..., Any], awaitable: Awaitable[Any]) -> Outcome[Any, Any]:
        try:
            value = await awaitable
        except self.exceptions as exc:
            return self.failure(wrapped, exc)
        return Success(value)


@overload
def safe[**P, T](
    func: Callable[P, Awaitable[T]],
) -> Callable[P, AsyncOutcome[T, Exception]]: ...


@overload
def safe[**P, T](
    func: Callable[P, T],
) -> Callable[P, Outcome[T, Exception]]: ...


@overload
def safe[**P, T, F](
    func: Callable[P, T],
    *,
    catch: Callable[[Exception], F],
    exceptions: tuple[type[BaseException], ...] | None = None,
) -> Callable[P, Outcome[T, F]]: ...


@overload
def safe(
    func: None = None,
    *,
    catch: Callable[[Exception], Any] | None = None,
    exceptions: tuple[type[BaseException], ...] | None = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]: ...


def safe(
    func: Callable[..., Any] | None = None,
    *,
    catch: Callable[[Exception], Any] | None = None,
    exceptions: tuple[type[BaseException], ...] | None = None,
) -> Any:
    """Decorator that turns raised exceptions into Failure outcomes.

    A call that returns normally yields Success(value). A call that raises one
    of ``exceptions`` yields Failure(catch(exc)), or Failure(exc) when no
    ``catch`` translator is given. Caught exceptions are never re-raised.

    Coroutine functions, and calls that return an awaitable, yield an
    AsyncOutcome instead: a fault raised while the call itself runs and a
    fault raised while the awaitable completes go through the same
    translation.

    Can be used with or without arguments, or called directly:
        @safe
        def risky(): ...

        @safe(catch=lambda e: ParseError(str(e)), exceptions=(ValueError,))
        def specific(): ...

        safe_div = safe(operator.truediv)

    Args:
        func: The function to wrap (when used without parentheses).
        catch: Translator from the caught exception to the failure payload.
        exceptions: Tuple of exception types to catch. Defaults to (Exception,).

    Returns:
        A wrapped function that returns an Outcome (or AsyncOutcome) instead of T.

    Example:
        ```python
        @safe
        def divide(a: int, b: int) -> float:
            return a / b

        divide(10, 2)
        # Success(value=5.0)
        divide(10, 0)
        # Failure(error=ZeroDivisionError('division by zero'))
        ```
    """
    guard = _Guard(catch, exceptions)

    @wrapt.decorator
    def wrapper(
        wrapped: Callable[..., Any],
        instance: Any,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Outcome[Any, Any] | AsyncOutcome[Any, Any]:
        try:
            produced = wrapped(*args, **kwargs)
        except guard.exceptions as exc:
            failed = guard.failure(wrapped, exc)
            if inspect.iscoroutinefunction(wrapped):
                return AsyncOutcome.from_outcome(failed)
            return failed
        if inspect.isawaitable(produced):
            return AsyncOutcome(guard.settle(wrapped, produced))
        return Success(produced)

    if func is not None:
        return wrapper(func)
    return wrapper


@overload
def safe_async[**P, T](
    func: Callable[P, Awaitable[T]],
) -> Callable[P, AsyncOutcome[T, Exception]]: ...


@overload
def safe_async[**P, T, F](
    func: Callable[P, Awaitable[T]],
    *,
    catch: Callable[[Exception], F],
    exceptions: tuple[type[BaseException], ...] | None = None,
) -> Callable[P, AsyncOutcome[T, F]]: ...


@overload
def safe_async(
    func: None = None,
    *,
    catch: Callable[[Exception], Any] | None = None,
    exceptions: tuple[type[BaseException], ...] | None = None,
) -> Callable[[Callable[..., Awaitable[Any]]], Callable[..., AsyncOutcome[Any, Any]]]: ...


def safe_async(
    func: Callable[..., Awaitable[Any]] | None = None,
    *,
    catch: Callable[[Exception], Any] | None = None,
    exceptions: tuple[type[BaseException], ...] | None = None,
) -> Any:
    """Async decorator that always returns an AsyncOutcome.

    Like :func:`safe`, but for callables known to be asynchronous, including
    plain functions that return an awaitable or raise before producing one.

    Example:
        ```python
        @safe_async(catch=lambda e: FetchFailed(str(e)))
        async def fetch(url: str) -> str:
            return await http_get(url)

        await fetch('https://example.com').unwrap_or('')
        ```
    """
    guard = _Guard(catch, exceptions)

    @wrapt.decorator
    def wrapper(
        wrapped: Callable[..., Awaitable[Any]],
        instance: Any,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> AsyncOutcome[Any, Any]:
        try:
            awaitable = wrapped(*args, **kwargs)
        except guard.exceptions as exc:
            return AsyncOutcome.from_outcome(guard.failure(wrapped, exc))
        return AsyncOutcome(guard.settle(wrapped, awaitable))

    if func is not None:
        return wrapper(func)
    return wrapper
