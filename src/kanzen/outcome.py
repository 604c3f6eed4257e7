"""Outcome type: Success[T] | Failure[E] for explicit error handling.

An Outcome is an immutable tagged value: either the success payload of an
operation or its failure payload. The failure payload is open, any value can
describe a failure, and ``and_then``/``or_else`` widen the failure type to the
union of the old and new failure types.

Example:
    ```python
    from kanzen import Failure, Success

    def parse(raw: str) -> Outcome[int, str]:
        return Success(int(raw)) if raw.isdigit() else Failure(f'not a number: {raw!r}')

    parse('21').map(lambda x: x * 2)
    # Success(value=42)

    parse('x').and_then(lambda x: Success(x + 1)).unwrap_or(0)
    # 0
    ```
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, NoReturn, TypeIs

import msgspec

from kanzen.errors import UnwrapError

__all__ = ['Failure', 'Outcome', 'Success', 'collect']


def _cause(payload: Any) -> BaseException | None:
    return payload if isinstance(payload, BaseException) else None


class Success[T](msgspec.Struct, frozen=True, gc=False):
    """Success variant of Outcome containing a value of type T.

    Examples:
        >>> Success(42).unwrap()
        42
        >>> Success(42).map(lambda x: x * 2)
        Success(value=84)
    """

    value: T

    def is_success(self) -> TypeIs[Success[T]]:
        """Return True since this is Success.

        This method provides type narrowing - after checking is_success(),
        the type checker knows the outcome is Success[T].
        """
        return True

    def is_failure(self) -> TypeIs[Failure[Any]]:
        """Return False since this is Success."""
        return False

    def unwrap(self) -> T:
        """Return the contained success value."""
        return self.value

    def unwrap_or(self, fallback: object) -> T:  # noqa: ARG002
        """Return the contained success value, ignoring the fallback."""
        return self.value

    def unwrap_or_else(self, f: Callable[[Any], object]) -> T:  # noqa: ARG002
        """Return the contained success value, ignoring the fallback function."""
        return self.value

    def unwrap_err(self) -> NoReturn:
        """Raise since a Success holds no failure payload.

        Raises:
            UnwrapError: Always, carrying the success value.
        """
        raise UnwrapError(self.value, f'Called unwrap_err on Success: {self.value!r}')

    def expect(self, _message: str) -> T:
        """Return the contained success value, ignoring the message."""
        return self.value

    def success(self) -> T:
        """Return the success payload."""
        return self.value

    def failure(self) -> None:
        """Return None since this is Success."""
        return None

    def match[U](self, *, success: Callable[[T], U], failure: Callable[[Any], U]) -> U:  # noqa: ARG002
        """Apply the ``success`` branch to the value and return its result."""
        return success(self.value)

    def map[U](self, f: Callable[[T], U]) -> Success[U]:
        """Apply a function to the contained value.

        Args:
            f: Function to apply to the success value.

        Returns:
            Success containing the result of applying f to the value.
        """
        return Success(f(self.value))

    def map_err(self, _f: Callable[[Any], object]) -> Success[T]:
        """Return self unchanged since this is Success."""
        return self

    def and_then[U, F](self, f: Callable[[T], Success[U] | Failure[F]]) -> Success[U] | Failure[F]:
        """Chain a computation that may fail.

        Also known as flatmap or bind. The outcome returned by f is returned
        as is, never nested.

        Args:
            f: Function that takes T and returns an Outcome.

        Returns:
            The Outcome returned by f.
        """
        return f(self.value)

    def or_else(self, _f: Callable[[Any], object]) -> Success[T]:
        """Return self unchanged since this is Success."""
        return self

    def and_tee(self, f: Callable[[T], object]) -> Success[T]:
        """Call f with the value for its side effect and return self.

        Whatever f returns is discarded.
        """
        f(self.value)
        return self

    def or_tee(self, _f: Callable[[Any], object]) -> Success[T]:
        """Return self unchanged since this is Success."""
        return self


class Failure[E](msgspec.Struct, frozen=True, gc=False):
    """Failure variant of Outcome containing an error of type E.

    Examples:
        >>> Failure('boom').is_failure()
        True
        >>> Failure('boom').unwrap_or(0)
        0
    """

    error: E

    def is_success(self) -> TypeIs[Success[Any]]:
        """Return False since this is Failure."""
        return False

    def is_failure(self) -> TypeIs[Failure[E]]:
        """Return True since this is Failure.

        This method provides type narrowing - after checking is_failure(),
        the type checker knows the outcome is Failure[E].
        """
        return True

    def unwrap(self) -> NoReturn:
        """Raise since a Failure holds no success value.

        Raises:
            UnwrapError: Always, carrying the failure payload.
        """
        raise UnwrapError(self.error) from _cause(self.error)

    def unwrap_or[U](self, fallback: U) -> U:
        """Return the fallback since this is Failure."""
        return fallback

    def unwrap_or_else[U](self, f: Callable[[E], U]) -> U:
        """Compute a fallback from the failure payload."""
        return f(self.error)

    def unwrap_err(self) -> E:
        """Return the failure payload."""
        return self.error

    def expect(self, message: str) -> NoReturn:
        """Raise with a custom message.

        Raises:
            UnwrapError: Always, carrying the failure payload.
        """
        raise UnwrapError(self.error, f'{message}: {self.error!r}') from _cause(self.error)

    def success(self) -> None:
        """Return None since this is Failure."""
        return None

    def failure(self) -> E:
        """Return the failure payload."""
        return self.error

    def match[U](self, *, success: Callable[[Any], U], failure: Callable[[E], U]) -> U:  # noqa: ARG002
        """Apply the ``failure`` branch to the error and return its result."""
        return failure(self.error)

    def map(self, _f: Callable[[Any], object]) -> Failure[E]:
        """Return self unchanged since this is Failure."""
        return self

    def map_err[F](self, f: Callable[[E], F]) -> Failure[F]:
        """Apply a function to the contained error.

        Args:
            f: Function to apply to the failure payload.

        Returns:
            Failure containing the transformed error.
        """
        return Failure(f(self.error))

    def and_then(self, _f: Callable[[Any], object]) -> Failure[E]:
        """Return self unchanged since this is Failure; the function is never called."""
        return self

    def or_else[U, F](self, f: Callable[[E], Success[U] | Failure[F]]) -> Success[U] | Failure[F]:
        """Recover from the failure with a function returning an Outcome.

        Args:
            f: Function that takes the error and returns a new Outcome.

        Returns:
            The Outcome returned by f.
        """
        return f(self.error)

    def and_tee(self, _f: Callable[[Any], object]) -> Failure[E]:
        """Return self unchanged since this is Failure."""
        return self

    def or_tee(self, f: Callable[[E], object]) -> Failure[E]:
        """Call f with the error for its side effect and return self."""
        f(self.error)
        return self


type Outcome[T, E = Exception] = Success[T] | Failure[E]


def collect[T, E](outcomes: Iterable[Success[T] | Failure[E]]) -> Success[list[T]] | Failure[E]:
    """Collect an iterable of Outcomes into an Outcome of list.

    Short-circuits on the first Failure encountered; outcomes after it are not
    consumed.

    Examples:
        >>> collect([Success(1), Success(2)])
        Success(value=[1, 2])
        >>> collect([Success(1), Failure('fail'), Success(3)])
        Failure(error='fail')
    """
    values: list[T] = []
    for outcome in outcomes:
        if isinstance(outcome, Failure):
            return outcome
        values.append(outcome.value)
    return Success(values)
