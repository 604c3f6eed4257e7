"""Failure payloads produced by the HTTP layer.

Every fault a request or a body decoder can produce is translated into one
of a small fixed set of kinds, so callers can ``match`` on them instead of
on the transport's own exception hierarchy.
"""

from __future__ import annotations

from typing import Literal

__all__ = [
    'AbortError',
    'BodyRangeError',
    'BodySyntaxError',
    'FetchError',
    'FetchTypeError',
    'HttpStatusError',
    'NotAllowedError',
    'ResponseMethodError',
    'ValidationError',
]

type FaultKind = Literal['abort', 'not_allowed', 'type', 'range', 'syntax']


class FetchError(Exception):
    """Base class for HTTP layer failures.

    Attributes:
        kind: Which fault class this is.
        cause: The transport or decoder exception that was translated, if any.
    """

    kind: FaultKind

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FetchError):
            return NotImplemented
        return type(self) is type(other) and self.message == other.message

    def __hash__(self) -> int:
        return hash((type(self), self.message))

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self.message!r})'


class AbortError(FetchError):
    """The request or body read was aborted: timed out or its stream closed."""

    kind = 'abort'


class NotAllowedError(FetchError):
    """The request was refused before it was sent (bad URL, scheme, redirects)."""

    kind = 'not_allowed'


class FetchTypeError(FetchError):
    """The network request failed or the body is not of the requested type."""

    kind = 'type'


class BodyRangeError(FetchError):
    """The body does not fit the configured size limit."""

    kind = 'range'


class BodySyntaxError(FetchError):
    """The body could not be parsed (malformed JSON)."""

    kind = 'syntax'


class HttpStatusError(Exception):
    """A non-2xx response whose body carried no parsable payload.

    Attributes:
        status: The response status code.
        status_text: The reason phrase.
    """

    def __init__(self, status: int, status_text: str = '') -> None:
        self.status = status
        self.status_text = status_text
        super().__init__(f'HTTP {status} {status_text}'.rstrip())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HttpStatusError):
            return NotImplemented
        return self.status == other.status

    def __hash__(self) -> int:
        return hash((type(self), self.status))

    def __repr__(self) -> str:
        return f'HttpStatusError({self.status})'


class ValidationError(Exception):
    """Data did not match an endpoint schema.

    Attributes:
        message: The validator's explanation, including the failing path.
        data: The value that was validated.
    """

    def __init__(self, message: str, data: object = None) -> None:
        self.message = message
        self.data = data
        super().__init__(message)


type ResponseMethodError = AbortError | FetchTypeError
