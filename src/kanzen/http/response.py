"""SafeResponse: an httpx.Response whose body readers return AsyncOutcomes."""

from __future__ import annotations

from typing import Any
from urllib.parse import parse_qs

import httpx
import msgspec

from kanzen.decorators import safe_async
from kanzen.http._config import get_config
from kanzen.http.errors import (
    AbortError,
    BodyRangeError,
    BodySyntaxError,
    FetchError,
    FetchTypeError,
)

__all__ = ['Blob', 'SafeResponse']

_FORM_CONTENT_TYPE = 'application/x-www-form-urlencoded'


class Blob(msgspec.Struct, frozen=True):
    """Raw body bytes together with their declared media type."""

    content: bytes
    content_type: str = ''

    @property
    def size(self) -> int:
        return len(self.content)


def _as_fetch_error(exc: Exception) -> FetchError:
    if isinstance(exc, FetchError):
        return exc
    return FetchTypeError(str(exc) or type(exc).__name__, cause=exc)


class SafeResponse[T = Any]:
    """Read-only view of an HTTP response.

    Metadata is available synchronously. Each body reader returns an
    AsyncOutcome whose failure is a FetchError; the body can be read once
    per SafeResponse, use :meth:`clone` to read it again.

    Example:
        ```python
        outcome = await safe_fetch('https://example.com/items').and_then(
            lambda response: response.json()
        )
        ```
    """

    __slots__ = ('_body_used', '_max_body_size', '_response')

    def __init__(self, response: httpx.Response, *, max_body_size: int | None = None) -> None:
        self._response = response
        self._max_body_size = get_config().max_body_size if max_body_size is None else max_body_size
        self._body_used = False

    @property
    def status(self) -> int:
        """The response status code."""
        return self._response.status_code

    @property
    def status_text(self) -> str:
        """The reason phrase matching the status code."""
        return self._response.reason_phrase

    @property
    def ok(self) -> bool:
        """True if the status is in the range 200-299."""
        return self._response.is_success

    @property
    def headers(self) -> httpx.Headers:
        return self._response.headers

    @property
    def url(self) -> str:
        return str(self._response.url)

    @property
    def redirected(self) -> bool:
        """True if the response is the end of one or more redirects."""
        return bool(self._response.history)

    @property
    def body_used(self) -> bool:
        return self._body_used

    def clone(self) -> SafeResponse[T]:
        """Return a fresh view of the same response with an unread body.

        Raises:
            FetchTypeError: If this view's body was already read.
        """
        if self._body_used:
            msg = 'Response body is already used'
            raise FetchTypeError(msg)
        return SafeResponse(self._response, max_body_size=self._max_body_size)

    async def _read(self) -> bytes:
        if self._body_used:
            msg = 'Response body is already used'
            raise FetchTypeError(msg)
        self._body_used = True
        try:
            return await self._response.aread()
        except httpx.StreamClosed as exc:
            msg = 'Response stream was closed before the body was read'
            raise AbortError(msg, cause=exc) from exc
        except httpx.TimeoutException as exc:
            msg = 'Timed out while reading the response body'
            raise AbortError(msg, cause=exc) from exc

    async def _read_bounded(self) -> bytes:
        content = await self._read()
        if len(content) > self._max_body_size:
            msg = f'Response body of {len(content)} bytes exceeds the limit of {self._max_body_size}'
            raise BodyRangeError(msg)
        return content

    @safe_async(catch=_as_fetch_error)
    async def text(self) -> str:
        """Read the body as text decoded with the response charset."""
        await self._read()
        return self._response.text

    @safe_async(catch=_as_fetch_error)
    async def json(self, type: Any = Any) -> Any:  # noqa: A002
        """Read the body as JSON, optionally converting it to ``type``.

        Malformed JSON fails with BodySyntaxError, JSON that does not match
        ``type`` with FetchTypeError.
        """
        content = await self._read()
        try:
            return msgspec.json.decode(content, type=type)
        except msgspec.ValidationError as exc:
            raise FetchTypeError(str(exc), cause=exc) from exc
        except msgspec.DecodeError as exc:
            raise BodySyntaxError(str(exc), cause=exc) from exc

    @safe_async(catch=_as_fetch_error)
    async def form_data(self) -> dict[str, list[str]]:
        """Read an application/x-www-form-urlencoded body."""
        content_type = self._response.headers.get('content-type', '')
        if content_type.split(';', 1)[0].strip().lower() != _FORM_CONTENT_TYPE:
            msg = f'Cannot read {content_type or "untyped"} body as form data'
            raise FetchTypeError(msg)
        await self._read()
        return parse_qs(self._response.text, keep_blank_values=True)

    @safe_async(catch=_as_fetch_error)
    async def blob(self) -> Blob:
        """Read the body as bytes tagged with its content type."""
        content = await self._read()
        return Blob(content, self._response.headers.get('content-type', ''))

    @safe_async(catch=_as_fetch_error)
    async def array_buffer(self) -> memoryview:
        """Read the body into a read-only buffer.

        Fails with BodyRangeError when the buffered body is larger than
        max_body_size.
        """
        return memoryview(await self._read_bounded())

    @safe_async(catch=_as_fetch_error)
    async def bytes(self) -> bytes:
        """Read the raw body bytes; larger than max_body_size is a BodyRangeError."""
        return await self._read_bounded()

    def __repr__(self) -> str:
        return f'SafeResponse(status={self.status}, url={self.url!r})'
