"""safe_fetch: an HTTP request that returns an AsyncOutcome instead of raising."""

from __future__ import annotations

from typing import Any

import anyio
import httpx

from kanzen._logging import get_logger
from kanzen.async_ import AsyncOutcome
from kanzen.decorators import safe_async
from kanzen.http._config import HttpConfig, get_config
from kanzen.http.errors import AbortError, FetchError, FetchTypeError, NotAllowedError
from kanzen.http.response import SafeResponse

__all__ = ['safe_fetch', 'translate_fetch_error']

logger = get_logger(__name__)

_NOT_ALLOWED = (httpx.UnsupportedProtocol, httpx.InvalidURL, httpx.TooManyRedirects)


def translate_fetch_error(exc: Exception) -> FetchError:
    """Map a transport exception onto the fetch fault kinds."""
    if isinstance(exc, FetchError):
        error = exc
    elif isinstance(exc, TimeoutError | httpx.TimeoutException):
        error = AbortError('Request timed out', cause=exc)
    elif isinstance(exc, _NOT_ALLOWED):
        error = NotAllowedError(str(exc) or type(exc).__name__, cause=exc)
    else:
        error = FetchTypeError(str(exc) or type(exc).__name__, cause=exc)
    logger.debug('http.fetch.failed', kind=error.kind, error=repr(exc))
    return error


def _open_client(config: HttpConfig, timeout: float) -> httpx.AsyncClient:
    """Short-lived client whose own timeouts match the request deadline."""
    return httpx.AsyncClient(
        base_url=config.base_url,
        headers=config.headers,
        timeout=httpx.Timeout(timeout),
    )


@safe_async(catch=translate_fetch_error)
async def _fetch(
    url: httpx.URL | str,
    *,
    method: str,
    client: httpx.AsyncClient | None,
    timeout: float,
    config: HttpConfig,
    **kwargs: Any,
) -> SafeResponse[Any]:
    logger.debug('http.fetch.start', method=method, url=str(url), timeout=timeout)
    kwargs.setdefault('timeout', httpx.Timeout(timeout))
    with anyio.fail_after(timeout):
        if client is not None:
            response = await client.request(method, url, **kwargs)
        else:
            async with _open_client(config, timeout) as owned:
                response = await owned.request(method, url, **kwargs)
    logger.debug('http.fetch.done', method=method, url=str(url), status=response.status_code)
    return SafeResponse(response, max_body_size=config.max_body_size)


def safe_fetch[T = Any](
    url: httpx.URL | str,
    *,
    method: str = 'GET',
    client: httpx.AsyncClient | None = None,
    timeout: float | None = None,
    **kwargs: Any,
) -> AsyncOutcome[SafeResponse[T], FetchError]:
    """Send an HTTP request and wrap the reply.

    The request completes with Success(SafeResponse) for any HTTP status,
    including 4xx/5xx; check ``response.ok``. Transport faults become
    Failure(FetchError):

    - timeouts (``timeout`` seconds, default from the config) → AbortError
    - unsupported scheme, invalid URL, redirect loops → NotAllowedError
    - any other network failure → FetchTypeError

    Args:
        url: Absolute URL, or a path relative to the configured base_url.
        method: HTTP method.
        client: Client to send through; a short-lived one is created from
            the config otherwise.
        timeout: Seconds before the request is abandoned.
        **kwargs: Passed to ``httpx.AsyncClient.request`` (json, content,
            params, headers, ...).

    Example:
        ```python
        items = await safe_fetch('https://example.com/items').and_then(
            lambda response: response.json()
        ).unwrap_or([])
        ```
    """
    config = get_config()
    return _fetch(
        url,
        method=method,
        client=client,
        timeout=config.timeout if timeout is None else timeout,
        config=config,
        **kwargs,
    )
