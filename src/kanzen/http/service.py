"""Declarative endpoints validated with msgspec schemas.

An endpoint declares the shapes of its body, path parameters, query
parameters, successful response and error response. A service call validates
the inputs, sends the request with :func:`safe_fetch`, and validates the
reply, all as one AsyncOutcome chain:

    ```python
    class Item(msgspec.Struct):
        id: int
        name: str

    class ItemPath(msgspec.Struct):
        item_id: int

    class Problem(msgspec.Struct):
        detail: str

    get_item = Endpoint(
        path='/items/[item_id]',
        schema=EndpointSchema(params=ItemPath, response=Item, errors=Problem),
    )

    api = service(client=httpx.AsyncClient(base_url='https://api.example.com'))
    outcome = await api(get_item, params={'item_id': 3})
    # Success(value=Item(id=3, name='...')) or Failure(Problem(...)) or Failure(FetchError(...))
    ```
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

import httpx
import msgspec

from kanzen._logging import get_logger
from kanzen.async_ import AsyncOutcome, to_async
from kanzen.decorators import safe
from kanzen.http.errors import BodySyntaxError, FetchError, HttpStatusError, ValidationError
from kanzen.http.fetch import safe_fetch
from kanzen.http.response import SafeResponse
from kanzen.outcome import Failure, Outcome, Success

__all__ = [
    'Endpoint',
    'EndpointSchema',
    'PreparedRequest',
    'parse_input',
    'service',
    'validate_schema',
]

logger = get_logger(__name__)

Params = dict[str, str | int | float | bool]

_PLACEHOLDER = re.compile(r'\[([^\[\]]+)\]')


@dataclass(frozen=True)
class EndpointSchema:
    """Types (anything ``msgspec.convert`` accepts) describing one endpoint.

    Attributes:
        response: Shape of a successful response body.
        errors: Shape of an error response body.
        body: Shape of the request body; None means no body.
        params: Shape of the path parameters substituted into ``[name]``.
        search_params: Shape of the query parameters.
    """

    response: Any = Any
    errors: Any = Any
    body: Any = None
    params: Any = Params
    search_params: Any = Params


@dataclass(frozen=True)
class Endpoint:
    """A path template such as ``/items/[item_id]`` plus its schema."""

    path: str
    schema: EndpointSchema = field(default_factory=EndpointSchema)
    method: str = 'GET'


@dataclass(frozen=True)
class PreparedRequest:
    """Validated request ready to be sent."""

    method: str
    url: str
    content: bytes | None = None


def _validation_error(exc: Exception) -> ValidationError:
    return ValidationError(str(exc))


@safe(catch=_validation_error, exceptions=(msgspec.ValidationError,))
def _convert(schema: Any, data: Any, strict: bool) -> Any:
    return msgspec.convert(data, type=schema, strict=strict)


def validate_schema[T](schema: type[T] | Any, data: Any, *, strict: bool = True) -> AsyncOutcome[T, ValidationError]:
    """Validate (and convert) ``data`` against ``schema``.

    Args:
        schema: A msgspec-convertible type.
        data: Builtin data to validate.
        strict: When False, strings are coerced to numbers and booleans,
            which suits path and query parameters.
    """
    return to_async(_convert(schema, data, strict))


def _as_mapping(value: Any, what: str) -> Outcome[Mapping[str, Any], ValidationError]:
    builtins = msgspec.to_builtins(value)
    if isinstance(builtins, Mapping):
        return Success(builtins)
    return Failure(ValidationError(f'{what} must be an object, got {type(builtins).__name__}', value))


def _fill_path(path: str, params: Mapping[str, Any]) -> Outcome[str, ValidationError]:
    for key, value in params.items():
        path = path.replace(f'[{key}]', quote(str(value), safe=''))
    missing = _PLACEHOLDER.findall(path)
    if missing:
        return Failure(ValidationError(f'Missing path parameters: {", ".join(missing)}', dict(params)))
    return Success(path)


def parse_input(
    endpoint: Endpoint,
    *,
    body: Any = None,
    params: Mapping[str, Any] | None = None,
    search_params: Mapping[str, Any] | None = None,
    method: str | None = None,
) -> AsyncOutcome[PreparedRequest, ValidationError]:
    """Validate the three inputs in order and build the request.

    The first failing validation short-circuits the rest. A ``[name]``
    placeholder left without a matching path parameter is a ValidationError.
    """
    schema = endpoint.schema

    def with_params(valid_body: Any) -> AsyncOutcome[PreparedRequest, ValidationError]:
        return (
            validate_schema(schema.params, dict(params or {}), strict=False)
            .and_then(lambda valid: _as_mapping(valid, 'path parameters'))
            .and_then(lambda path_params: with_search(valid_body, path_params))
        )

    def with_search(valid_body: Any, path_params: Mapping[str, Any]) -> AsyncOutcome[PreparedRequest, ValidationError]:
        return (
            validate_schema(schema.search_params, dict(search_params or {}), strict=False)
            .and_then(lambda valid: _as_mapping(valid, 'query parameters'))
            .and_then(
                lambda query: _fill_path(endpoint.path, path_params).map(
                    lambda path: _prepare(valid_body, path, query)
                )
            )
        )

    def _prepare(valid_body: Any, path: str, query: Mapping[str, Any]) -> PreparedRequest:
        url = httpx.URL(path)
        if query:
            url = url.copy_merge_params(dict(query))
        content = None if valid_body is None else msgspec.json.encode(valid_body)
        return PreparedRequest(method=method or endpoint.method, url=str(url), content=content)

    return validate_schema(schema.body, body).and_then(with_params)


def _syntax_error(exc: Exception) -> BodySyntaxError:
    return BodySyntaxError(str(exc), cause=exc)


@safe(catch=_syntax_error, exceptions=(msgspec.DecodeError,))
def _parse_body(content: bytes) -> Any:
    """Parse a JSON body; an empty body (204, HEAD, ...) is None."""
    return msgspec.json.decode(content) if content.strip() else None


def _decode_json(response: SafeResponse[Any]) -> AsyncOutcome[Any, Any]:
    """Decode the body; a non-2xx body becomes the failure payload.

    A non-2xx response without a parsable body fails with HttpStatusError.
    """
    parsed = response.bytes().and_then(_parse_body)
    if response.ok:
        return parsed
    status = HttpStatusError(response.status, response.status_text)
    return parsed.or_else(
        lambda error: Failure(status if isinstance(error, BodySyntaxError) else error)
    ).and_then(lambda body: Failure(status if body is None else body))


def service(
    *,
    on_fetch: Callable[[AsyncOutcome[SafeResponse[Any], Any]], AsyncOutcome[Any, Any]] | None = None,
    client: httpx.AsyncClient | None = None,
    **options: Any,
) -> Callable[..., AsyncOutcome[Any, Any]]:
    """Build a function that calls endpoints.

    Args:
        on_fetch: Turns the fetched response into the data to validate.
            Defaults to decoding JSON (an empty body is None), where a
            non-2xx body becomes the failure payload and a non-2xx reply
            without one fails with HttpStatusError.
        client: httpx client shared by all calls.
        **options: Passed to :func:`safe_fetch` on every call (headers,
            timeout, ...). Per-call options override them, except that
            headers from both are merged.

    Returns:
        ``call(endpoint, *, body=None, params=None, search_params=None,
        method=None, **request_options)`` returning an AsyncOutcome that
        succeeds with the validated response. A failure payload that matches
        the endpoint's ``errors`` schema is converted to it; any other
        failure (FetchError, HttpStatusError, ValidationError) is passed
        through.
    """
    post_process = on_fetch if on_fetch is not None else (lambda fetched: fetched.and_then(_decode_json))

    def call(
        endpoint: Endpoint,
        *,
        body: Any = None,
        params: Mapping[str, Any] | None = None,
        search_params: Mapping[str, Any] | None = None,
        method: str | None = None,
        **request_options: Any,
    ) -> AsyncOutcome[Any, Any]:
        logger.debug('http.service.call', path=endpoint.path, method=method or endpoint.method)
        merged = {**options, **request_options}
        if 'headers' in options and 'headers' in request_options:
            merged['headers'] = {**options['headers'], **request_options['headers']}
        fetched = parse_input(
            endpoint,
            body=body,
            params=params,
            search_params=search_params,
            method=method,
        ).and_then(
            lambda prepared: safe_fetch(
                prepared.url,
                method=prepared.method,
                client=client,
                content=prepared.content,
                **merged,
            )
        )

        def declared_error(error: Any) -> Any:
            if isinstance(error, FetchError | HttpStatusError | ValidationError):
                return Failure(error)
            return validate_schema(endpoint.schema.errors, error).match(
                success=Failure,
                failure=lambda _: Failure(error),
            )

        return (
            post_process(fetched)
            .and_then(lambda data: validate_schema(endpoint.schema.response, data))
            .or_else(declared_error)
        )

    return call
