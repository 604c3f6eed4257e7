"""HTTP helpers built on the outcome algebra.

- safe_fetch: an httpx request that returns AsyncOutcome[SafeResponse, FetchError]
- SafeResponse: response whose body readers return AsyncOutcomes
- service / Endpoint / EndpointSchema: msgspec-validated endpoint calls
"""

from kanzen.http._config import HttpConfig, get_config, init, reset_config
from kanzen.http.errors import (
    AbortError,
    BodyRangeError,
    BodySyntaxError,
    FetchError,
    FetchTypeError,
    HttpStatusError,
    NotAllowedError,
    ResponseMethodError,
    ValidationError,
)
from kanzen.http.fetch import safe_fetch, translate_fetch_error
from kanzen.http.response import Blob, SafeResponse
from kanzen.http.service import (
    Endpoint,
    EndpointSchema,
    PreparedRequest,
    parse_input,
    service,
    validate_schema,
)

__all__ = [
    'AbortError',
    'Blob',
    'BodyRangeError',
    'BodySyntaxError',
    'Endpoint',
    'EndpointSchema',
    'FetchError',
    'FetchTypeError',
    'HttpStatusError',
    'HttpConfig',
    'NotAllowedError',
    'PreparedRequest',
    'ResponseMethodError',
    'SafeResponse',
    'ValidationError',
    'get_config',
    'init',
    'parse_input',
    'reset_config',
    'safe_fetch',
    'service',
    'translate_fetch_error',
    'validate_schema',
]
