"""Async utilities: AsyncOutcome and its constructors.

Examples:
    >>> from kanzen.async_ import AsyncOutcome, async_success, to_async
    >>>
    >>> async def fetch(id: int) -> Outcome[dict, str]:
    ...     return Success({'id': id})
    >>>
    >>> async def main():
    ...     outcome = await AsyncOutcome(fetch(1)).map(lambda d: d['id'])
    ...     doubled = await to_async(Success(10)).and_then(lambda x: async_success(x * 2))
"""

from kanzen.async_.outcome import (
    AsyncOutcome,
    async_failure,
    async_success,
    infer,
    to_async,
)

__all__ = [
    'AsyncOutcome',
    'async_failure',
    'async_success',
    'infer',
    'to_async',
]
