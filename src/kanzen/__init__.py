"""kanzen: Success/Failure outcomes and their async counterpart for Python 3.13+.

Flat imports (preferred):
    from kanzen import Outcome, Success, Failure, AsyncOutcome, safe

Submodule imports (for organization):
    from kanzen.outcome import Success, Failure, Outcome
    from kanzen.async_ import AsyncOutcome, to_async
    from kanzen.decorators import safe, safe_async
    from kanzen.http import safe_fetch, service
"""

# Async
from kanzen.async_ import (
    AsyncOutcome,
    async_failure,
    async_success,
    infer,
    to_async,
)

# Decorators
from kanzen.decorators import safe, safe_async

# Errors
from kanzen.errors import AbandonedError, UnwrapError

# Outcome types
from kanzen.outcome import Failure, Outcome, Success, collect

__all__ = [
    'AbandonedError',
    'AsyncOutcome',
    'Failure',
    'Outcome',
    'Success',
    'UnwrapError',
    'async_failure',
    'async_success',
    'collect',
    'infer',
    'safe',
    'safe_async',
    'to_async',
]
