"""HTTP layer configuration: HttpConfig, environment detection and init()."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

from kanzen._logging import configure_logging

__all__ = [
    'DEFAULT_MAX_BODY_SIZE',
    'DEFAULT_TIMEOUT',
    'HttpConfig',
    'get_config',
    'init',
    'reset_config',
]

DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_BODY_SIZE = 64 * 1024 * 1024


@dataclass(frozen=True)
class HttpConfig:
    """Configuration for safe_fetch and services.

    Attributes:
        base_url: Prefix for relative request URLs ('' = URLs must be absolute).
        timeout: Seconds a request may take before it fails with AbortError.
        headers: Headers sent with every request.
        max_body_size: Largest body, in bytes, that bytes() and array_buffer()
            hand out. Checked after the body is buffered, so it caps what
            callers receive, not what is held in memory while reading.
        log_level: Logging level (e.g., "DEBUG", "INFO"). None = leave logging alone.
    """

    base_url: str = ''
    timeout: float = DEFAULT_TIMEOUT
    headers: dict[str, str] = field(default_factory=dict)
    max_body_size: int = DEFAULT_MAX_BODY_SIZE
    log_level: str | None = None


# Process-wide configuration (set by init())
_config: HttpConfig | None = None


def _detect_timeout() -> float:
    """Read KANZEN_HTTP_TIMEOUT, falling back to the default on bad values."""
    raw = os.environ.get('KANZEN_HTTP_TIMEOUT', '')
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError:
        logging.warning("Invalid KANZEN_HTTP_TIMEOUT value '%s', using %s", raw, DEFAULT_TIMEOUT)
        return DEFAULT_TIMEOUT
    if timeout <= 0:
        logging.warning("Non-positive KANZEN_HTTP_TIMEOUT value '%s', using %s", raw, DEFAULT_TIMEOUT)
        return DEFAULT_TIMEOUT
    return timeout


def _from_env() -> HttpConfig:
    return HttpConfig(
        base_url=os.environ.get('KANZEN_HTTP_BASE_URL', ''),
        timeout=_detect_timeout(),
        log_level=os.environ.get('KANZEN_LOG_LEVEL') or None,
    )


def init(
    base_url: str | None = None,
    timeout: float | None = None,
    headers: dict[str, str] | None = None,
    max_body_size: int | None = None,
    log_level: str | None = None,
) -> HttpConfig:
    """Set the process-wide HTTP configuration.

    Unspecified values come from the environment (KANZEN_HTTP_BASE_URL,
    KANZEN_HTTP_TIMEOUT, KANZEN_LOG_LEVEL) or the defaults.

    Returns:
        The HttpConfig that was set.

    Example:
        ```python
        from kanzen.http import init

        init(base_url='https://api.example.com', timeout=5, log_level='DEBUG')
        ```
    """
    global _config  # noqa: PLW0603

    detected = _from_env()
    _config = HttpConfig(
        base_url=detected.base_url if base_url is None else base_url,
        timeout=detected.timeout if timeout is None else max(0.001, timeout),
        headers=dict(headers or {}),
        max_body_size=DEFAULT_MAX_BODY_SIZE if max_body_size is None else max_body_size,
        log_level=detected.log_level if log_level is None else log_level,
    )

    if _config.log_level is not None:
        configure_logging(_config.log_level)

    return _config


def get_config() -> HttpConfig:
    """Get the configuration set by init(), or one derived from the environment."""
    if _config is None:
        return _from_env()
    return _config


def reset_config() -> None:
    """Forget the configuration set by init()."""
    global _config  # noqa: PLW0603
    _config = None
