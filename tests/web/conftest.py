"""Fixtures for the HTTP layer tests."""

from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest
from web_helpers import BASE_URL, Handler

from kanzen.http import reset_config


@pytest.fixture(autouse=True)
def clean_config(monkeypatch: pytest.MonkeyPatch):
    """Start every test from an empty environment and no init() call."""
    for name in ('KANZEN_HTTP_TIMEOUT', 'KANZEN_HTTP_BASE_URL', 'KANZEN_LOG_LEVEL'):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def mock_client() -> Callable[[Handler], httpx.AsyncClient]:
    """Build an AsyncClient whose requests are answered by ``handler``."""

    def build(handler: Handler) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=BASE_URL)

    return build
