"""Pytest configuration and shared fixtures for kanzen tests."""

from __future__ import annotations

import pytest

from kanzen._logging import clear_log_hooks


@pytest.fixture(autouse=True)
def cleanup_hooks():
    """Clear log hooks before and after each test."""
    clear_log_hooks()
    yield
    clear_log_hooks()
