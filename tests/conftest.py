"""Shared test fixtures for the confluence-reader test suite."""

from __future__ import annotations

import pytest

from confluence_reader.config import ConfluenceReaderConfig


@pytest.fixture
def config() -> ConfluenceReaderConfig:
    """A config tuned for fast, deterministic tests."""
    return ConfluenceReaderConfig(
        token="test-token-1234",
        base_url="https://example.atlassian.net",
        retry_max_attempts=3,
        retry_base_delay=0.0,
        retry_max_delay=0.0,
        retry_jitter=False,
        # High RPS so the token bucket never blocks during tests.
        rate_limit_rps=10_000.0,
    )
