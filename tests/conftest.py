"""Shared test fixtures for the obskit test suite."""

import io
import json
import os
from collections.abc import Callable, Generator
from typing import Any
from unittest.mock import MagicMock

import pytest

from obskit.logger import Logger


class EnvOverrideContext:
    """Context manager for temporarily setting environment variables."""

    def __init__(self, overrides: dict[str, str]) -> None:
        self.overrides = overrides
        self.original_env: dict[str, str | None] = {}

    def __enter__(self) -> None:
        for key, value in self.overrides.items():
            self.original_env[key] = os.environ.get(key)
            os.environ[key] = value

    def __exit__(self, *args: Any) -> None:
        for key in self.overrides:
            if self.original_env[key] is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = self.original_env[key]


@pytest.fixture
def env_override() -> Generator[Callable[[dict[str, str]], EnvOverrideContext], None, None]:
    """Context manager for temporarily setting environment variables.

    Usage:
        def test_something(env_override):
            with env_override({"LOG_LEVEL": "debug"}):
                # test code here
    """

    def _env_override(overrides: dict[str, str]) -> EnvOverrideContext:
        return EnvOverrideContext(overrides)

    yield _env_override


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Clear the settings cache before and after each test.

    This ensures test isolation for configuration tests.
    """
    from obskit.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def log_stream() -> io.StringIO:
    """In-memory stream that a logger under test writes to."""
    return io.StringIO()


@pytest.fixture
def read_records(log_stream: io.StringIO) -> Callable[[], list[dict[str, Any]]]:
    """Parse every JSON line written to log_stream so far."""

    def _read() -> list[dict[str, Any]]:
        return [json.loads(line) for line in log_stream.getvalue().splitlines() if line]

    return _read


@pytest.fixture
def mock_logger() -> MagicMock:
    """Mock logger whose children are the mock itself.

    Every log call made through a derived logger is therefore recorded on
    this one object.
    """
    logger = MagicMock(spec=Logger)
    logger.child.return_value = logger
    return logger
