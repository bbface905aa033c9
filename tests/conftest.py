"""Pytest configuration and fixtures."""

import os
from collections.abc import Callable, Iterator

import pytest

from jobpsych_api.config import Settings

# Set test environment variables before importing app modules
os.environ["GEMINI_API_KEY"] = ""
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("LOG_LEVEL", "WARNING")
# Increase rate limit for testing
os.environ.setdefault("RATE_LIMIT_PER_MINUTE", "1000")


@pytest.fixture(autouse=True)
def reset_caches() -> Iterator[None]:
    """Reset cached settings and rate limiter state before each test."""
    from jobpsych_api.config import get_settings

    get_settings.cache_clear()

    try:
        from jobpsych_api.main import limiter

        limiter.reset()
    except (ImportError, AttributeError, NotImplementedError):
        pass

    yield
    get_settings.cache_clear()


@pytest.fixture
def mock_settings(monkeypatch: pytest.MonkeyPatch) -> Callable[..., Settings]:
    """Fixture to set test settings."""

    def _mock_settings(**kwargs: str) -> Settings:
        for key, value in kwargs.items():
            monkeypatch.setenv(key.upper(), str(value))
        from jobpsych_api.config import get_settings

        get_settings.cache_clear()
        return get_settings()

    return _mock_settings


@pytest.fixture
def live_settings() -> Settings:
    """Settings with a usable (fake) Gemini key."""
    return Settings(gemini_api_key="AIzaSy-test-key-0123456789abcdefghij", mock_gemini=False)
