"""Test configuration and fixtures."""

import os
from collections.abc import Generator

import pytest

# Set environment variables immediately when this module is imported
# This ensures they're available before any other modules try to load Settings
test_env_vars = {
    "GITHUB_TOKEN": "ghp_test_token_123",
    "GITHUB_API_URL": "https://api.github.com",
    "GITHUB_REPOSITORY": "",
    "GITHUB_EVENT_NAME": "",
    "GITHUB_EVENT_PATH": "",
    "CHECKWISE_CONFIG_PATH": ".github/scope-mate.yml",
    "APP_NAME": "Checkwise Test",
    "APP_VERSION": "1.0.0-test",
    "LOG_LEVEL": "DEBUG",
    "MAX_GITHUB_RETRIES": "2",
    "GITHUB_RETRY_DELAY": "0",
}

# Set environment variables immediately
for key, value in test_env_vars.items():
    os.environ[key] = value


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment() -> Generator[None, None, None]:
    """Set up test environment variables."""
    # Environment variables are already set at module level
    yield

    # Clean up environment variables after tests
    for key in test_env_vars:
        os.environ.pop(key, None)


@pytest.fixture
def make_settings() -> object:
    """Build Settings instances that ignore the process environment."""
    from checkwise.config import Settings

    def _make(**overrides: object) -> Settings:
        values = {
            "github_token": "ghp_test_token",
            "github_api_url": "https://api.github.com",
            "github_repository": "octo/repo",
            "github_event_name": "pull_request",
            "github_event_path": "",
            "checkwise_config_path": ".github/scope-mate.yml",
            "max_github_retries": 2,
            "github_retry_delay": 0,
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def write_config(tmp_path) -> object:
    """Write a YAML config file and return its path."""

    def _write(content: str, name: str = "scope-mate.yml") -> str:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture
def package_logs(caplog) -> Generator[object, None, None]:
    """Let caplog see records of the checkwise package logger."""
    import logging

    package_logger = logging.getLogger("checkwise")
    package_logger.propagate = True
    try:
        with caplog.at_level(logging.DEBUG, logger="checkwise"):
            yield caplog
    finally:
        package_logger.propagate = False
