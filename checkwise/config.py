"""
Application configuration management
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CONFIG_PATH = ".github/scope-mate.yml"
DEFAULT_MARKER = "<!-- checkwise-marker -->"
DEFAULT_STATUS_CONTEXT = "checkwise"


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # GitHub API Configuration
    github_token: str = Field("")
    github_api_url: str = Field("https://api.github.com")
    github_request_timeout: float = Field(30.0)

    # Workflow run context
    github_repository: str = Field("")
    github_event_name: str = Field("")
    github_event_path: str = Field("")

    # Checklist Configuration
    checkwise_config_path: str = Field(DEFAULT_CONFIG_PATH)
    checkwise_marker: str = Field(DEFAULT_MARKER)
    checkwise_status_context: str = Field(DEFAULT_STATUS_CONTEXT)

    # Application Configuration
    app_name: str = Field("Checkwise")
    app_version: str = Field("1.0.0")

    # Logging Configuration
    log_level: str = Field("INFO")
    log_format: str = Field("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    # Retry Configuration
    max_github_retries: int = Field(2, ge=0)
    github_retry_delay: float = Field(1.0, ge=0)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


def get_github_headers(token: str | None = None) -> dict:
    """Get GitHub API headers with authentication"""
    settings = get_settings()
    headers = {
        "Accept": "application/vnd.github.v3+json",
        "User-Agent": f"{settings.app_name}/{settings.app_version}",
    }
    token = token if token is not None else settings.github_token
    if token:
        headers["Authorization"] = f"token {token}"
    return headers
