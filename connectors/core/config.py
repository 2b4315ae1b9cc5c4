"""
Connector configuration.
Manages all configurations through environment variables and an optional .env file.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Literal, Optional


class Settings(BaseSettings):
    """Application settings using Pydantic Settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    # Application Settings
    APP_NAME: str = "pushdown-connectors"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None  # Rotating file log, console only when unset

    # Jira Configuration
    JIRA_URL: Optional[str] = None
    JIRA_USERNAME: Optional[str] = None
    JIRA_API_TOKEN: Optional[str] = None
    JIRA_PAGE_SIZE: int = Field(default=50, ge=1, le=100)
    # "cloud" uses token-paged enhanced search, "server" the v2 offset search of Server/Data Center
    JIRA_DEPLOYMENT: Literal["cloud", "server"] = "cloud"
    # Jira "~" is a word search, so LIKE pushdown can be switched off
    JIRA_PUSHDOWN_TEXT_SEARCH: bool = True

    # GitHub Configuration
    GITHUB_TOKEN: Optional[str] = None
    GITHUB_API_URL: str = "https://api.github.com"
    GITHUB_PAGE_SIZE: int = Field(default=100, ge=1, le=100)

    # HTTP Configuration
    HTTP_TIMEOUT_SECONDS: int = 30
    HTTP_MAX_RETRIES: int = Field(default=3, ge=1)

    # Number of row batches buffered between a fetch and its consumer
    CHUNK_QUEUE_SIZE: int = Field(default=8, ge=1)

    @property
    def jira_configured(self) -> bool:
        """True when all Jira credentials are present."""
        return bool(self.JIRA_URL and self.JIRA_USERNAME and self.JIRA_API_TOKEN)

    @property
    def github_configured(self) -> bool:
        """True when a GitHub token is present."""
        return bool(self.GITHUB_TOKEN)


# Global settings instance (lazy initialization)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Returns the settings instance with lazy initialization."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings():
    """Drop the cached settings so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None
