# ABOUTME: Application configuration using Pydantic Settings for environment variables
# ABOUTME: Provides type-safe access to upstream, throttling and logging settings

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    """Application configuration with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="FLARESTONE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Upstream Configuration
    base_url: str = Field(
        default="https://na.finalfantasyxiv.com", description="Origin that collection and record URLs are built on"
    )
    use_mobile_agent: bool = Field(default=False, description="Send the mobile User-Agent instead of the desktop one")
    request_timeout: float = Field(default=15.0, description="Per-request timeout in seconds")
    max_retries: int = Field(default=3, ge=1, description="Attempts per fetch when the transport fails")

    # Multi-page throttling
    request_delay_ms: int = Field(default=100, ge=0, description="Delay after every real fetch in multi-page loads")
    preload_pages: int = Field(default=2, ge=1, description="Pages fetched sequentially before boundary search starts")

    # Logging Configuration
    log_mode: Literal["interactive", "production"] = Field(default="interactive", description="Logging output mode")

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Logging verbosity level"
    )

    log_file: Path | None = Field(default=None, description="Custom log file path (overrides default)")


# Global config instance - lazy loaded when first accessed
_config_instance: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance.

    Creates the config on first access, subsequent calls return the same instance.

    Returns:
        Config: The application configuration instance
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = Config()
    return _config_instance


def reload_config() -> Config:
    """Reload configuration from environment variables.

    Returns:
        Config: A fresh configuration instance
    """
    global _config_instance
    _config_instance = Config()
    return _config_instance
