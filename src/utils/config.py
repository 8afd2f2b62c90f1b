"""
Cue Configuration Module.

Centralizes all configuration settings using Pydantic Settings.
Requires Python 3.11+.
"""

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file into os.environ at module import time
# so nested BaseSettings classes can read the values
_env_file = Path.cwd() / ".env"
if _env_file.exists():
    load_dotenv(_env_file)


class RunnerSettings(BaseSettings):
    """Watch loop and supervisor defaults."""

    model_config = SettingsConfigDict(env_prefix="CUE_")

    debounce_ms: int = Field(
        default=150, ge=0, description="Minimum gap between two restarts, 0 disables"
    )
    quiet: bool = Field(default=False, description="Suppress status output")
    no_clear: bool = Field(default=False, description="Print a separator instead of clearing")
    health_check_interval: float = Field(
        default=1.0, gt=0.0, description="Seconds between watcher health checks"
    )


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="WARNING")
    format: str = Field(default="console")  # "json" or "console"

    @field_validator("format")
    @classmethod
    def check_format(cls, v: str) -> str:
        """Only the two renderers configure_logging knows about are allowed."""
        v = v.lower()
        if v not in ("json", "console"):
            raise ValueError(f"unknown log format: {v}")
        return v


class Settings(BaseSettings):
    """Main application settings aggregating all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="cue")
    app_version: str = Field(default="0.1.0")

    runner: RunnerSettings = Field(default_factory=RunnerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns singleton instance of Settings for performance.
    """
    return Settings()
