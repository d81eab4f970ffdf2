"""Client configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file

Only the factories read these settings; the rate gate and the submitter take
explicit constructor arguments.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Nested BaseSettings don't inherit env_file, so populate os.environ first
if _env_file and not os.getenv("TESTING"):
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


DEFAULT_API_URL = "https://ismp.crpt.ru/v3/lk/documents/commissioning/contract/create"


def _build_crpt_settings() -> "CrptSettings":
    """Build CRPT client settings from environment."""

    return CrptSettings()


def _build_log_settings() -> "LogSettings":
    """Build logging settings from environment."""

    return LogSettings()


class CrptSettings(BaseSettings):
    """Remote endpoint and rate gate configuration."""

    api_url: str = Field(
        DEFAULT_API_URL,
        description="Document registration endpoint receiving the POST",
    )
    request_limit: int = Field(
        10,
        description="Maximum number of submissions admitted per time window",
        ge=1,
    )
    time_unit: str = Field(
        "seconds",
        description="Length of the sliding window: one unit of milliseconds/seconds/minutes/hours/days",
    )
    timeout_seconds: float = Field(
        30.0,
        description="HTTP request timeout in seconds",
        gt=0,
    )

    model_config = SettingsConfigDict(
        env_prefix="CRPT_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging output configuration."""

    level: str = Field("INFO", description="Level of the crpt_client logger")
    format: str = Field("json", description="'json' or 'plain'")

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main settings container.

    Raises validation errors on first import if values are malformed
    (e.g. CRPT_REQUEST_LIMIT=0).
    """

    app_env: str = APP_ENV
    crpt: CrptSettings = Field(default_factory=_build_crpt_settings)
    log: LogSettings = Field(default_factory=_build_log_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance - composed from domain-specific settings
settings = Settings()
