"""Centralized configuration: Pydantic BaseSettings with dotenv support.

Environment variables use the ``CEPBOT_`` prefix and ``__`` as the nested
delimiter (e.g. ``CEPBOT_HTTP__TIMEOUT_SECONDS=10``).

Priority (highest wins): init args > env vars > .env

Usage::

    from cepbot.config import get_settings

    s = get_settings()
    print(s.gcloud.bin)
    print(s.default_region)

Retry, polling, scope and service constants are not settings;
they live in ``cepbot.constants`` as literals.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cepbot.constants import DEFAULT_REGION

# ---------------------------------------------------------------------------
# Sub-models
# ---------------------------------------------------------------------------


class _StrictModel(BaseModel):
    """Base for all config sub-models; unknown keys are rejected."""

    model_config = {"extra": "forbid"}


class LoggingConfig(_StrictModel):
    level: str | None = None  # None keeps the CEPBOT_LOG_LEVEL / LOG_LEVEL startup level

    @field_validator("level")
    @classmethod
    def normalize_level(cls, v: str | None) -> str | None:
        return v.upper() if v else None


class GcloudConfig(_StrictModel):
    bin: str = "gcloud"
    timeout_seconds: float = 30.0
    adc_path: str | None = None  # None → platform default location

    @field_validator("adc_path")
    @classmethod
    def expand_path(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return str(Path(v).expanduser())


class HttpConfig(_StrictModel):
    timeout_seconds: float = 30.0
    metadata_timeout_seconds: float = 2.0

    @field_validator("timeout_seconds", "metadata_timeout_seconds")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeouts must be positive")
        return v


class ServerConfig(_StrictModel):
    name: str = "cepbot"


# ---------------------------------------------------------------------------
# Root Settings
# ---------------------------------------------------------------------------


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CEPBOT_",
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
    )

    logging: LoggingConfig = LoggingConfig()
    gcloud: GcloudConfig = GcloudConfig()
    http: HttpConfig = HttpConfig()
    server: ServerConfig = ServerConfig()
    default_region: str = DEFAULT_REGION  # used when the metadata server is unreachable


# ---------------------------------------------------------------------------
# Singleton
# ---------------------------------------------------------------------------

_settings: Settings | None = None


def get_settings() -> Settings:
    """Lazy cached singleton."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Clear the cached singleton (for tests)."""
    global _settings
    _settings = None
