"""Engine configuration loaded from environment variables."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from reqsnap_engine import __version__

logger = logging.getLogger(__name__)

DEFAULT_SNAPSHOT_DIR = Path(".reqsnap")
DEFAULT_TIMEOUT_MS = 10_000
DEFAULT_USER_AGENT = f"reqsnap/{__version__}"


class Settings(BaseSettings):
    """Application settings loaded from environment variables with REQSNAP_ prefix."""

    model_config = SettingsConfigDict(
        env_prefix="REQSNAP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    debug: bool = False

    # Storage
    snapshot_dir: Path = DEFAULT_SNAPSHOT_DIR

    # Requests
    default_method: str = "GET"
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    user_agent: str = DEFAULT_USER_AGENT

    # Logging
    structured_logging: bool = False

    @field_validator("default_method", mode="before")
    @classmethod
    def upper_case_method(cls, v: str) -> str:
        return str(v).strip().upper() or "GET"

    @field_validator("timeout_ms", mode="before")
    @classmethod
    def fallback_timeout(cls, v: object) -> int:
        # Unparseable or non-positive values fall back to the default.
        try:
            parsed = int(str(v).strip())
        except (TypeError, ValueError):
            return DEFAULT_TIMEOUT_MS
        return parsed if parsed > 0 else DEFAULT_TIMEOUT_MS


def load_settings(**overrides: object) -> Settings:
    """Load settings from environment, with optional overrides for testing."""
    settings = Settings(**overrides)  # type: ignore[arg-type]

    if settings.debug:
        logger.info("Loaded settings: snapshot_dir=%s timeout_ms=%d", settings.snapshot_dir, settings.timeout_ms)

    return settings
