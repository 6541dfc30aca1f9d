"""Application configuration using Pydantic Settings v2.

Loads configuration from environment variables with .env file support.
All settings are validated at startup and available as typed attributes.
"""

from __future__ import annotations

import functools
import json
from typing import Annotated, Any

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """qbo-monday settings.

    Configuration is loaded from environment variables.
    A .env file in the project root is also read if present.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Application ──────────────────────────────────────────────
    app_name: str = "qbo-monday"
    log_level: str = "INFO"

    # ── Monday.com API ───────────────────────────────────────────
    monday_api_url: str = "https://api.monday.com/v2"
    monday_api_token: SecretStr = SecretStr("")
    monday_api_version: str = "2024-10"
    monday_timeout_seconds: float = 30.0

    # ── Retry ────────────────────────────────────────────────────
    monday_retry_max_attempts: int = 2  # initial call + 1 retry
    monday_retry_delays: Annotated[list[float], NoDecode] = [30.0]

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> str:
        return str(v).strip().upper() or "INFO"

    @field_validator("monday_retry_delays", mode="before")
    @classmethod
    def parse_retry_delays(cls, v: Any) -> list[float]:
        """Parse retry delays from a JSON list, a comma-separated string or a list."""
        if isinstance(v, str):
            try:
                parsed = json.loads(v)
            except (json.JSONDecodeError, TypeError):
                return [float(part) for part in v.split(",") if part.strip()]
            if isinstance(parsed, list):
                return [float(item) for item in parsed]
            return [float(parsed)]
        if isinstance(v, (int, float)):
            return [float(v)]
        return [float(item) for item in v]

    @field_validator("monday_retry_max_attempts")
    @classmethod
    def check_max_attempts(cls, v: int) -> int:
        if v < 1:
            raise ValueError("monday_retry_max_attempts must be at least 1")
        return v


@functools.lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""
    return Settings()
