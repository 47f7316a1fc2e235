# config.py

"""Client configuration utilities.

Values are primarily loaded from ``config.json`` and may be overridden by
environment variables. The :func:`get_settings` helper merges the two sources
and caches the result. A ``.env`` file is not read here; the CLI loads it into
the environment with ``python-dotenv`` before the first :func:`get_settings`.
"""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BACKEND_URL = "http://localhost:8000"


class Settings(BaseSettings):
    """Client settings merged from JSON and environment variables."""

    model_config = SettingsConfigDict(extra="ignore")

    backend_url: str = DEFAULT_BACKEND_URL
    poll_interval_ms: int = 3000
    request_timeout_secs: float = 10.0
    log_level: str = "INFO"
    log_json: bool = True

    @field_validator("backend_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/") or DEFAULT_BACKEND_URL

    @field_validator("poll_interval_ms")
    @classmethod
    def _positive_interval(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("poll_interval_ms must be positive")
        return value

    @property
    def poll_interval(self) -> float:
        """Polling cadence in seconds."""
        return self.poll_interval_ms / 1000


# Cached singleton to avoid repeated file reads
@lru_cache
def get_settings() -> Settings:
    """Return merged settings with environment variable precedence.

    The configuration is read from ``config.json`` located alongside this file
    and fed into :class:`Settings`. Environment variables override any values
    from the JSON file. The result is cached; call ``get_settings.cache_clear()``
    after changing the environment.
    """

    config_path = Path(__file__).with_name("config.json")
    data = json.loads(config_path.read_text()) if config_path.exists() else {}
    env_override = {
        k.lower(): v
        for k, v in os.environ.items()
        if k.lower() in Settings.model_fields
    }
    merged = {**data, **env_override}
    return Settings(**merged)
