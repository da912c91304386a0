"""Application settings loaded from environment variables.

Configuration file discovery (in priority order):
1. OS environment variables (always highest priority)
2. TOLLGATE_ENV_FILE environment variable (path to .env file)
3. config/.env.dev - local development
4. config/.env - production/Docker

Uses pydantic-settings for automatic type coercion and validation.
Durations accept seconds (``1800``) or ISO 8601 (``PT30M``, ``P7D``).
"""

from __future__ import annotations

import os
from datetime import timedelta
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


ENV_FILE_VAR = "TOLLGATE_ENV_FILE"


def _find_project_root() -> Path:
    """Return the nearest ancestor holding ``pyproject.toml`` or ``config/``.

    Falls back to the working directory for installs outside a checkout.
    """
    here = Path(__file__).resolve().parent
    for candidate in (here, *here.parents):
        if (candidate / "pyproject.toml").is_file() or (candidate / "config").is_dir():
            return candidate
    return Path.cwd()


def get_config_dir() -> Path:
    """Directory searched for ``.env.dev`` and ``.env``."""
    return _find_project_root() / "config"


def _env_file_candidates() -> list[Path]:
    """Env files to try, most specific first."""
    candidates = []

    explicit = os.environ.get(ENV_FILE_VAR)
    if explicit:
        path = Path(explicit)
        candidates.append(path if path.is_absolute() else _find_project_root() / path)

    config_dir = get_config_dir()
    candidates += [config_dir / ".env.dev", config_dir / ".env"]
    return candidates


def _resolve_env_file_path() -> Path | None:
    """First existing env file from ``_env_file_candidates``, if any."""
    return next((path for path in _env_file_candidates() if path.exists()), None)


class Settings(BaseSettings):
    """Application configuration loaded from environment variables.

    Values are loaded from:
    1. OS environment variables (highest priority)
    2. .env file (config/.env.dev or config/.env)
    3. Default values
    """

    model_config = SettingsConfigDict(
        env_file=_resolve_env_file_path(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Security (MUST be set - the token engine refuses to start without it)
    jwt_secret_key: SecretStr

    # JWT
    jwt_access_token_ttl: timedelta = timedelta(minutes=30)
    jwt_refresh_token_ttl: timedelta = timedelta(days=7)
    jwt_header: str = "Authorization"
    jwt_token_prefix: str = "Bearer "
    jwt_refresh_path: str = "/auth/refresh"

    # Logging (LOG_ prefix)
    log_level: str = "INFO"

    @field_validator("jwt_access_token_ttl", "jwt_refresh_token_ttl", mode="before")
    @classmethod
    def _parse_seconds(cls, v: Any) -> Any:
        """Read bare integers from the environment as seconds."""
        if isinstance(v, str) and v.strip().isdigit():
            return int(v.strip())
        return v

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, v: str) -> str:
        return v.strip().upper()


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings.

    ``JWT_SECRET_KEY`` must be provided via environment variables or a
    .env file.
    """
    return Settings()  # type: ignore[call-arg]  # pydantic-settings loads from env


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for tests)."""
    get_settings.cache_clear()
