"""Unit tests for application settings."""

import logging
from datetime import timedelta

import pytest
from pydantic import ValidationError

from tollgate_config import configure_logging
from tollgate_config.settings import (
    Settings,
    _env_file_candidates,
    _resolve_env_file_path,
    get_config_dir,
    get_settings,
)

SECRET = "test-secret-key-with-at-least-32-bytes!"

JWT_ENV_VARS = (
    "JWT_SECRET_KEY",
    "JWT_ACCESS_TOKEN_TTL",
    "JWT_REFRESH_TOKEN_TTL",
    "JWT_HEADER",
    "JWT_TOKEN_PREFIX",
    "JWT_REFRESH_PATH",
    "LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in JWT_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:
    """Tests for Settings loading."""

    def test_defaults(self, clean_env):
        """Test that only the secret is required."""
        clean_env.setenv("JWT_SECRET_KEY", SECRET)

        settings = Settings(_env_file=None)

        assert settings.jwt_secret_key.get_secret_value() == SECRET
        assert settings.jwt_access_token_ttl == timedelta(minutes=30)
        assert settings.jwt_refresh_token_ttl == timedelta(days=7)
        assert settings.jwt_header == "Authorization"
        assert settings.jwt_token_prefix == "Bearer "
        assert settings.jwt_refresh_path == "/auth/refresh"
        assert settings.log_level == "INFO"

    def test_missing_secret_raises(self, clean_env):
        """Test that settings fail without JWT_SECRET_KEY."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_secret_hidden_in_repr(self, clean_env):
        """Test that the secret is masked."""
        clean_env.setenv("JWT_SECRET_KEY", SECRET)

        assert SECRET not in repr(Settings(_env_file=None))

    def test_durations_accept_seconds_and_iso8601(self, clean_env):
        """Test both supported duration formats."""
        clean_env.setenv("JWT_SECRET_KEY", SECRET)
        clean_env.setenv("JWT_ACCESS_TOKEN_TTL", "900")
        clean_env.setenv("JWT_REFRESH_TOKEN_TTL", "P14D")

        settings = Settings(_env_file=None)

        assert settings.jwt_access_token_ttl == timedelta(minutes=15)
        assert settings.jwt_refresh_token_ttl == timedelta(days=14)

    def test_log_level_is_normalized(self, clean_env):
        """Test that log levels are upper-cased."""
        clean_env.setenv("JWT_SECRET_KEY", SECRET)
        clean_env.setenv("LOG_LEVEL", " debug ")

        assert Settings(_env_file=None).log_level == "DEBUG"

    def test_env_file_values(self, clean_env, tmp_path):
        """Test that values are read from a .env file."""
        env_file = tmp_path / ".env"
        env_file.write_text(
            f"JWT_SECRET_KEY={SECRET}\nJWT_ACCESS_TOKEN_TTL=PT5M\n",
            encoding="utf-8",
        )

        settings = Settings(_env_file=env_file)

        assert settings.jwt_access_token_ttl == timedelta(minutes=5)

    def test_environment_overrides_env_file(self, clean_env, tmp_path):
        """Test that OS environment wins over the .env file."""
        env_file = tmp_path / ".env"
        env_file.write_text(
            f"JWT_SECRET_KEY={SECRET}\nJWT_ACCESS_TOKEN_TTL=PT5M\n",
            encoding="utf-8",
        )
        clean_env.setenv("JWT_ACCESS_TOKEN_TTL", "60")

        settings = Settings(_env_file=env_file)

        assert settings.jwt_access_token_ttl == timedelta(seconds=60)

    def test_get_settings_is_cached(self, clean_env):
        """Test that get_settings returns the same instance."""
        clean_env.setenv("JWT_SECRET_KEY", SECRET)

        assert get_settings() is get_settings()


class TestEnvFileResolution:
    """Tests for .env file discovery."""

    def test_explicit_env_file(self, monkeypatch, tmp_path):
        """Test that TOLLGATE_ENV_FILE takes priority."""
        env_file = tmp_path / "custom.env"
        env_file.write_text("", encoding="utf-8")
        monkeypatch.setenv("TOLLGATE_ENV_FILE", str(env_file))

        assert _resolve_env_file_path() == env_file

    def test_missing_explicit_env_file_is_ignored(self, monkeypatch, tmp_path):
        """Test that a nonexistent TOLLGATE_ENV_FILE falls through."""
        monkeypatch.setenv("TOLLGATE_ENV_FILE", str(tmp_path / "missing.env"))

        assert _resolve_env_file_path() != tmp_path / "missing.env"

    def test_candidates_ordered_most_specific_first(self, monkeypatch):
        """Test that the explicit file precedes config/.env.dev and config/.env."""
        monkeypatch.setenv("TOLLGATE_ENV_FILE", "deploy/tollgate.env")

        candidates = _env_file_candidates()

        assert candidates[0].parts[-2:] == ("deploy", "tollgate.env")
        assert candidates[0].is_absolute()
        assert candidates[1:] == [
            get_config_dir() / ".env.dev",
            get_config_dir() / ".env",
        ]


class TestConfigureLogging:
    """Tests for logging setup."""

    @pytest.fixture(autouse=True)
    def restore_logging(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        for handler in root.handlers[:]:
            root.removeHandler(handler)
        for handler in handlers:
            root.addHandler(handler)
        root.setLevel(level)
        for name in ("tollgate", "tollgate_auth", "tollgate_config", "jwt"):
            logging.getLogger(name).setLevel(logging.NOTSET)

    def test_applies_level_to_app_loggers(self):
        """Test that tollgate loggers receive the configured level."""
        level = configure_logging("debug")

        assert level == logging.DEBUG
        assert logging.getLogger("tollgate_auth").level == logging.DEBUG
        assert logging.getLogger("jwt").level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self):
        """Test that unknown level names do not crash."""
        assert configure_logging("chatty") == logging.INFO
