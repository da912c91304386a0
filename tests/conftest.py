"""Root pytest configuration.

Test Structure:
    tests/
    └── unit/
        ├── tollgate_auth/     # Token engine (no settings, no I/O)
        ├── tollgate_config/   # Settings and logging setup
        └── tollgate/          # Wiring and CLI

Environment:
    config/.env.test is loaded when present so local runs can pin a
    secret; tests that depend on settings set their own variables.
"""

from pathlib import Path

import pytest
from dotenv import load_dotenv

from tollgate.dependencies import clear_jwt_service_cache
from tollgate_config import clear_settings_cache

PROJECT_ROOT = Path(__file__).resolve().parents[1]

CONFIG_DIR = PROJECT_ROOT / "config"
if (CONFIG_DIR / ".env.test").exists():
    load_dotenv(CONFIG_DIR / ".env.test")


@pytest.fixture(autouse=True)
def reset_cached_singletons():
    """Drop cached settings and engines so each test sees its own env."""
    clear_settings_cache()
    clear_jwt_service_cache()
    yield
    clear_settings_cache()
    clear_jwt_service_cache()
