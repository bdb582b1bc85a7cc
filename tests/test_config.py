from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the notecalc package importable for local test runs
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from notecalc.core import config as core_config  # noqa: E402


@pytest.fixture()
def clean_env(monkeypatch):
    for name in (
        "APP_ENV",
        "DATA_DIR",
        "NOTES_FILE",
        "CALCULATORS_FILE",
        "AUTH_EMAIL",
        "AUTH_PASSWORD",
        "SESSION_TTL_SECONDS",
        "LOG_LEVEL",
        "LOG_FILE",
        "HOST",
        "PORT",
    ):
        monkeypatch.delenv(name, raising=False)
    core_config.get_settings.cache_clear()
    yield monkeypatch
    core_config.get_settings.cache_clear()


def test_defaults(clean_env):
    settings = core_config.get_settings()
    assert settings.app_env == "dev"
    assert settings.data_dir == str(core_config.DEFAULT_DATA_DIR)
    assert settings.notes_file == "notes.json"
    assert settings.calculators_file == "calculators.json"
    assert settings.auth_email == "admin@example.com"
    assert settings.port == 5000


def test_environment_overrides(clean_env, tmp_path):
    clean_env.setenv("DATA_DIR", str(tmp_path))
    clean_env.setenv("NOTES_FILE", "n.json")
    clean_env.setenv("SESSION_TTL_SECONDS", "5")
    clean_env.setenv("PORT", "not-a-number")
    settings = core_config.get_settings()
    assert settings.data_dir == str(tmp_path)
    assert settings.notes_file == "n.json"
    assert settings.session_ttl_seconds == 60
    assert settings.port == 5000


def test_prod_has_no_default_credentials(clean_env):
    clean_env.setenv("APP_ENV", "PROD")
    settings = core_config.get_settings()
    assert settings.app_env == "prod"
    assert settings.auth_email == ""
    assert settings.auth_password == ""
