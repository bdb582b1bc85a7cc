"""
Configuration helpers for the notecalc application.

Routers, services and managers read their settings from the Settings object
returned by get_settings() instead of fetching os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

PACKAGE_DIR = Path(__file__).resolve().parents[1]
DEFAULT_DATA_DIR = PACKAGE_DIR / "data"

_DEV_EMAIL = "admin@example.com"
_DEV_PASSWORD = "admin"


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    data_dir: str
    notes_file: str
    calculators_file: str
    auth_email: str
    auth_password: str
    session_ttl_seconds: int
    log_level: str
    log_file: str
    host: str
    port: int


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    app_env = (os.getenv("APP_ENV") or "dev").lower()
    is_dev = app_env == "dev"

    return Settings(
        app_env=app_env,
        data_dir=os.getenv("DATA_DIR") or str(DEFAULT_DATA_DIR),
        notes_file=os.getenv("NOTES_FILE") or "notes.json",
        calculators_file=os.getenv("CALCULATORS_FILE") or "calculators.json",
        auth_email=os.getenv("AUTH_EMAIL", _DEV_EMAIL if is_dev else "").strip(),
        auth_password=os.getenv("AUTH_PASSWORD", _DEV_PASSWORD if is_dev else ""),
        session_ttl_seconds=max(60, _int(os.getenv("SESSION_TTL_SECONDS", "86400"), 86400)),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        log_file=os.getenv("LOG_FILE", ""),
        host=os.getenv("HOST", "127.0.0.1"),
        port=_int(os.getenv("PORT", "5000"), 5000),
    )
