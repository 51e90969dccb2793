"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields and are
suitable for local development against ``http://localhost:5000``.  In
a production deployment override them via environment variables.
"""

import os
from dataclasses import dataclass, field
from typing import List


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


def _env_list(name: str, default: str) -> List[str]:
    return [value.strip() for value in os.getenv(name, default).split(",") if value.strip()]


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Apparel API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = _env_bool("DEBUG", "false")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Routes are served at the root by default because the browser
    # client posts to ``/login`` and ``/register`` directly.
    api_prefix: str = os.getenv("API_PREFIX", "")

    # Path or connection string for the SQLite database.  A relative
    # path is resolved against the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "apparel.db")

    # Upper bound on any single database call, including the time spent
    # waiting for SQLite's write lock.
    db_timeout_seconds: float = float(os.getenv("DB_TIMEOUT_SECONDS", "5"))

    # PBKDF2‑HMAC‑SHA512 work factor for newly registered passwords.  The
    # count is stored per user so raising it does not break old logins.
    password_iterations: int = int(os.getenv("PASSWORD_ITERATIONS", "100000"))

    session_ttl_seconds: float = float(os.getenv("SESSION_TTL_SECONDS", "20"))
    session_sweep_interval_seconds: float = float(os.getenv("SESSION_SWEEP_INTERVAL_SECONDS", "2"))
    session_max_entries: int = int(os.getenv("SESSION_MAX_ENTRIES", "10000"))

    session_cookie_name: str = os.getenv("SESSION_COOKIE_NAME", "login")
    session_cookie_max_age: int = int(os.getenv("SESSION_COOKIE_MAX_AGE", "200"))
    cookie_secure: bool = _env_bool("COOKIE_SECURE", "false")
    cookie_samesite: str = os.getenv("COOKIE_SAMESITE", "lax")

    cors_origins: List[str] = field(
        default_factory=lambda: _env_list("CORS_ORIGINS", "http://localhost:5000,http://127.0.0.1:5000")
    )

    # Uploaded item, outfit and profile pictures land in ``media_dir``;
    # ``public_dir`` is the root that ``/filenames/{dir}`` may list.
    public_dir: str = os.getenv("PUBLIC_DIR", "public_html")
    media_dir: str = os.getenv("MEDIA_DIR", "public_html/img/user-data")


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# should be set before importing this module.
settings = Settings()
