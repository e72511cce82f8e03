"""Centralized runtime configuration.

Loads environment variables (optionally from a ``.env`` file) into a frozen
``Settings`` object. Route modules and the storage factory read settings
through ``get_settings()`` rather than calling ``os.getenv`` themselves.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

_DEV_SESSION_SECRET = "ideascore-dev-secret-change-in-production"
_MIN_BCRYPT_ROUNDS = 10

STORAGE_BACKENDS = ("sql", "memory")


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r, using %d", name, raw, default)
        return default


def _env_list(name: str, default: str) -> tuple[str, ...]:
    raw = os.getenv(name, default)
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///./ideascore.db"
    storage_backend: str = "sql"
    session_secret: str = _DEV_SESSION_SECRET
    session_ttl_hours: int = 24
    session_cookie_name: str = "sid"
    environment: str = "development"
    bcrypt_rounds: int = 12
    cors_origins: tuple[str, ...] = field(default_factory=tuple)
    debug: bool = False
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def session_ttl_seconds(self) -> int:
        return self.session_ttl_hours * 3600


def load_settings() -> Settings:
    """Build a ``Settings`` instance from the current environment."""
    load_dotenv()

    backend = os.getenv("STORAGE_BACKEND", "sql").strip().lower()
    if backend not in STORAGE_BACKENDS:
        raise ValueError(
            f"STORAGE_BACKEND must be one of {', '.join(STORAGE_BACKENDS)} (got {backend!r})"
        )

    secret = os.getenv("SESSION_SECRET", "")
    if not secret:
        logger.warning("SESSION_SECRET not set, using the development fallback secret")
        secret = _DEV_SESSION_SECRET

    rounds = _env_int("BCRYPT_ROUNDS", 12)
    if rounds < _MIN_BCRYPT_ROUNDS:
        logger.warning("BCRYPT_ROUNDS=%d is below %d, raising it", rounds, _MIN_BCRYPT_ROUNDS)
        rounds = _MIN_BCRYPT_ROUNDS

    return Settings(
        database_url=os.getenv("DATABASE_URL", "sqlite:///./ideascore.db"),
        storage_backend=backend,
        session_secret=secret,
        session_ttl_hours=max(1, _env_int("SESSION_TTL_HOURS", 24)),
        session_cookie_name=os.getenv("SESSION_COOKIE_NAME", "sid"),
        environment=os.getenv("ENVIRONMENT", "development").strip().lower(),
        bcrypt_rounds=rounds,
        cors_origins=_env_list(
            "CORS_ORIGINS",
            "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173",
        ),
        debug=_env_bool("DEBUG"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        host=os.getenv("HOST", "127.0.0.1"),
        port=_env_int("PORT", 8000),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
