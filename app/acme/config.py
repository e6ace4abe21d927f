from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    secret_key: str
    env: str
    database_url: str
    log_level: str

    cache_type: str
    cache_default_timeout: int
    cache_dir: str | None
    cache_redis_url: str | None


def _getenv(name: str, default: str = "") -> str:
    return (os.environ.get(name) or default).strip()


def _getenv_int(name: str, default: int) -> int:
    raw = _getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer (got {raw!r}).")


def load_settings() -> Settings:
    return Settings(
        secret_key=_getenv("SECRET_KEY", "change-me"),
        env=_getenv("ENV", "development"),
        database_url=_getenv("DATABASE_URL", "sqlite:///acme.db"),
        log_level=_getenv("LOG_LEVEL", "INFO").upper(),
        cache_type=_getenv("CACHE_TYPE", "SimpleCache"),
        cache_default_timeout=_getenv_int("CACHE_DEFAULT_TIMEOUT", 300),
        cache_dir=_getenv("CACHE_DIR") or None,
        cache_redis_url=_getenv("CACHE_REDIS_URL") or None,
    )


def load_config() -> dict:
    s = load_settings()
    is_production = s.env in ("prod", "production")
    return {
        "SECRET_KEY": s.secret_key,
        "ENV": s.env,
        "DATABASE_URL": s.database_url,
        "LOG_LEVEL": s.log_level,
        # Flask-Caching
        "CACHE_TYPE": s.cache_type,
        "CACHE_DEFAULT_TIMEOUT": s.cache_default_timeout,
        "CACHE_DIR": s.cache_dir,
        "CACHE_REDIS_URL": s.cache_redis_url,
        # security defaults
        "SESSION_COOKIE_HTTPONLY": True,
        "SESSION_COOKIE_SAMESITE": "Lax",
        "SESSION_COOKIE_SECURE": is_production,  # Require HTTPS in production
    }
