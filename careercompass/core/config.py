from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

_TRUTHY = frozenset({"1", "true", "yes", "y", "on"})

DEFAULT_CORS_ORIGINS = (
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://localhost:5000",
)
DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024


def _env_str(name: str, default: str | None = None) -> str | None:
    value = (os.getenv(name) or "").strip()
    return value or default


def _env_flag(name: str, default: bool) -> bool:
    raw = _env_str(name)
    if raw is None:
        return default
    return raw.lower() in _TRUTHY


def _env_int(name: str, default: int, *, minimum: int | None = None) -> int:
    raw = _env_str(name)
    try:
        value = int(raw) if raw is not None else default
    except ValueError:
        value = default
    if minimum is not None and value < minimum:
        raise RuntimeError(f"{name} must be at least {minimum}, got {value}.")
    return value


def _env_csv(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = _env_str(name)
    if raw is None:
        return default
    items = tuple(item.strip() for item in raw.split(",") if item.strip())
    return items or default


@dataclass(frozen=True)
class Settings:
    # HTTP surface
    api_key: str | None
    rate_limit: str
    rate_limit_enabled: bool
    cors_allowed_origins: tuple[str, ...]
    cors_allow_origin_regex: str | None
    cors_allow_credentials: bool
    max_upload_bytes: int

    # Observability
    log_level: str
    sentry_dsn: str | None
    log_message_max_chars: int

    # Storage
    database_path: str
    analytics_enabled: bool
    analytics_db_path: str
    analytics_retention_days: int


def load_settings() -> Settings:
    """Build settings from the process environment (and `.env`, if present)."""
    return Settings(
        api_key=_env_str("API_KEY"),
        rate_limit=_env_str("RATE_LIMIT", "60/minute"),
        rate_limit_enabled=_env_flag("RATE_LIMIT_ENABLED", True),
        cors_allowed_origins=_env_csv("CORS_ALLOWED_ORIGINS", DEFAULT_CORS_ORIGINS),
        cors_allow_origin_regex=_env_str("CORS_ALLOW_ORIGIN_REGEX"),
        cors_allow_credentials=_env_flag("CORS_ALLOW_CREDENTIALS", False),
        max_upload_bytes=_env_int("MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES, minimum=1),
        log_level=(_env_str("LOG_LEVEL", "INFO")).upper(),
        sentry_dsn=_env_str("SENTRY_DSN"),
        log_message_max_chars=_env_int("LOG_MESSAGE_MAX_CHARS", 800, minimum=0),
        database_path=_env_str("DATABASE_PATH", "data/careercompass.db"),
        analytics_enabled=_env_flag("ANALYTICS_ENABLED", True),
        analytics_db_path=_env_str("ANALYTICS_DB_PATH", "data/analytics.db"),
        analytics_retention_days=_env_int("ANALYTICS_RETENTION_DAYS", 180, minimum=1),
    )


settings = load_settings()
