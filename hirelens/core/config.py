from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, TypeVar

from dotenv import load_dotenv

load_dotenv()

T = TypeVar("T")

_TRUTHY = frozenset({"1", "true", "yes", "y", "on"})


def _env(name: str, default: str | None = None) -> str | None:
    """Environment value with blank treated as unset."""
    raw = os.getenv(name, "").strip()
    return raw or default


def _env_flag(name: str, default: bool) -> bool:
    raw = _env(name)
    return default if raw is None else raw.lower() in _TRUTHY


def _env_number(name: str, default: T, cast: Callable[[str], T]) -> T:
    raw = _env(name)
    if raw is None:
        return default
    try:
        return cast(raw)
    except ValueError:
        return default


def _env_csv(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    items = tuple(part.strip() for part in (_env(name) or "").split(",") if part.strip())
    return items or default


DEFAULT_ORIGINS = (
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
)


@dataclass(frozen=True)
class Settings:
    api_key: str | None
    rate_limit: str
    rate_limit_enabled: bool
    log_level: str
    sentry_dsn: str | None
    cors_allowed_origins: tuple[str, ...]
    cors_allow_origin_regex: str | None
    store_db_path: str
    analytics_enabled: bool
    analytics_db_path: str
    analytics_retention_days: int
    throttle_requests_per_minute: int
    throttle_min_delay_ms: float
    throttle_retry_fallback_delay_ms: float
    max_upload_bytes: int


def load_settings() -> Settings:
    return Settings(
        api_key=_env("ADMIN_API_KEY"),
        rate_limit=_env("RATE_LIMIT", "60/minute"),
        rate_limit_enabled=_env_flag("RATE_LIMIT_ENABLED", True),
        log_level=_env("LOG_LEVEL", "INFO"),
        sentry_dsn=_env("SENTRY_DSN"),
        cors_allowed_origins=_env_csv("CORS_ALLOWED_ORIGINS", DEFAULT_ORIGINS),
        cors_allow_origin_regex=_env("CORS_ALLOW_ORIGIN_REGEX"),
        store_db_path=_env("STORE_DB_PATH", "data/hirelens.db"),
        analytics_enabled=_env_flag("ANALYTICS_ENABLED", True),
        analytics_db_path=_env("ANALYTICS_DB_PATH", "data/analytics.db"),
        analytics_retention_days=_env_number("ANALYTICS_RETENTION_DAYS", 90, int),
        throttle_requests_per_minute=_env_number("THROTTLE_REQUESTS_PER_MINUTE", 12, int),
        throttle_min_delay_ms=_env_number("THROTTLE_MIN_DELAY_MS", 100.0, float),
        throttle_retry_fallback_delay_ms=_env_number("THROTTLE_RETRY_FALLBACK_DELAY_MS", 12000.0, float),
        max_upload_bytes=_env_number("MAX_UPLOAD_BYTES", 10 * 1024 * 1024, int),
    )


settings = load_settings()

if settings.throttle_requests_per_minute < 1:
    raise RuntimeError("THROTTLE_REQUESTS_PER_MINUTE must be at least 1.")
