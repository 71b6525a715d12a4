"""
Environment-driven settings.

Read once by the app factory and passed down explicitly. Required values
fail loudly; optional ones fall back to defaults when blank or malformed.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from .errors import ConfigurationError

DEFAULT_CORS_ORIGINS = (
    "http://localhost:5173",
    "http://127.0.0.1:5173",
)


def _env_str(env: Mapping[str, str], name: str, default: str = "") -> str:
    return env.get(name, "").strip() or default


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name, "").strip().lower()
    if raw in ("1", "true", "yes", "on"):
        return True
    if raw in ("0", "false", "no", "off"):
        return False
    return default


def _env_list(env: Mapping[str, str], name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    database_url: str
    view_hash_secret: str
    reaction_hash_secret: str
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10
    db_command_timeout: float = 30.0
    trust_forwarded_for: bool = True
    trusted_proxy_hops: int = 1
    cors_allow_origins: tuple[str, ...] = DEFAULT_CORS_ORIGINS
    auto_create_schema: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if env is None else env

        database_url = _env_str(env, "DATABASE_URL")
        if not database_url:
            raise ConfigurationError("DATABASE_URL is not set.")

        view_secret = _env_str(env, "VIEW_HASH_SECRET")
        if not view_secret:
            # No built-in fallback: a known key makes fingerprints reversible.
            raise ConfigurationError("VIEW_HASH_SECRET is not set.")
        reaction_secret = _env_str(env, "REACTION_HASH_SECRET", view_secret)

        min_size = max(_env_int(env, "DB_POOL_MIN_SIZE", 1), 0)
        max_size = max(_env_int(env, "DB_POOL_MAX_SIZE", 10), 1)

        return cls(
            database_url=database_url,
            view_hash_secret=view_secret,
            reaction_hash_secret=reaction_secret,
            db_pool_min_size=min(min_size, max_size),
            db_pool_max_size=max_size,
            db_command_timeout=_env_float(env, "DB_COMMAND_TIMEOUT", 30.0),
            trust_forwarded_for=_env_bool(env, "TRUST_FORWARDED_FOR", True),
            trusted_proxy_hops=max(_env_int(env, "TRUSTED_PROXY_HOPS", 1), 0),
            cors_allow_origins=_env_list(env, "CORS_ALLOW_ORIGINS", DEFAULT_CORS_ORIGINS),
            auto_create_schema=_env_bool(env, "AUTO_CREATE_SCHEMA", True),
            log_level=_env_str(env, "LOG_LEVEL", "INFO"),
        )
