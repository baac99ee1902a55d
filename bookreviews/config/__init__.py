"""Application configuration accessors.

Centralizes environment variable parsing & defaults so the rest of the
package never reads ``os.environ`` directly.
"""
from __future__ import annotations

import os
from functools import lru_cache

APP_NAME = "bookreviews"
APP_VERSION = "0.1.0"
APP_DESCRIPTION = "Users, books, genres and reviews data layer"

DEFAULT_DB_PATH = "bookreviews.db"
DEFAULT_LOG_LEVEL = "INFO"
MEMORY_DB = ":memory:"
_TRUE = {"1", "true", "yes", "on"}


def _raw_env(name: str, default: str | None = None) -> str | None:
    val = os.getenv(name)
    return val if val is not None else default


def env_bool(name: str, default: bool = False) -> bool:
    raw = _raw_env(name, str(default).lower())
    if raw is None:
        return default
    return raw.lower() in _TRUE


def get_db_path() -> str:
    raw = _raw_env("BOOKREVIEWS_DB_PATH", DEFAULT_DB_PATH) or DEFAULT_DB_PATH
    if raw != MEMORY_DB and not os.path.isabs(raw):
        data_dir = os.getenv("BOOKREVIEWS_DATA_DIR")
        if data_dir:
            return os.path.join(data_dir, raw)
    return raw


def is_memory_db() -> bool:
    return get_db_path() == MEMORY_DB


def sql_echo() -> bool:
    return env_bool("BOOKREVIEWS_SQL_ECHO", default=False)


def log_level_name() -> str:
    return (_raw_env("BOOKREVIEWS_LOG_LEVEL", DEFAULT_LOG_LEVEL) or DEFAULT_LOG_LEVEL).upper()


@lru_cache(maxsize=1)
def metadata() -> dict:
    return {
        "name": APP_NAME,
        "version": APP_VERSION,
        "description": APP_DESCRIPTION,
    }


def summarize_runtime_config() -> dict:
    return {
        "db_path": get_db_path(),
        "log_level": log_level_name(),
        "sql_echo": sql_echo(),
    }


__all__ = [
    "APP_NAME",
    "APP_VERSION",
    "APP_DESCRIPTION",
    "MEMORY_DB",
    "env_bool",
    "get_db_path",
    "is_memory_db",
    "sql_echo",
    "log_level_name",
    "metadata",
    "summarize_runtime_config",
]
