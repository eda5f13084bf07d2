"""Application configuration and constants."""
from __future__ import annotations

import os
from dataclasses import dataclass


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name)
    return value if value is not None else default


def _get_flag(name: str, default: str) -> bool:
    return _get_env(name, default).lower() in {"1", "true", "yes"}


@dataclass(frozen=True)
class Settings:
    """Simple settings container with environment variable overrides."""

    catalog_path: str = _get_env("CATALOG_PATH", "data/products.json")
    persist_catalog: bool = _get_flag("PERSIST_CATALOG", "false")
    load_on_startup: bool = _get_flag("LOAD_ON_STARTUP", "true")
    default_results: int = int(_get_env("DEFAULT_RESULTS", "50"))
    max_results: int = int(_get_env("MAX_RESULTS", "100"))
    suggestion_search_limit: int = int(_get_env("SUGGESTION_SEARCH_LIMIT", "50"))
    fuzzy_threshold: int = int(_get_env("FUZZY_THRESHOLD", "2"))
    min_stock_for_boost: int = int(_get_env("MIN_STOCK_FOR_BOOST", "1"))
    fuzzy_scan_limit: int = int(_get_env("FUZZY_SCAN_LIMIT", "20000"))
    cache_backend: str = _get_env("CACHE_BACKEND", "redis")
    redis_host: str = _get_env("REDIS_HOST", "localhost")
    redis_port: int = int(_get_env("REDIS_PORT", "6379"))
    cache_ttl_seconds: int = int(_get_env("CACHE_TTL_SECONDS", "300"))
    log_level: str = _get_env("LOG_LEVEL", "INFO")


settings = Settings()
