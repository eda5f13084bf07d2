"""Search payload caching with Redis primary and in-memory fallback."""
from __future__ import annotations

import hashlib
import json
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

import redis

from .config import Settings

logger = logging.getLogger(__name__)

KEY_PREFIX = "catalog-search:"


class CacheBackend(Protocol):
    def get(self, key: str) -> Optional[Dict[str, Any]]: ...

    def set(self, key: str, value: Dict[str, Any], ttl: int) -> None: ...


def cache_key(version: int, query: str, limit: int) -> str:
    """Key scoped to the catalog version so mutations never serve stale payloads."""
    digest = hashlib.sha1(f"{query}\x00{limit}".encode("utf-8")).hexdigest()
    return f"{KEY_PREFIX}v{version}:{digest}"


@dataclass
class RedisCache:
    client: redis.Redis

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        try:
            data = self.client.get(key)
        except redis.RedisError as exc:
            logger.warning("Redis get failed: %s", exc)
            return None
        if not data:
            return None
        try:
            return json.loads(data)
        except json.JSONDecodeError:
            return None

    def set(self, key: str, value: Dict[str, Any], ttl: int) -> None:
        try:
            self.client.setex(key, ttl, json.dumps(value))
        except redis.RedisError as exc:
            logger.warning("Redis set failed: %s", exc)


def _namespace(key: str) -> str:
    return key.rpartition(":")[0]


class InMemoryCache:
    """Process-local cache holding entries of the most recently written namespace only.

    Keys from :func:`cache_key` carry the catalog version in their namespace, so
    the first write after a mutation drops every entry of the older version.
    Expired entries are swept on write.
    """

    def __init__(self) -> None:
        self._store: Dict[str, tuple[float, Dict[str, Any]]] = {}
        self._namespace: Optional[str] = None
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            value = self._store.get(key)
            if not value:
                return None
            expires_at, payload = value
            if expires_at < time.time():
                self._store.pop(key, None)
                return None
            return payload

    def set(self, key: str, value: Dict[str, Any], ttl: int) -> None:
        now = time.time()
        namespace = _namespace(key)
        with self._lock:
            if namespace != self._namespace:
                self._store.clear()
                self._namespace = namespace
            else:
                expired = [k for k, (expires_at, _) in self._store.items() if expires_at < now]
                for k in expired:
                    del self._store[k]
            self._store[key] = (now + ttl, value)


class NullCache:
    def get(self, key: str) -> Optional[Dict[str, Any]]:
        return None

    def set(self, key: str, value: Dict[str, Any], ttl: int) -> None:
        return None


def build_cache(config: Settings) -> CacheBackend:
    backend = config.cache_backend.lower()
    if backend == "none":
        return NullCache()
    if backend == "memory":
        return InMemoryCache()
    try:
        client = redis.Redis(host=config.redis_host, port=config.redis_port, decode_responses=False)
        client.ping()
        logger.info("Using Redis cache at %s:%s", config.redis_host, config.redis_port)
        return RedisCache(client)
    except redis.RedisError:
        logger.warning("Redis not available, using in-memory cache")
        return InMemoryCache()
