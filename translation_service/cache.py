"""
Cache backends for the export cache.

Every backend exposes the same small interface (get/set/delete/delete_prefix).
Redis failures are reported as CacheException so callers can degrade to the
uncached path instead of failing the request.
"""

import logging
import re
import threading
import time
from typing import Callable, Dict, Optional

import redis

from translation_service.constants import (
    CACHE_BACKEND_MEMORY,
    CACHE_BACKEND_NONE,
    CACHE_BACKEND_REDIS,
)
from translation_service.exceptions import CacheException

logger = logging.getLogger(__name__)

# Characters with special meaning in Redis MATCH patterns
_REDIS_GLOB_CHARS = re.compile(r"([*?\[\]\\])")


def escape_redis_pattern(value: str) -> str:
    return _REDIS_GLOB_CHARS.sub(r"\\\1", value)


class CacheBackend:
    """Interface shared by the cache backends"""

    name = "base"

    def __init__(self):
        self._stats = {
            "hits": 0,
            "misses": 0,
            "sets": 0,
            "deletes": 0,
        }
        self._stats_lock = threading.Lock()

    def _count(self, stat: str, amount: int = 1) -> None:
        with self._stats_lock:
            self._stats[stat] += amount

    def get_stats(self) -> Dict:
        """Get cache statistics (hits, misses, sets, deletes)"""
        with self._stats_lock:
            return {**self._stats}

    def reset_stats(self) -> None:
        with self._stats_lock:
            for stat in self._stats:
                self._stats[stat] = 0

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str, ttl: int) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> bool:
        raise NotImplementedError

    def delete_prefix(self, prefix: str) -> int:
        raise NotImplementedError

    def info(self) -> Dict:
        return {"backend": self.name, "status": "enabled", "stats": self.get_stats()}


class NullCacheBackend(CacheBackend):
    """Stores nothing; every lookup is a miss"""

    name = CACHE_BACKEND_NONE

    def get(self, key):
        self._count("misses")
        return None

    def set(self, key, value, ttl):
        return None

    def delete(self, key):
        return False

    def delete_prefix(self, prefix):
        return 0

    def info(self):
        return {"backend": self.name, "status": "disabled"}


class MemoryCacheBackend(CacheBackend):
    """
    In-process cache: a lock-guarded dict of key -> (value, expires_at).

    Expired entries are dropped lazily on read and on prefix deletes.
    """

    name = CACHE_BACKEND_MEMORY

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        super().__init__()
        self._clock = clock
        self._entries: Dict[str, tuple] = {}
        self._lock = threading.Lock()

    def get(self, key):
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry[1] <= self._clock():
                del self._entries[key]
                entry = None

        if entry is None:
            self._count("misses")
            logger.debug(f"Cache MISS: {key}")
            return None

        self._count("hits")
        logger.debug(f"Cache HIT: {key}")
        return entry[0]

    def set(self, key, value, ttl):
        with self._lock:
            self._entries[key] = (value, self._clock() + ttl)
        self._count("sets")
        logger.debug(f"Cache SET: {key} (TTL: {ttl}s)")

    def delete(self, key):
        with self._lock:
            removed = self._entries.pop(key, None) is not None
        if removed:
            self._count("deletes")
            logger.debug(f"Cache DELETE: {key}")
        return removed

    def delete_prefix(self, prefix):
        with self._lock:
            keys = [key for key in self._entries if key.startswith(prefix)]
            for key in keys:
                del self._entries[key]
        if keys:
            self._count("deletes", len(keys))
            logger.debug(f"Cache DELETE: {prefix}* ({len(keys)} keys)")
        return len(keys)

    def __len__(self):
        with self._lock:
            now = self._clock()
            return sum(1 for _, expires_at in self._entries.values() if expires_at > now)

    def info(self):
        return {**super().info(), "keys": len(self)}


class RedisCacheBackend(CacheBackend):
    """Redis-backed cache, values stored with SETEX"""

    name = CACHE_BACKEND_REDIS

    def __init__(self, client):
        super().__init__()
        self.client = client

    @classmethod
    def from_url(cls, redis_url: str, socket_timeout: float = 2.0):
        client = redis.from_url(
            redis_url,
            decode_responses=True,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
        )
        return cls(client)

    def ping(self) -> bool:
        try:
            return bool(self.client.ping())
        except redis.RedisError as e:
            raise CacheException(f"Redis ping failed: {e}") from e

    def get(self, key):
        try:
            value = self.client.get(key)
        except redis.RedisError as e:
            raise CacheException(f"Cache get error for {key}: {e}") from e

        if value is None:
            self._count("misses")
            logger.debug(f"Cache MISS: {key}")
            return None

        self._count("hits")
        logger.debug(f"Cache HIT: {key}")
        return value

    def set(self, key, value, ttl):
        try:
            self.client.setex(key, ttl, value)
        except redis.RedisError as e:
            raise CacheException(f"Cache set error for {key}: {e}") from e
        self._count("sets")
        logger.debug(f"Cache SET: {key} (TTL: {ttl}s)")

    def delete(self, key):
        try:
            result = self.client.delete(key)
        except redis.RedisError as e:
            raise CacheException(f"Cache delete error for {key}: {e}") from e
        if result > 0:
            self._count("deletes")
            logger.debug(f"Cache DELETE: {key}")
        return result > 0

    def delete_prefix(self, prefix):
        pattern = escape_redis_pattern(prefix) + "*"
        try:
            keys = list(self.client.scan_iter(match=pattern))
            count = self.client.delete(*keys) if keys else 0
        except redis.RedisError as e:
            raise CacheException(f"Cache delete pattern error for {pattern}: {e}") from e
        if count:
            self._count("deletes", count)
            logger.info(f"Cache DELETE: {pattern} ({count} keys)")
        return count

    def info(self):
        try:
            key_count = self.client.dbsize()
        except redis.RedisError as e:
            return {"backend": self.name, "status": "error", "error": str(e)}
        return {**super().info(), "keys": key_count}


def build_cache_backend(cache_settings: Dict) -> CacheBackend:
    """
    Create the backend named in the `cache` settings section.

    An unreachable Redis at startup disables caching rather than failing
    the application.
    """
    backend = cache_settings.get("backend", CACHE_BACKEND_REDIS)

    if backend == CACHE_BACKEND_NONE:
        logger.info("Export cache disabled by configuration.")
        return NullCacheBackend()

    if backend == CACHE_BACKEND_MEMORY:
        logger.info("Export cache using in-process memory backend.")
        return MemoryCacheBackend()

    if backend == CACHE_BACKEND_REDIS:
        redis_url = cache_settings.get("redis_url")
        try:
            cache = RedisCacheBackend.from_url(redis_url)
            cache.ping()
            logger.info(f"Redis cache initialized at {redis_url}")
            return cache
        except CacheException as e:
            logger.warning(f"Redis cache initialization failed: {e}. Cache will be disabled.")
            return NullCacheBackend()

    raise ValueError(f"Unknown cache backend: {backend}")
