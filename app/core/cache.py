# /school-backend/app/core/cache.py

"""
Redis-backed cache used by every service for read-through caching.

Values are stored as JSON. Cache failures are logged and swallowed: the
database is the source of truth and a cache hiccup must never fail a
request. A disabled cache behaves as a permanent miss.
"""

import json
from typing import Any, Dict, Optional

import redis

from app.core import config
from app.core.logging_config import get_logger

logger = get_logger(__name__)

CACHE_TTL = {
    "default": config.CACHE_DEFAULT_TTL,
    "statistics": config.CACHE_STATISTICS_TTL,
    "permissions": config.CACHE_DEFAULT_TTL,
}


class CacheManager:
    """Manages Redis caching for entity and collection reads."""

    def __init__(self, redis_client=None, enabled: bool = True, default_ttl: int = CACHE_TTL["default"]):
        self.redis = redis_client
        self.enabled = enabled and redis_client is not None
        self.default_ttl = default_ttl
        self.hits = 0
        self.misses = 0

    def _serialize(self, data: Any) -> str:
        return json.dumps(data, default=str)

    def _deserialize(self, data: Optional[str]) -> Any:
        try:
            return json.loads(data) if data else None
        except (TypeError, ValueError) as e:
            logger.error(f"Error deserializing cached data: {e}")
            return None

    def get(self, key: str) -> Optional[Any]:
        """Get data from cache. Returns None on a miss or on any cache error."""
        if not self.enabled:
            return None
        try:
            cached = self.redis.get(key)
        except redis.RedisError as e:
            logger.error(f"Error getting cache key {key}: {e}")
            self.misses += 1
            return None
        if cached is None:
            self.misses += 1
            return None
        self.hits += 1
        return self._deserialize(cached)

    def set(self, key: str, data: Any, ttl: Optional[int] = None) -> bool:
        """Set data in cache with TTL (seconds)."""
        if not self.enabled:
            return False
        try:
            return bool(self.redis.setex(key, ttl or self.default_ttl, self._serialize(data)))
        except (redis.RedisError, TypeError, ValueError) as e:
            logger.error(f"Error setting cache key {key}: {e}")
            return False

    def delete(self, *keys: str) -> int:
        """Delete one or more cache keys. Returns how many were removed."""
        keys = [key for key in keys if key]
        if not self.enabled or not keys:
            return 0
        try:
            return int(self.redis.delete(*keys))
        except redis.RedisError as e:
            logger.error(f"Error deleting cache keys {keys}: {e}")
            return 0

    def has(self, key: str) -> bool:
        if not self.enabled:
            return False
        try:
            return bool(self.redis.exists(key))
        except redis.RedisError as e:
            logger.error(f"Error checking cache key {key}: {e}")
            return False

    def invalidate_pattern(self, pattern: str) -> int:
        """Invalidate all keys matching a glob pattern, e.g. `permissions:*`."""
        if not self.enabled:
            return 0
        try:
            keys = list(self.redis.scan_iter(match=pattern))
            if keys:
                return int(self.redis.delete(*keys))
            return 0
        except redis.RedisError as e:
            logger.error(f"Error invalidating pattern {pattern}: {e}")
            return 0

    def flush(self) -> bool:
        if not self.enabled:
            return False
        try:
            self.redis.flushdb()
            return True
        except redis.RedisError as e:
            logger.error(f"Error flushing cache: {e}")
            return False

    def stats(self) -> Dict[str, Any]:
        keys = 0
        if self.enabled:
            try:
                keys = int(self.redis.dbsize())
            except redis.RedisError as e:
                logger.error(f"Error reading cache size: {e}")
        return {"enabled": self.enabled, "hits": self.hits, "misses": self.misses, "keys": keys}


_cache_manager: Optional[CacheManager] = None


def get_cache() -> CacheManager:
    """Returns the process-wide cache manager, creating the Redis client lazily."""
    global _cache_manager
    if _cache_manager is None:
        client = None
        if config.CACHE_ENABLED:
            client = redis.Redis.from_url(config.REDIS_URL, decode_responses=True)
        _cache_manager = CacheManager(client, enabled=config.CACHE_ENABLED)
    return _cache_manager


def set_cache(manager: Optional[CacheManager]) -> None:
    """Replaces the process-wide cache manager (used at startup and in tests)."""
    global _cache_manager
    _cache_manager = manager
