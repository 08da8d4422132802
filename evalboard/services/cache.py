"""
Cache Service Singleton - EvalBoard
evalboard/services/cache.py

Provides a singleton Redis cache instance and the cache keys used by the
services. Redis being down never fails a request: callers get None and read
through to Snowflake.
"""
import redis
import structlog
from typing import Optional
from evalboard.services.redis_cache import RedisCache
from evalboard.config import settings

logger = structlog.get_logger(__name__)

# Published leaderboard; invalidated on every publish
KEY_LEADERBOARD = "leaderboard:published"
TTL_LEADERBOARD = settings.CACHE_TTL_LEADERBOARD

# Singleton instance
_cache: Optional[RedisCache] = None


def get_cache() -> Optional[RedisCache]:
    """
    Get or create Redis cache instance.

    Returns:
        RedisCache instance if Redis is available, None otherwise.
    """
    global _cache
    if _cache is None:
        try:
            _cache = RedisCache()
            _cache.client.ping()
        except (redis.RedisError, ConnectionError) as e:
            logger.warning("cache_unavailable", error=str(e))
            _cache = None
    return _cache


def reset_cache() -> None:
    """
    Reset the cache singleton.

    Useful for testing or when Redis connection needs to be re-established.
    """
    global _cache
    _cache = None
