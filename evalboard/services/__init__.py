"""
Services module for EvalBoard.

Service classes are imported from their own modules; importing them here
would be circular (repositories import services.snowflake).
"""

from evalboard.services.cache import get_cache, reset_cache
from evalboard.services.redis_cache import RedisCache
from evalboard.services.snowflake import get_snowflake_connection

__all__ = [
    "get_cache",
    "reset_cache",
    "RedisCache",
    "get_snowflake_connection",
]
