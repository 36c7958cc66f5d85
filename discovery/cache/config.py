"""
Cache configuration settings
"""
import os


class CacheConfig:
    """Configuration class for cache and durable record settings"""

    # Default TTL values (in seconds)
    DEFAULT_TTL = int(os.getenv("CACHE_DEFAULT_TTL", "3600"))  # 1 hour
    LEADERBOARD_TTL = int(os.getenv("LEADERBOARD_CACHE_TTL", "900"))  # 15 minutes

    # Cache key prefixes
    RECORD_PREFIX = "record:"
    LEADERBOARD_PREFIX = "leaderboard:"

    # Durable record keys
    HISTORY_RECORD_KEY = os.getenv("HISTORY_RECORD_KEY", "fanaara.search.history.v2")
    SAVED_RECORD_KEY = os.getenv("SAVED_RECORD_KEY", "fanaara.search.saved.v2")

    @classmethod
    def get_ttl_for_key_type(cls, key_type: str) -> int:
        """Get TTL based on key type"""
        ttl_map = {
            "leaderboard": cls.LEADERBOARD_TTL,
        }
        return ttl_map.get(key_type, cls.DEFAULT_TTL)

    @classmethod
    def get_key_prefix(cls, key_type: str) -> str:
        """Get key prefix based on type"""
        prefix_map = {
            "record": cls.RECORD_PREFIX,
            "leaderboard": cls.LEADERBOARD_PREFIX,
        }
        return prefix_map.get(key_type, "")
