"""
Redis Cache Manager for Fanaara Discovery
Handles TTL caching and durable named records
"""
import json
import hashlib
import logging
from typing import Any, Optional, List, Dict
from datetime import datetime
import redis
from .config import CacheConfig

logger = logging.getLogger(__name__)

class CacheManager:
    """Redis-based cache manager with TTL entries and durable records"""

    def __init__(self, redis_client: Optional[redis.Redis] = None):
        """Initialize cache manager with Redis client"""
        self.redis_client = redis_client
        self.config = CacheConfig()
        self.enabled = redis_client is not None

        if not self.enabled:
            logger.warning("Cache manager initialized without Redis client - caching disabled")

    def _generate_key(self, key_type: str, identifier: str) -> str:
        """Generate cache key with proper prefix"""
        prefix = self.config.get_key_prefix(key_type)
        return f"{prefix}{identifier}"

    def _serialize_data(self, data: Any) -> str:
        """Serialize data for Redis storage"""
        if isinstance(data, (dict, list)):
            return json.dumps(data, default=str)
        return str(data)

    def _deserialize_data(self, data: Any) -> Any:
        """Deserialize data from Redis"""
        if isinstance(data, bytes):
            data = data.decode("utf-8", errors="replace")
        try:
            return json.loads(data)
        except (json.JSONDecodeError, TypeError):
            return data

    def _hash_query(self, query_data: Dict[str, Any]) -> str:
        """Generate hash for query data to use as cache key"""
        query_str = json.dumps(query_data, sort_keys=True, default=str)
        return hashlib.md5(query_str.encode()).hexdigest()

    def set(self, key_type: str, identifier: str, data: Any, ttl: Optional[int] = None) -> bool:
        """Set cache value with TTL"""
        if not self.enabled:
            return False

        try:
            cache_key = self._generate_key(key_type, identifier)
            serialized_data = self._serialize_data(data)

            if ttl is None:
                ttl = self.config.get_ttl_for_key_type(key_type)

            result = self.redis_client.setex(cache_key, ttl, serialized_data)
            logger.debug(f"Cache SET: {cache_key} (TTL: {ttl}s)")
            return bool(result)
        except Exception as e:
            logger.error(f"Cache SET error for {key_type}:{identifier}: {e}")
            return False

    def get(self, key_type: str, identifier: str) -> Optional[Any]:
        """Get cache value"""
        if not self.enabled:
            return None

        try:
            cache_key = self._generate_key(key_type, identifier)
            data = self.redis_client.get(cache_key)

            if data is None:
                logger.debug(f"Cache MISS: {cache_key}")
                return None

            logger.debug(f"Cache HIT: {cache_key}")
            return self._deserialize_data(data)
        except Exception as e:
            logger.error(f"Cache GET error for {key_type}:{identifier}: {e}")
            return None

    def delete(self, key_type: str, identifier: str) -> bool:
        """Delete cache value"""
        if not self.enabled:
            return False

        try:
            cache_key = self._generate_key(key_type, identifier)
            result = self.redis_client.delete(cache_key)
            logger.debug(f"Cache DELETE: {cache_key}")
            return bool(result)
        except Exception as e:
            logger.error(f"Cache DELETE error for {key_type}:{identifier}: {e}")
            return False

    # Durable named records (no TTL)
    def read_record(self, name: str) -> Optional[Any]:
        """Read a durable record; None when absent, unreadable or caching is disabled"""
        return self.get("record", name)

    def write_record(self, name: str, value: Any) -> bool:
        """Write a durable record as JSON without expiry"""
        if not self.enabled:
            return False

        try:
            record_key = self._generate_key("record", name)
            result = self.redis_client.set(record_key, self._serialize_data(value))
            logger.debug(f"Record WRITE: {record_key}")
            return bool(result)
        except Exception as e:
            logger.warning(f"Record WRITE failed for {name}: {e}")
            return False

    def delete_record(self, name: str) -> bool:
        """Remove a durable record"""
        return self.delete("record", name)

    # Leaderboard-specific methods
    def cache_leaderboard(self, selector_key: str, items: List[Dict], ttl: Optional[int] = None) -> bool:
        """Cache a generated leaderboard under its selector hash"""
        cache_data = {
            "selector": selector_key,
            "items": items,
            "cached_at": datetime.now().isoformat(),
            "count": len(items)
        }
        return self.set("leaderboard", self._hash_query({"selector": selector_key}), cache_data, ttl)

    def get_cached_leaderboard(self, selector_key: str) -> Optional[Dict]:
        """Get a cached leaderboard by selector hash"""
        return self.get("leaderboard", self._hash_query({"selector": selector_key}))

    # Health and monitoring
    def health_check(self) -> Dict[str, Any]:
        """Check cache health and return status"""
        if not self.enabled:
            return {"status": "disabled", "redis_available": False}

        try:
            # Test basic operations
            test_key = "health_check_test"
            self.redis_client.setex(test_key, 10, "test")
            result = self._deserialize_data(self.redis_client.get(test_key))
            self.redis_client.delete(test_key)

            # Get Redis info
            info = self.redis_client.info()

            return {
                "status": "healthy" if result == "test" else "error",
                "redis_available": True,
                "connected_clients": info.get("connected_clients", 0),
                "used_memory_human": info.get("used_memory_human", "unknown")
            }
        except Exception as e:
            logger.error(f"Cache health check failed: {e}")
            return {
                "status": "error",
                "redis_available": False,
                "error": str(e)
            }
