import redis
import os
import logging

# Redis Configuration
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")

# Redis Connection
redis_client = None
try:
    redis_client = redis.from_url(
        REDIS_URL,
        max_connections=int(os.getenv("REDIS_MAX_CONNECTIONS", "20")),
        decode_responses=True
    )
    # Test connection
    redis_client.ping()
    logging.info("Redis connection established successfully")
except Exception as e:
    logging.warning(f"Redis connection failed: {e}. Cache will be disabled.")
    redis_client = None

def get_redis():
    """Redis dependency for FastAPI"""
    return redis_client
