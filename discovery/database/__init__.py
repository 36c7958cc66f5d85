"""
Database module for Fanaara Discovery
Handles the Redis connection and the seed dataset
"""

from .connection import get_redis, redis_client, REDIS_URL
from .seeder import build_data_source, seed_entities, TRENDING_QUERIES

__all__ = [
    "get_redis", "redis_client", "REDIS_URL",
    "build_data_source", "seed_entities", "TRENDING_QUERIES"
]
