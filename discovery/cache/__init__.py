"""
Cache module for Fanaara Discovery
Provides Redis-based caching with TTL plus durable named records
"""

from .manager import CacheManager
from .config import CacheConfig

__all__ = [
    'CacheManager',
    'CacheConfig'
]
