"""Cache: Redis service and bounded in-process TTL cache.

Key format lives in civickey.core.cache_keys.
"""

from civickey.infrastructure.cache.memory_cache import MemoryCache
from civickey.infrastructure.cache.redis_cache import CacheService

__all__ = ["CacheService", "MemoryCache"]
