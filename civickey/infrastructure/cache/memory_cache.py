"""Bounded in-process TTL cache.

Same contract as CacheService (Redis) so either can back a component.
Entries expire after their TTL (monotonic clock); at capacity the least
recently used entry is evicted. No locking: the event loop is
single-threaded and entries are idempotent per key, so a race costs at
most one redundant lookup.
"""

from __future__ import annotations

import fnmatch
import logging
import time
from collections import OrderedDict
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)


class MemoryCache:
    """In-process cache with per-entry TTL and LRU eviction."""

    def __init__(
        self,
        max_entries: int = 1024,
        default_ttl: float = 300,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.max_entries = max_entries
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: OrderedDict[str, tuple[float, Any]] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def is_available(self) -> bool:
        return True

    async def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if expires_at <= self._clock():
            del self._entries[key]
            logger.debug("Cache EXPIRED: %s", key)
            return None
        self._entries.move_to_end(key)
        return value

    async def set(self, key: str, value: Any, ttl: int | float | None = None) -> bool:
        ttl = self.default_ttl if ttl is None else ttl
        self._entries[key] = (self._clock() + ttl, value)
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("Cache EVICT: %s", evicted)
        return True

    async def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    async def delete_pattern(self, pattern: str) -> int:
        keys = [k for k in self._entries if fnmatch.fnmatchcase(k, pattern)]
        for key in keys:
            del self._entries[key]
        return len(keys)

    async def clear_all(self) -> bool:
        self._entries.clear()
        return True
