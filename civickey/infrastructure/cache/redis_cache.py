"""Redis-based cache for municipality configs and admin session activity.

Values are stored as JSON with a TTL. When Redis is disabled or
unreachable every operation is a no-op (get returns None), so callers
fall through to the document store. One reconnect is attempted on a
connection error before giving up on the operation.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import redis.asyncio as redis

from civickey.core.config import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CacheService:
    """Async Redis cache with TTL support.

    Call connect() at startup and disconnect() at shutdown (done by the
    application context).
    """

    def __init__(
        self, settings: Settings, redis_client: redis.Redis | None = None
    ) -> None:
        """Initialize cache service.

        Args:
            settings: Connection settings (host, port, db, password).
            redis_client: Optional Redis client for testing or DI.
        """
        self.settings = settings
        self.redis = redis_client
        self._connected = redis_client is not None

    async def connect(self) -> None:
        """Establish Redis connection. Failure leaves the cache disabled."""
        if self.redis is not None:
            return
        try:
            self.redis = redis.Redis(
                host=self.settings.redis_host,
                port=self.settings.redis_port,
                db=self.settings.redis_db,
                password=(
                    self.settings.redis_password.get_secret_value()
                    if self.settings.redis_password
                    else None
                ),
                decode_responses=True,
                socket_connect_timeout=5,
                socket_keepalive=True,
            )
            await self.redis.ping()
            self._connected = True
            logger.info(
                "Redis cache connected: %s:%s",
                self.settings.redis_host,
                self.settings.redis_port,
            )
        except (redis.ConnectionError, redis.TimeoutError) as e:
            logger.warning("Redis connection failed: %s. Cache disabled.", e)
            self._connected = False
            self.redis = None

    async def disconnect(self) -> None:
        """Close Redis connection. Call on app shutdown."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None
            self._connected = False
            logger.info("Redis cache disconnected")

    async def _reconnect(self) -> bool:
        """Drop the current connection and connect again. Returns True if reconnected."""
        if self.redis is None:
            return False
        try:
            await self.redis.aclose()
        except redis.RedisError:
            logger.debug("Error closing stale Redis connection", exc_info=True)
        self.redis = None
        self._connected = False
        await self.connect()
        return self._connected

    def is_available(self) -> bool:
        """Return True if Redis is connected and usable."""
        return self._connected and self.redis is not None

    async def _run(
        self,
        op_name: str,
        key: str,
        op: Callable[[redis.Redis], Awaitable[T]],
        default: T,
    ) -> T:
        """Run op against Redis, retrying once after a reconnect."""
        if not self.is_available() or self.redis is None:
            return default
        try:
            return await op(self.redis)
        except (redis.ConnectionError, redis.TimeoutError):
            if await self._reconnect() and self.redis is not None:
                try:
                    return await op(self.redis)
                except redis.RedisError:
                    logger.exception("Cache %s error for %s after reconnect", op_name, key)
                    return default
            logger.warning("Cache %s unavailable for %s (Redis disconnected)", op_name, key)
            return default
        except redis.RedisError:
            logger.exception("Cache %s error for %s", op_name, key)
            return default

    async def get(self, key: str) -> Any | None:
        """Return cached value (JSON-deserialized) or None if missing/unavailable."""

        async def op(client: redis.Redis) -> Any | None:
            value = await client.get(key)
            if value is None:
                logger.debug("Cache MISS: %s", key)
                return None
            logger.debug("Cache HIT: %s", key)
            return json.loads(value)

        return await self._run("get", key, op, None)

    async def set(self, key: str, value: Any, ttl: int | float | None = 300) -> bool:
        """Store value with TTL in seconds. Returns True on success."""
        serialized = json.dumps(value, default=str)
        seconds = max(1, int(ttl or 300))

        async def op(client: redis.Redis) -> bool:
            await client.setex(key, seconds, serialized)
            logger.debug("Cache SET: %s (TTL: %ss)", key, seconds)
            return True

        return await self._run("set", key, op, False)

    async def delete(self, key: str) -> bool:
        """Remove key from cache. Returns True if the command ran."""

        async def op(client: redis.Redis) -> bool:
            await client.delete(key)
            logger.debug("Cache DELETE: %s", key)
            return True

        return await self._run("delete", key, op, False)

    async def delete_pattern(self, pattern: str) -> int:
        """Delete all keys matching pattern using SCAN + batched UNLINK (non-blocking)."""
        chunk_size = 500

        async def op(client: redis.Redis) -> int:
            deleted = 0
            chunk: list[str] = []
            async for key in client.scan_iter(match=pattern):
                chunk.append(key)
                if len(chunk) >= chunk_size:
                    deleted += int(await client.unlink(*chunk) or 0)
                    chunk = []
            if chunk:
                deleted += int(await client.unlink(*chunk) or 0)
            if deleted:
                logger.info("Cache INVALIDATE: %s (%s keys)", pattern, deleted)
            return deleted

        return await self._run("delete_pattern", pattern, op, 0)
