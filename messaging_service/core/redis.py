"""
Redis connection management and the cache service backing token revocation.
"""
import asyncio
import json
from typing import Any, Optional
import redis.asyncio as redis
from redis.asyncio import ConnectionPool
from redis.exceptions import RedisError
import structlog

from .config import settings
from .exceptions import StorageError

logger = structlog.get_logger()


class RedisManager:
    """Redis connection manager with connection pooling."""

    def __init__(self):
        self._pool: Optional[ConnectionPool] = None
        self._client: Optional[redis.Redis] = None

    async def initialize(self):
        """Initialize Redis connection pool and verify it answers."""
        redis_kwargs = {
            "max_connections": settings.REDIS_POOL_SIZE,
            "retry_on_timeout": True,
            "socket_keepalive": True,
            "health_check_interval": 0,
        }

        # Only add password if not already in URL
        if settings.REDIS_PASSWORD and "@" not in settings.REDIS_URL:
            redis_kwargs["password"] = settings.REDIS_PASSWORD

        self._pool = ConnectionPool.from_url(settings.REDIS_URL, **redis_kwargs)
        self._client = redis.Redis(connection_pool=self._pool)

        try:
            await asyncio.wait_for(self._client.ping(), timeout=5.0)
            logger.info("Redis connection initialized and tested successfully")
        except asyncio.TimeoutError:
            logger.error("Redis connection test timed out")
            raise ConnectionError("Redis connection test timed out")
        except RedisError as e:
            logger.error("Failed to initialize Redis connection", error=str(e))
            raise

    async def close(self):
        """Close Redis connections."""
        if self._client:
            await self._client.aclose()
        if self._pool:
            await self._pool.disconnect()
        self._client = None
        self._pool = None
        logger.info("Redis connections closed")

    @property
    def client(self) -> redis.Redis:
        """Get Redis client instance."""
        if not self._client:
            raise RuntimeError("Redis client not initialized")
        return self._client

    async def health_check(self) -> bool:
        """Check Redis connection health."""
        if not self._client:
            logger.warning("Redis health check skipped - client not initialized")
            return False
        try:
            return bool(await self._client.ping())
        except RedisError as e:
            logger.error("Redis health check failed", error=str(e))
            return False


# Global Redis manager instance
redis_manager = RedisManager()


class CacheService:
    """
    Key/value cache with JSON serialization.

    Failures are raised as StorageError: the revocation set must never
    silently lose a write or report a revoked token as unknown.
    """

    def __init__(self, redis_client: redis.Redis, key_prefix: str = settings.REDIS_KEY_PREFIX):
        self.redis = redis_client
        self.key_prefix = key_prefix

    def _make_key(self, key: str) -> str:
        """Create prefixed cache key."""
        return f"{self.key_prefix}{key}"

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """Set value in cache; a positive ttl makes the key expire."""
        if isinstance(value, str):
            serialized_value = value
        else:
            serialized_value = json.dumps(value)

        try:
            if ttl:
                await self.redis.setex(self._make_key(key), ttl, serialized_value)
            else:
                await self.redis.set(self._make_key(key), serialized_value)
        except RedisError as e:
            logger.error("Cache set failed", key=key, error=str(e))
            raise StorageError("Cache unavailable") from e
        return True

    async def exists(self, key: str) -> bool:
        """Check if key exists in cache."""
        try:
            return await self.redis.exists(self._make_key(key)) > 0
        except RedisError as e:
            logger.error("Cache exists check failed", key=key, error=str(e))
            raise StorageError("Cache unavailable") from e

    async def ttl(self, key: str) -> int:
        """Remaining lifetime in seconds (-1 no expiry, -2 missing)."""
        try:
            return await self.redis.ttl(self._make_key(key))
        except RedisError as e:
            logger.error("Cache ttl lookup failed", key=key, error=str(e))
            raise StorageError("Cache unavailable") from e


def get_cache_service() -> CacheService:
    """Get cache service instance."""
    return CacheService(redis_manager.client)


async def initialize_redis():
    """Initialize Redis connection."""
    await redis_manager.initialize()


async def close_redis():
    """Close Redis connections."""
    await redis_manager.close()
