"""
Cache service interface for dependency abstraction.
"""

from typing import Any, Optional, Protocol, runtime_checkable


@runtime_checkable
class ICacheService(Protocol):
    """Protocol for cache service operations."""

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """
        Set value in cache.

        Args:
            key: Cache key
            value: Value to cache
            ttl: Time to live in seconds (optional)

        Returns:
            True if set successful
        """
        ...

    async def exists(self, key: str) -> bool:
        ...

    async def ttl(self, key: str) -> int:
        ...
