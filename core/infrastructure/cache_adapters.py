"""
Cache adapter implementations.

Provides the Django cache implementation of CachePort.
"""

import logging
from typing import Any, Optional

from asgiref.sync import sync_to_async
from django.core.cache import cache

from core.domain.exceptions import StoreError, StoreErrorKind
from core.infrastructure.cache import CachePort

logger = logging.getLogger(__name__)


class DjangoCacheAdapter(CachePort):
    """
    Django cache adapter implementing CachePort.

    Uses Django's cache framework (Redis in deployed settings, local memory
    in tests). By default read and write failures are logged and degrade to
    a miss. A strict adapter raises StoreError(UNAVAILABLE) instead; use it
    for state that must not be lost silently, such as revoked tokens.
    """

    def __init__(self, strict: bool = False):
        """
        Initialize adapter.

        Args:
            strict: Raise on cache failures instead of degrading to a miss
        """
        self.strict = strict

    def _failed(self, action: str, key: str, error: Exception) -> None:
        logger.error("Error %s cache (%s): %s", action, key, error, exc_info=True)
        if self.strict:
            raise StoreError(
                StoreErrorKind.UNAVAILABLE, f"cache {action} {key}: {error}"
            ) from error

    async def get(self, key: str) -> Optional[Any]:
        """
        Get a value from cache.

        Args:
            key: Cache key

        Returns:
            Cached value or None if not found

        Raises:
            StoreError: If strict and the cache cannot be read
        """
        try:
            value = await sync_to_async(cache.get)(key)
        except Exception as e:  # pylint: disable=broad-exception-caught
            self._failed("reading", key, e)
            return None
        if value is not None:
            logger.debug("Cache hit: %s", key)
        else:
            logger.debug("Cache miss: %s", key)
        return value

    async def set(self, key: str, value: Any, timeout: Optional[int] = None) -> None:
        """
        Set a value in cache.

        Args:
            key: Cache key
            value: Value to cache
            timeout: Timeout in seconds (None for no expiration)

        Raises:
            StoreError: If strict and the cache cannot be written
        """
        try:
            await sync_to_async(cache.set)(key, value, timeout=timeout)
        except Exception as e:  # pylint: disable=broad-exception-caught
            self._failed("writing", key, e)
            return
        logger.debug("Cache set: %s (timeout=%s)", key, timeout)

    async def add(self, key: str, value: Any, timeout: Optional[int] = None) -> bool:
        """
        Set a value only if the key is absent.

        Args:
            key: Cache key
            value: Value to cache
            timeout: Timeout in seconds (None for no expiration)

        Returns:
            True if stored. A lenient adapter also returns True when the
            cache is unreachable, so a cache outage does not block writes

        Raises:
            StoreError: If strict and the cache cannot be written
        """
        try:
            added = await sync_to_async(cache.add)(key, value, timeout=timeout)
        except Exception as e:  # pylint: disable=broad-exception-caught
            self._failed("adding to", key, e)
            return True
        logger.debug("Cache add: %s (added=%s)", key, added)
        return bool(added)

    async def delete(self, key: str) -> None:
        """
        Delete a value from cache.

        Args:
            key: Cache key

        Raises:
            StoreError: If strict and the key cannot be deleted
        """
        try:
            await sync_to_async(cache.delete)(key)
        except Exception as e:  # pylint: disable=broad-exception-caught
            self._failed("deleting from", key, e)
            return
        logger.debug("Cache delete: %s", key)

    async def clear(self) -> None:
        """Clear every cache entry."""
        try:
            await sync_to_async(cache.clear)()
        except Exception as e:  # pylint: disable=broad-exception-caught
            self._failed("clearing", "*", e)
            return
        logger.debug("Cache cleared")


# Global cache instances
cache_adapter = DjangoCacheAdapter()
strict_cache_adapter = DjangoCacheAdapter(strict=True)
