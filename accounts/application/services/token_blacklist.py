"""
Token blacklist service.

Revoked tokens are kept in the cache under their SHA-256 digest until
they would have expired anyway.
"""
import hashlib
import logging

from core.infrastructure.cache import CachePort

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "auth:blacklist:"


class TokenBlacklist:
    """
    Set of revoked tokens backed by the cache.

    Give it a strict cache: a lost write or a failed read must surface as
    StoreError, never as "not revoked".
    """

    def __init__(self, cache: CachePort):
        """Initialize blacklist with a cache port."""
        self.cache = cache

    @staticmethod
    def _cache_key(token: str) -> str:
        return CACHE_KEY_PREFIX + hashlib.sha256(token.encode("utf-8")).hexdigest()

    async def add(self, token: str, ttl: int) -> None:
        """
        Revoke a token.

        Args:
            token: Encoded token
            ttl: Seconds to remember the revocation

        Raises:
            StoreError: If the revocation cannot be recorded
        """
        key = self._cache_key(token)
        await self.cache.set(key, True, timeout=ttl)
        logger.info("Token blacklisted (digest %s...)", key[len(CACHE_KEY_PREFIX):][:12])

    async def contains(self, token: str) -> bool:
        """
        Return True if the token has been revoked.

        Raises:
            StoreError: If the blacklist cannot be read
        """
        return bool(await self.cache.get(self._cache_key(token)))
