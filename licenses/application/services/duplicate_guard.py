"""
Duplicate submission guard.

Rejects identical create requests that arrive within a short window.
State lives in the Django cache, so the guard is shared across processes
when the cache backend is shared (Redis) and per-process otherwise.
"""
import hashlib
import logging
import time
from typing import Callable, Iterable, Optional

from core.infrastructure.cache import CachePort

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "license:create-lock:"


class DuplicateGuard:
    """Time-windowed set of recently seen request fingerprints."""

    def __init__(
        self,
        cache: CachePort,
        window_seconds: int = 10,
        clock: Optional[Callable[[], float]] = None,
    ):
        """
        Initialize guard.

        Args:
            cache: Cache port holding the fingerprints
            window_seconds: How long a fingerprint blocks identical requests
            clock: Time source returning seconds (time.time by default)
        """
        self.cache = cache
        self.window_seconds = window_seconds
        self.clock = clock or time.time

    @staticmethod
    def fingerprint(parts: Iterable[object]) -> str:
        """Join request fields into a fingerprint string."""
        return "|".join("" if part is None else str(part) for part in parts)

    def _cache_key(self, fingerprint: str) -> str:
        digest = hashlib.sha256(fingerprint.encode("utf-8")).hexdigest()
        return f"{CACHE_KEY_PREFIX}{digest}"

    async def should_reject(self, fingerprint: str) -> bool:
        """
        Check a fingerprint and register it when accepted.

        Args:
            fingerprint: Request fingerprint

        Returns:
            True if the same fingerprint was registered less than the
            window ago, False otherwise
        """
        key = self._cache_key(fingerprint)
        now = self.clock()

        if await self.cache.add(key, now, timeout=self.window_seconds):
            return False

        seen_at = await self.cache.get(key)
        if seen_at is not None and now - seen_at < self.window_seconds:
            logger.info("Duplicate create request rejected (key=%s)", key[-12:])
            return True

        await self.cache.set(key, now, timeout=self.window_seconds)
        return False
