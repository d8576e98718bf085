"""
Short-lived cache for store lookups.

Uses in-memory storage with TTL-based expiration. The TTL is the upper
bound on how stale a cached key or project can be, so a revoke or rotate
is observed within that window even without explicit invalidation.
"""

import time
from typing import Dict, Generic, Optional, TypeVar

T = TypeVar("T")


class LookupCache(Generic[T]):
    """
    In-memory TTL cache for positive lookup results.

    Only found values are cached; misses always go back to the store so
    newly issued keys work immediately. Expired entries are cleaned up on
    access.
    """

    def __init__(self, ttl_seconds: float = 2.0) -> None:
        """
        Initialize lookup cache.

        Args:
            ttl_seconds: Entry lifetime in seconds (0 disables caching)
        """
        self.ttl_seconds = ttl_seconds
        self._cache: Dict[str, tuple[T, float]] = {}

    @property
    def enabled(self) -> bool:
        return self.ttl_seconds > 0

    def _cleanup_expired(self) -> None:
        """Remove expired entries from cache."""
        now = time.monotonic()
        expired_keys = [
            key for key, (_, expiry) in self._cache.items() if expiry <= now
        ]
        for key in expired_keys:
            del self._cache[key]

    def get(self, key: str) -> Optional[T]:
        """
        Get a cached value.

        Args:
            key: Cache key

        Returns:
            Cached value, or None if missing or expired
        """
        if not self.enabled:
            return None
        self._cleanup_expired()
        entry = self._cache.get(key)
        if entry is None:
            return None
        return entry[0]

    def set(self, key: str, value: T) -> None:
        """
        Cache a value for the configured TTL.

        Args:
            key: Cache key
            value: Value to cache
        """
        if not self.enabled:
            return
        self._cache[key] = (value, time.monotonic() + self.ttl_seconds)


    def __len__(self) -> int:
        self._cleanup_expired()
        return len(self._cache)
