# src/objectstore/tiers/cache.py
"""
Memory Cache Tier - In-process expiring string cache.

This module provides a thread-safe in-memory implementation of the
:class:`~objectstore.tiers.base.CacheTier` contract. It supports:
- Per-write TTL expiration (default 600s, clamped to 21600s)
- An optional item limit with LRU eviction
- Periodic sweeping of expired entries
- Bulk put/get/remove
- Statistics tracking

One instance is shared by every store of a scope, so all access is
protected by an RLock.

Usage:
    cache = MemoryCacheTier(default_ttl_seconds=600)

    cache.put("settings", '{"theme": "dark"}', ttl_seconds=60)
    cache.get("settings")  # '{"theme": "dark"}'

    cache.put_all({"a": "1", "b": "2"})
    cache.get_all(["a", "b", "c"])  # {'a': '1', 'b': '2'}

    stats = cache.stats()
    print(f"Hit rate: {stats['hit_rate']:.2%}")
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, Field

from ..config import DEFAULT_EXPIRY_SECONDS, MAX_EXPIRY_SECONDS

logger = logging.getLogger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================


class CacheTierConfig(BaseModel):
    """Configuration for the memory cache tier.

    Attributes:
        max_items: Maximum number of entries to keep (0 = unlimited).
        default_ttl_seconds: TTL used when a write does not give one.
        max_ttl_seconds: Upper bound applied to every TTL.
        cleanup_interval_seconds: Minimum time between sweeps of expired entries.
    """

    max_items: int = Field(default=0, ge=0, description="Maximum number of entries (0=unlimited)")
    default_ttl_seconds: int = Field(
        default=DEFAULT_EXPIRY_SECONDS, ge=1, description="Default TTL in seconds"
    )
    max_ttl_seconds: int = Field(
        default=MAX_EXPIRY_SECONDS, ge=1, description="Largest TTL accepted in seconds"
    )
    cleanup_interval_seconds: int = Field(
        default=60, ge=1, le=3600, description="Interval between expired-entry sweeps"
    )


# =============================================================================
# DATA MODELS
# =============================================================================


@dataclass
class CacheItem:
    """A cached string and its expiry bookkeeping.

    Attributes:
        key: Cache key.
        value: The cached string.
        expires_at: Unix timestamp after which the entry is gone.
        created_at: Unix timestamp when the entry was written.
        last_accessed: Unix timestamp of the last read (LRU ordering).
    """

    key: str
    value: str
    expires_at: float
    created_at: float = field(default_factory=time.time)
    last_accessed: float = field(default_factory=time.time)

    def is_expired(self) -> bool:
        return time.time() > self.expires_at

    def touch(self) -> None:
        self.last_accessed = time.time()


# =============================================================================
# MEMORY CACHE TIER
# =============================================================================


class MemoryCacheTier:
    """In-memory expiring cache satisfying the ``CacheTier`` contract.

    Example:
        cache = MemoryCacheTier(max_items=1000)
        cache.put("user:1", '"alice"', ttl_seconds=300)
        cache.get("user:1")

    Attributes:
        max_items: Maximum number of entries (0 = unlimited).
        default_ttl_seconds: TTL for writes that do not specify one.
        max_ttl_seconds: TTLs above this are clamped down to it.
        cleanup_interval: Seconds between sweeps of expired entries.
    """

    def __init__(
        self,
        max_items: int = 0,
        default_ttl_seconds: int = DEFAULT_EXPIRY_SECONDS,
        max_ttl_seconds: int = MAX_EXPIRY_SECONDS,
        cleanup_interval_seconds: int = 60,
        config: CacheTierConfig | None = None,
    ) -> None:
        """Initialize the memory cache tier.

        Args:
            max_items: Maximum number of entries. Set to 0 for unlimited.
            default_ttl_seconds: TTL used when ``put`` gets no TTL.
            max_ttl_seconds: Largest TTL honoured.
            cleanup_interval_seconds: Seconds between sweeps of expired entries.
            config: Optional configuration object (overrides other params).
        """
        if config is not None:
            max_items = config.max_items
            default_ttl_seconds = config.default_ttl_seconds
            max_ttl_seconds = config.max_ttl_seconds
            cleanup_interval_seconds = config.cleanup_interval_seconds

        self.max_items = max_items
        self.default_ttl_seconds = default_ttl_seconds
        self.max_ttl_seconds = max_ttl_seconds
        self.cleanup_interval = cleanup_interval_seconds

        self._store: dict[str, CacheItem] = {}
        self._lock = threading.RLock()
        self._last_cleanup = time.time()
        self._stats = {
            "hits": 0,
            "misses": 0,
            "puts": 0,
            "removes": 0,
            "evictions": 0,
            "expirations": 0,
        }

        logger.debug(
            f"MemoryCacheTier initialized: max_items={max_items}, "
            f"default_ttl={default_ttl_seconds}s, max_ttl={max_ttl_seconds}s"
        )

    # -------------------------------------------------------------------------
    # Private Methods
    # -------------------------------------------------------------------------

    def _resolve_ttl(self, ttl_seconds: int | None) -> int:
        if ttl_seconds is None or ttl_seconds <= 0:
            return self.default_ttl_seconds
        return min(ttl_seconds, self.max_ttl_seconds)

    def _lookup(self, key: str) -> CacheItem | None:
        """Return the live item for ``key``, dropping it if it has expired."""
        item = self._store.get(key)
        if item is None:
            return None
        if item.is_expired():
            del self._store[key]
            self._stats["expirations"] += 1
            return None
        return item

    def _maybe_cleanup(self) -> None:
        """Sweep expired entries if the cleanup interval has passed."""
        if time.time() - self._last_cleanup > self.cleanup_interval:
            self._cleanup_expired()
            self._last_cleanup = time.time()

    def _cleanup_expired(self) -> int:
        """Drop every expired entry.

        Returns:
            Number of entries removed.
        """
        expired_keys = [k for k, item in self._store.items() if item.is_expired()]
        for key in expired_keys:
            del self._store[key]
            self._stats["expirations"] += 1

        if expired_keys:
            logger.debug(f"Cleaned up {len(expired_keys)} expired cache entries")
        return len(expired_keys)

    def _live_count(self) -> int:
        return sum(1 for item in self._store.values() if not item.is_expired())

    def _evict_lru(self) -> int:
        """Evict least recently used entries until below ``max_items``.

        Returns:
            Number of entries evicted.
        """
        overage = len(self._store) - self.max_items + 1
        if overage <= 0:
            return 0

        oldest = sorted(self._store.values(), key=lambda item: item.last_accessed)[:overage]
        for item in oldest:
            del self._store[item.key]
            self._stats["evictions"] += 1

        logger.debug(f"Evicted {len(oldest)} LRU cache entries")
        return len(oldest)

    def _put_locked(self, key: str, value: str, ttl: int) -> None:
        if not isinstance(key, str):
            raise TypeError(f"Cache key must be a string, got {type(key).__name__}")
        if not isinstance(value, str):
            raise TypeError(f"Cache value for '{key}' must be a string, got {type(value).__name__}")

        if self.max_items > 0 and key not in self._store and len(self._store) >= self.max_items:
            self._evict_lru()

        now = time.time()
        self._store[key] = CacheItem(key=key, value=value, expires_at=now + ttl, created_at=now)
        self._stats["puts"] += 1

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def get(self, key: str) -> str | None:
        """Get a cached string.

        Args:
            key: The key to retrieve.

        Returns:
            The cached value, or None if not found or expired.
        """
        with self._lock:
            self._maybe_cleanup()
            item = self._lookup(key)
            if item is None:
                self._stats["misses"] += 1
                return None
            item.touch()
            self._stats["hits"] += 1
            return item.value

    def put(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        """Cache a string value.

        Args:
            key: The key to store under.
            value: The string to cache.
            ttl_seconds: TTL override (None uses the default, clamped to the maximum).

        Raises:
            TypeError: If the key or value is not a string.
        """
        with self._lock:
            self._maybe_cleanup()
            self._put_locked(key, value, self._resolve_ttl(ttl_seconds))

    def put_all(self, values: Mapping[str, str], ttl_seconds: int | None = None) -> None:
        """Cache several string values with a shared TTL."""
        ttl = self._resolve_ttl(ttl_seconds)
        with self._lock:
            self._maybe_cleanup()
            for key, value in values.items():
                self._put_locked(key, value, ttl)
        logger.debug(f"Cached {len(values)} entries (ttl={ttl}s)")

    def get_all(self, keys: Iterable[str]) -> dict[str, str]:
        """Return the live cached values for ``keys``; misses are left out."""
        found: dict[str, str] = {}
        with self._lock:
            self._maybe_cleanup()
            for key in keys:
                item = self._lookup(key)
                if item is None:
                    self._stats["misses"] += 1
                    continue
                item.touch()
                self._stats["hits"] += 1
                found[key] = item.value
        return found

    def remove(self, key: str) -> None:
        """Remove an entry. Removing a missing key is a no-op."""
        with self._lock:
            if self._store.pop(key, None) is not None:
                self._stats["removes"] += 1

    def remove_all(self, keys: Iterable[str]) -> None:
        """Remove the given entries."""
        with self._lock:
            for key in keys:
                if self._store.pop(key, None) is not None:
                    self._stats["removes"] += 1

    def cleanup_expired(self) -> int:
        """Remove every expired entry now, regardless of the cleanup interval.

        Returns:
            Number of entries removed.
        """
        with self._lock:
            count = self._cleanup_expired()
            self._last_cleanup = time.time()
            return count

    def keys(self) -> list[str]:
        """Return the keys of all live entries."""
        with self._lock:
            return [k for k, item in self._store.items() if not item.is_expired()]

    def clear(self) -> int:
        """Remove every entry.

        Returns:
            Number of entries removed.
        """
        with self._lock:
            count = len(self._store)
            self._store.clear()
            logger.debug(f"Cleared {count} entries from memory cache")
            return count

    def stats(self) -> dict[str, Any]:
        """Get cache statistics.

        Returns:
            Dictionary containing:
            - item_count: Current number of live (unexpired) entries
            - max_items: Maximum allowed entries
            - hit_rate: Cache hit rate (0.0 to 1.0)
            - hits, misses, puts, removes, evictions, expirations: counters
        """
        with self._lock:
            total = self._stats["hits"] + self._stats["misses"]
            return {
                "item_count": self._live_count(),
                "max_items": self.max_items,
                "default_ttl_seconds": self.default_ttl_seconds,
                "hit_rate": self._stats["hits"] / total if total > 0 else 0.0,
                **self._stats.copy(),
            }

    def __len__(self) -> int:
        with self._lock:
            return self._live_count()

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return self._lookup(key) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())


# =============================================================================
# FACTORY FUNCTION
# =============================================================================


def create_cache_tier(
    config: CacheTierConfig | None = None,
    **kwargs: Any,
) -> MemoryCacheTier:
    """Factory function to create a memory cache tier.

    Args:
        config: Optional configuration object.
        **kwargs: Additional arguments passed to MemoryCacheTier.

    Returns:
        Configured MemoryCacheTier instance.
    """
    if config is not None:
        return MemoryCacheTier(config=config)
    return MemoryCacheTier(**kwargs)


__all__ = [
    "CacheItem",
    "CacheTierConfig",
    "MemoryCacheTier",
    "create_cache_tier",
]
