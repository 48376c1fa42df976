# src/objectstore/tiers/__init__.py
"""
Storage Tiers Package.

Provides the capability contracts for the external tiers a store writes
through to, plus bundled implementations.

Tiers:
- **CacheTier** (warm): expiring key → string cache, TTL applied per write
- **PropertyTier** (durable): key → string storage with no expiry

Architecture::

    Store.map → CacheTier → PropertyTier
    (process)   (TTL)       (source of truth)
"""

from .base import CacheTier, PropertyTier
from .cache import (
    CacheItem,
    CacheTierConfig,
    MemoryCacheTier,
    create_cache_tier,
)
from .properties import (
    MemoryPropertyTier,
    PropertyTierConfig,
    SQLitePropertyTier,
    create_property_tier,
)

__all__ = [
    # Contracts
    "CacheTier",
    "PropertyTier",
    # Cache
    "CacheItem",
    "CacheTierConfig",
    "MemoryCacheTier",
    "create_cache_tier",
    # Properties
    "MemoryPropertyTier",
    "PropertyTierConfig",
    "SQLitePropertyTier",
    "create_property_tier",
]
