# src/objectstore/__init__.py
"""
objectstore - A three-tier key-value store.

Values are kept in an in-process map, an expiring cache tier and a durable
property tier. Reads come from the fastest tier holding the key; writes go
through to the durable tier, optionally populating the cache. Values are
stored as JSON text, with optional round-tripping of datetimes.
"""

from importlib.metadata import PackageNotFoundError, version

from . import serialization
from .config import StoreConfig, resolve_config
from .exceptions import (
    ConfigError,
    InvalidArgumentError,
    ObjectStoreError,
    SerializationError,
)
from .factory import (
    MemoryTierProvider,
    SQLiteTierProvider,
    StoreScope,
    TierProvider,
    create_store,
    get_default_provider,
    set_default_provider,
)
from .store import Store
from .tiers import (
    CacheTier,
    CacheTierConfig,
    MemoryCacheTier,
    MemoryPropertyTier,
    PropertyTier,
    PropertyTierConfig,
    SQLitePropertyTier,
)

try:
    __version__ = version("objectstore")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "__version__",
    # Store
    "Store",
    "StoreConfig",
    "StoreScope",
    "create_store",
    "resolve_config",
    "serialization",
    # Providers
    "MemoryTierProvider",
    "SQLiteTierProvider",
    "TierProvider",
    "get_default_provider",
    "set_default_provider",
    # Tiers
    "CacheTier",
    "CacheTierConfig",
    "MemoryCacheTier",
    "MemoryPropertyTier",
    "PropertyTier",
    "PropertyTierConfig",
    "SQLitePropertyTier",
    # Exceptions
    "ObjectStoreError",
    "ConfigError",
    "InvalidArgumentError",
    "SerializationError",
]
