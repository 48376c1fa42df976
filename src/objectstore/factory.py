# src/objectstore/factory.py
"""
Store factory and tier providers.

A store is bound to one of three scopes when it is created:

- ``script``: shared by everything running in this process
- ``document``: data tied to the current document
- ``user``: data tied to the current user

A :class:`TierProvider` hands out the property tier and cache tier for a
scope. Providers create tiers lazily and return the same pair for every
request of a scope, so all stores of one scope see the same data.

Usage:
    from objectstore import create_store

    store = create_store()                      # script scope, default options
    user = create_store("user", {"dates": True})

    # durable across restarts
    provider = SQLiteTierProvider("~/.local/share/myapp/store.db")
    store = create_store("script", provider=provider)
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from .config import StoreConfig, resolve_config
from .exceptions import ConfigError
from .store import Store
from .tiers.base import CacheTier, PropertyTier
from .tiers.cache import CacheTierConfig, MemoryCacheTier
from .tiers.properties import MemoryPropertyTier, PropertyTierConfig, SQLitePropertyTier

logger = logging.getLogger(__name__)


class StoreScope(str, Enum):
    """Durability/visibility domain of a store."""

    SCRIPT = "script"
    DOCUMENT = "document"
    USER = "user"

    @classmethod
    def parse(cls, value: StoreScope | str) -> StoreScope:
        """Convert a scope name (any case) to a ``StoreScope``.

        Raises:
            ConfigError: If ``value`` is not a known scope.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.lower())
            except ValueError:
                pass
        valid = ", ".join(s.value for s in cls)
        raise ConfigError(f"Unknown store scope: {value!r}. Expected one of: {valid}")


@runtime_checkable
class TierProvider(Protocol):
    """Source of the tier handles for each scope."""

    def get_properties(self, scope: StoreScope) -> PropertyTier:
        ...

    def get_cache(self, scope: StoreScope) -> CacheTier:
        ...


class MemoryTierProvider:
    """Provides in-memory tiers, one pair per scope, for the life of the provider."""

    def __init__(self, cache_config: CacheTierConfig | None = None) -> None:
        self._cache_config = cache_config
        self._properties: dict[StoreScope, PropertyTier] = {}
        self._caches: dict[StoreScope, CacheTier] = {}
        self._lock = threading.Lock()

    def _new_properties(self, scope: StoreScope) -> PropertyTier:
        return MemoryPropertyTier()

    def get_properties(self, scope: StoreScope) -> PropertyTier:
        with self._lock:
            if scope not in self._properties:
                self._properties[scope] = self._new_properties(scope)
                logger.debug(f"Created property tier for scope '{scope.value}'")
            return self._properties[scope]

    def get_cache(self, scope: StoreScope) -> CacheTier:
        with self._lock:
            if scope not in self._caches:
                self._caches[scope] = MemoryCacheTier(config=self._cache_config)
                logger.debug(f"Created cache tier for scope '{scope.value}'")
            return self._caches[scope]


class SQLiteTierProvider(MemoryTierProvider):
    """Provides SQLite property tiers (one table per scope) with in-memory caches.

    Args:
        db_path: SQLite database file shared by all scopes.
        cache_config: Optional configuration for the cache tiers.
    """

    def __init__(self, db_path: str, cache_config: CacheTierConfig | None = None) -> None:
        super().__init__(cache_config)
        self.db_path = db_path

    def _new_properties(self, scope: StoreScope) -> PropertyTier:
        return SQLitePropertyTier(
            PropertyTierConfig(db_path=self.db_path, table_name=f"{scope.value}_properties")
        )

    def close(self) -> None:
        """Close every SQLite connection opened by this provider."""
        with self._lock:
            for tier in self._properties.values():
                tier.close()
            self._properties.clear()


_default_provider: TierProvider | None = None
_default_provider_lock = threading.Lock()


def get_default_provider() -> TierProvider:
    """Return the process-wide provider, creating an in-memory one on first use."""
    global _default_provider
    with _default_provider_lock:
        if _default_provider is None:
            _default_provider = MemoryTierProvider()
        return _default_provider


def set_default_provider(provider: TierProvider | None) -> None:
    """Replace the process-wide provider. ``None`` resets to a fresh in-memory provider on next use."""
    global _default_provider
    with _default_provider_lock:
        _default_provider = provider


def create_store(
    scope: StoreScope | str = StoreScope.SCRIPT,
    config: Mapping[str, Any] | StoreConfig | None = None,
    provider: TierProvider | None = None,
) -> Store:
    """Create a store bound to ``scope``.

    Args:
        scope: ``"script"`` (default), ``"document"`` or ``"user"``.
        config: Store options (``jsons``, ``dates``, ``manual``, ``expiry``).
        provider: Where the tiers come from; defaults to the process-wide provider.

    Returns:
        A configured Store with an empty local map.

    Raises:
        ConfigError: If the scope or the options are invalid.
    """
    scope = StoreScope.parse(scope)
    config = resolve_config(config)
    provider = provider if provider is not None else get_default_provider()
    store = Store(
        props=provider.get_properties(scope),
        cache=provider.get_cache(scope),
        config=config,
        scope=scope,
    )
    logger.debug(f"Created {scope.value} store")
    return store


__all__ = [
    "MemoryTierProvider",
    "SQLiteTierProvider",
    "StoreScope",
    "TierProvider",
    "create_store",
    "get_default_provider",
    "set_default_provider",
]
