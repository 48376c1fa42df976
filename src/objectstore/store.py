# src/objectstore/store.py
"""
Tiered Store - local map, cache tier and durable property tier.

Every store reads through three tiers in a fixed order::

    map (process) → cache tier (TTL) → property tier (durable)

Reads return from the earliest tier holding the key and fill the faster
tiers on the way back. Writes always land in the local map and, unless the
store is in manual mode, go on to the property tier (and the cache tier when
``skip_cache=False``).

Values in the local map are kept in their native form; they are only
serialized when they leave the process.

Usage:
    store = create_store("script")

    # warm the local map at start-up
    store.load()

    store.set("key1", {"a": 1})
    store.get("key1")  # {'a': 1}, straight from the local map

    # buffered writes
    manual = create_store("script", {"manual": True})
    manual.set("key2", [1, 2, 3])
    manual.persist()

A store is not thread-safe. Nothing detects changes another process makes to
the property tier; :meth:`Store.load` is the only way to resynchronize.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import TYPE_CHECKING, Any

from . import serialization
from .config import StoreConfig, resolve_config
from .exceptions import InvalidArgumentError, SerializationError
from .tiers.base import CacheTier, PropertyTier

if TYPE_CHECKING:
    from .factory import StoreScope

logger = logging.getLogger(__name__)


def _require_string(name: str, value: Any) -> None:
    if not serialization.is_string(value):
        raise InvalidArgumentError(name, f"Expected a string, got {type(value).__name__}.")


class Store:
    """A key-value store layered over a cache tier and a durable property tier.

    Use :func:`~objectstore.factory.create_store` (or the ``script_store``,
    ``document_store`` and ``user_store`` constructors) to get one bound to a
    scope. The constructor can also be called directly with any tier objects
    satisfying the tier protocols.

    Attributes:
        map: Local tier; key → native (deserialized) value.
        props: The durable property tier handle.
        cache: The cache tier handle.
    """

    utils = serialization

    def __init__(
        self,
        props: PropertyTier,
        cache: CacheTier,
        config: Mapping[str, Any] | StoreConfig | None = None,
        scope: StoreScope | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            props: Durable property tier.
            cache: Expiring cache tier.
            config: Raw options or a resolved ``StoreConfig``.
            scope: The scope the tiers belong to, if any.

        Raises:
            ConfigError: If ``config`` is invalid.
        """
        self._config = resolve_config(config)
        self._scope = scope
        self.props = props
        self.cache = cache
        self.map: dict[str, Any] = {}

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def script_store(cls, config: Mapping[str, Any] | None = None) -> Store:
        """Create a store bound to the script-wide scope."""
        from .factory import create_store

        return create_store("script", config)

    @classmethod
    def document_store(cls, config: Mapping[str, Any] | None = None) -> Store:
        """Create a store bound to the document-wide scope."""
        from .factory import create_store

        return create_store("document", config)

    @classmethod
    def user_store(cls, config: Mapping[str, Any] | None = None) -> Store:
        """Create a store bound to the user-wide scope."""
        from .factory import create_store

        return create_store("user", config)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def config(self) -> StoreConfig:
        """The resolved, read-only configuration."""
        return self._config

    @property
    def scope(self) -> StoreScope | None:
        return self._scope

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def serialize_pass(self, value: Any) -> Any:
        """Serialize ``value`` when ``jsons`` is on, otherwise pass it through."""
        if self._config.jsons:
            return serialization.serialize(value, self._config.dates)
        return value

    def deserialize_pass(self, text: str) -> Any:
        """Decode a stored string when ``jsons`` is on, otherwise pass it through."""
        if self._config.jsons:
            return serialization.deserialize(text, self._config.dates)
        return text

    def _serialize_for_tier(self, key: str, value: Any) -> str:
        serialized = self.serialize_pass(value)
        if not serialization.is_string(serialized):
            raise SerializationError(key, "value must be string")
        return serialized

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def load(self) -> None:
        """Copy every property from the durable tier into the local map.

        Existing local entries with the same keys are overwritten. The cache
        tier is not touched.
        """
        properties = self.props.get_properties()
        for key, text in properties.items():
            self.map[key] = self.deserialize_pass(text)
        logger.debug(f"Loaded {len(properties)} properties into the local map")

    def set(self, key: str, value: Any, skip_cache: bool = True) -> None:
        """Store ``value`` at ``key``.

        Outside manual mode the value is also written to the property tier,
        and to the cache tier when ``skip_cache`` is False.

        Args:
            key: The identifier; must be a string.
            value: The value to store.
            skip_cache: If True (the default), don't write to the cache tier.

        Raises:
            InvalidArgumentError: If ``key`` is not a string.
            SerializationError: If the value cannot be written as a string
                (``jsons=False`` with a non-string value).
        """
        _require_string("key", key)
        self.map[key] = value
        if self._config.manual:
            return

        serialized = self._serialize_for_tier(key, value)
        if not skip_cache:
            self.cache.put(key, serialized, self._config.expiry)
        self.props.set_property(key, serialized)

    def get(self, key: str, skip_cache: bool = True) -> Any:
        """Return the value stored at ``key``, or None if no tier has it.

        Args:
            key: The key to look up; must be a string.
            skip_cache: If True (the default), don't read from the cache tier.

        Raises:
            InvalidArgumentError: If ``key`` is not a string.
        """
        _require_string("key", key)
        if key in self.map:
            return self.map[key]

        if not skip_cache:
            cached = self.cache.get(key)
            if cached is not None:
                value = self.deserialize_pass(cached)
                self.map[key] = value
                return value

        text = self.props.get_property(key)
        if text is None:
            return None

        value = self.deserialize_pass(text)
        self.map[key] = value
        self.cache.put(key, text, self._config.expiry)
        return value

    def persist(self, skip_cache: bool = True) -> None:
        """Write every entry in the local map to the external tiers.

        Args:
            skip_cache: If True (the default), only the property tier is written.

        Raises:
            SerializationError: If any entry cannot be written as a string.
        """
        batch = {key: self._serialize_for_tier(key, value) for key, value in self.map.items()}
        if not skip_cache:
            self.cache.put_all(batch, self._config.expiry)
        self.props.set_properties(batch)
        logger.debug(f"Persisted {len(batch)} entries (skip_cache={skip_cache})")

    def get_keys(self) -> list[str]:
        """Return the keys stored in the durable property tier."""
        return list(self.props.get_keys())

    def get_all(self) -> dict[str, Any]:
        """Return ``{key: get(key)}`` for every key in the property tier."""
        return {key: self.get(key) for key in self.get_keys()}

    def set_properties(self, properties: Mapping[str, Any], skip_cache: bool = True) -> None:
        """Store several values, writing them to the property tier in one batch.

        Args:
            properties: Mapping of key to value.
            skip_cache: If True (the default), don't write to the cache tier.

        Raises:
            InvalidArgumentError: If ``properties`` is not a mapping or a key
                is not a string.
            SerializationError: If a value cannot be written as a string.
                Nothing reaches the property tier in that case.
        """
        if not isinstance(properties, Mapping):
            raise InvalidArgumentError(
                "properties", f"Expected a mapping, got {type(properties).__name__}."
            )

        batch: dict[str, str] = {}
        for key, value in properties.items():
            _require_string("key", key)
            self.map[key] = value
            serialized = self._serialize_for_tier(key, value)
            if not skip_cache:
                self.cache.put(key, serialized, self._config.expiry)
            batch[key] = serialized
        self.props.set_properties(batch)

    def remove(self, key: str) -> None:
        """Delete ``key`` from the property tier, the cache tier and the local map.

        Raises:
            InvalidArgumentError: If ``key`` is not a string.
        """
        _require_string("key", key)
        self.props.delete_property(key)
        self.cache.remove(key)
        self.map.pop(key, None)

    def remove_all(self, keys: Iterable[str] | None = None) -> None:
        """Delete everything from the property tier and clear the local map.

        The cache tier can only remove keys it is given: ``keys`` when
        supplied, otherwise every key the property tier held before it was
        cleared.

        Clearing the local map also discards writes that a manual-mode
        store has not persisted yet.

        Args:
            keys: The keys to remove from the cache tier.

        Raises:
            InvalidArgumentError: If ``keys`` is a string or contains a non-string.
        """
        if keys is None:
            cache_keys = self.get_keys()
        else:
            if serialization.is_string(keys):
                raise InvalidArgumentError("keys", "Expected a sequence of strings, got a string.")
            cache_keys = list(keys)
            for key in cache_keys:
                _require_string("keys", key)

        self.cache.remove_all(cache_keys)
        self.props.delete_all_properties()
        self.map.clear()
        logger.debug(f"Removed all properties; cleared {len(cache_keys)} cache keys")

    def __contains__(self, key: str) -> bool:
        return key in self.map

    def __len__(self) -> int:
        return len(self.map)

    def __iter__(self) -> Iterator[str]:
        return iter(self.map)

    def __repr__(self) -> str:
        scope = self._scope.value if self._scope is not None else None
        return f"Store(scope={scope!r}, config={self._config!r}, local_keys={len(self.map)})"


__all__ = ["Store"]
