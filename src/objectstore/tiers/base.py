# src/objectstore/tiers/base.py
"""
Capability contracts for the two external tiers.

A :class:`~objectstore.store.Store` only talks to its tiers through these
protocols, so any object with the right methods can be injected: the bundled
in-memory and SQLite tiers, a client for a remote service, or a test fake.

Both tiers store strings only.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Protocol, runtime_checkable


@runtime_checkable
class PropertyTier(Protocol):
    """Durable key → string storage with no expiry (the source of truth)."""

    def get_property(self, key: str) -> str | None:
        """Return the stored string, or None if the key is absent."""
        ...

    def set_property(self, key: str, value: str) -> None:
        """Create or overwrite a single property."""
        ...

    def get_properties(self) -> dict[str, str]:
        """Return every stored key/value pair."""
        ...

    def set_properties(self, properties: Mapping[str, str]) -> None:
        """Create or overwrite several properties at once."""
        ...

    def get_keys(self) -> list[str]:
        """Return every stored key."""
        ...

    def delete_property(self, key: str) -> None:
        """Delete a property. No-op if the key does not exist."""
        ...

    def delete_all_properties(self) -> None:
        """Delete every property."""
        ...


@runtime_checkable
class CacheTier(Protocol):
    """Expiring key → string storage; entries vanish after their TTL."""

    def get(self, key: str) -> str | None:
        """Return the cached string, or None on miss or expiry."""
        ...

    def put(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        """Cache a single value."""
        ...

    def put_all(self, values: Mapping[str, str], ttl_seconds: int | None = None) -> None:
        """Cache several values with the same TTL."""
        ...

    def get_all(self, keys: Iterable[str]) -> dict[str, str]:
        """Return the cached values for ``keys``, omitting misses."""
        ...

    def remove(self, key: str) -> None:
        """Remove a single entry. No-op if absent."""
        ...

    def remove_all(self, keys: Iterable[str]) -> None:
        """Remove the given entries."""
        ...


__all__ = ["CacheTier", "PropertyTier"]
