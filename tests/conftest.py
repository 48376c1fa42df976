# tests/conftest.py
"""
Pytest configuration and fixtures for objectstore tests.

Provides fresh in-memory tiers for every test, recording variants that keep
a log of the calls a store makes, and resets the process-wide tier provider
so scope-bound stores never leak data between tests.
"""

from typing import Any, Callable, Dict, List, Tuple

import pytest

from objectstore import Store, set_default_provider
from objectstore.tiers import MemoryCacheTier, MemoryPropertyTier


class RecordingPropertyTier(MemoryPropertyTier):
    """MemoryPropertyTier that records every call as ``(method, args)``."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.calls: List[Tuple[str, tuple]] = []

    def get_property(self, key):
        self.calls.append(("get_property", (key,)))
        return super().get_property(key)

    def set_property(self, key, value):
        self.calls.append(("set_property", (key, value)))
        return super().set_property(key, value)

    def get_properties(self):
        self.calls.append(("get_properties", ()))
        return super().get_properties()

    def set_properties(self, properties):
        self.calls.append(("set_properties", (dict(properties),)))
        return super().set_properties(properties)

    def get_keys(self):
        self.calls.append(("get_keys", ()))
        return super().get_keys()

    def delete_property(self, key):
        self.calls.append(("delete_property", (key,)))
        return super().delete_property(key)

    def delete_all_properties(self):
        self.calls.append(("delete_all_properties", ()))
        return super().delete_all_properties()


class RecordingCacheTier(MemoryCacheTier):
    """MemoryCacheTier that records every call as ``(method, args)``."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.calls: List[Tuple[str, tuple]] = []

    def get(self, key):
        self.calls.append(("get", (key,)))
        return super().get(key)

    def put(self, key, value, ttl_seconds=None):
        self.calls.append(("put", (key, value, ttl_seconds)))
        return super().put(key, value, ttl_seconds)

    def put_all(self, values, ttl_seconds=None):
        self.calls.append(("put_all", (dict(values), ttl_seconds)))
        return super().put_all(values, ttl_seconds)

    def get_all(self, keys):
        keys = list(keys)
        self.calls.append(("get_all", (keys,)))
        return super().get_all(keys)

    def remove(self, key):
        self.calls.append(("remove", (key,)))
        return super().remove(key)

    def remove_all(self, keys):
        keys = list(keys)
        self.calls.append(("remove_all", (keys,)))
        return super().remove_all(keys)


@pytest.fixture(autouse=True)
def reset_default_provider():
    """Give every test a fresh process-wide provider."""
    set_default_provider(None)
    yield
    set_default_provider(None)


@pytest.fixture
def props() -> RecordingPropertyTier:
    return RecordingPropertyTier()


@pytest.fixture
def cache() -> RecordingCacheTier:
    return RecordingCacheTier()


@pytest.fixture
def make_store(props, cache) -> Callable[..., Store]:
    """Build a store over the test's recording tiers with the given options."""

    def _make(config: Dict[str, Any] = None) -> Store:
        return Store(props=props, cache=cache, config=config)

    return _make
