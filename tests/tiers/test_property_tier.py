# tests/tiers/test_property_tier.py
"""
Tests for the durable property tiers.

The same contract checks run against the in-memory and the SQLite tier;
SQLite-specific tests cover persistence across connections and config
validation.
"""

import pytest
from pydantic import ValidationError

from objectstore.tiers import PropertyTier
from objectstore.tiers.properties import (
    MemoryPropertyTier,
    PropertyTierConfig,
    SQLitePropertyTier,
    create_property_tier,
)


@pytest.fixture(params=["memory", "sqlite"])
def tier(request, tmp_path):
    if request.param == "memory":
        yield MemoryPropertyTier()
        return
    sqlite_tier = SQLitePropertyTier(PropertyTierConfig(db_path=str(tmp_path / "props.db")))
    yield sqlite_tier
    sqlite_tier.close()


# =============================================================================
# CONTRACT
# =============================================================================


class TestPropertyTierContract:
    """Behavior every property tier shares."""

    def test_satisfies_protocol(self, tier):
        assert isinstance(tier, PropertyTier)

    def test_missing_key_returns_none(self, tier):
        assert tier.get_property("missing") is None

    def test_set_and_get(self, tier):
        tier.set_property("key", '"value"')
        assert tier.get_property("key") == '"value"'

    def test_overwrite(self, tier):
        tier.set_property("key", "one")
        tier.set_property("key", "two")
        assert tier.get_property("key") == "two"

    def test_bulk_set_and_get(self, tier):
        tier.set_properties({"a": "1", "b": "2"})

        assert tier.get_properties() == {"a": "1", "b": "2"}
        assert sorted(tier.get_keys()) == ["a", "b"]

    def test_bulk_set_rejects_non_strings_without_writing(self, tier):
        with pytest.raises(TypeError):
            tier.set_properties({"a": "1", "b": 2})
        assert tier.get_keys() == []

    def test_set_rejects_non_string(self, tier):
        with pytest.raises(TypeError):
            tier.set_property("key", {"not": "string"})

    def test_delete(self, tier):
        tier.set_properties({"a": "1", "b": "2"})
        tier.delete_property("a")

        assert tier.get_keys() == ["b"]

    def test_delete_missing_is_noop(self, tier):
        tier.delete_property("missing")
        assert tier.get_keys() == []

    def test_delete_all(self, tier):
        tier.set_properties({"a": "1", "b": "2"})
        tier.delete_all_properties()

        assert tier.get_properties() == {}

    def test_stats(self, tier):
        tier.set_property("a", "1")
        tier.get_property("a")
        tier.delete_property("a")

        stats = tier.stats()
        assert stats["writes"] == 1
        assert stats["reads"] == 1
        assert stats["deletes"] == 1


# =============================================================================
# MEMORY TIER
# =============================================================================


class TestMemoryPropertyTier:
    """In-memory specifics."""

    def test_initial_values(self):
        tier = MemoryPropertyTier({"a": "1"})

        assert tier.get_property("a") == "1"
        assert "a" in tier
        assert len(tier) == 1

    def test_get_properties_returns_copy(self):
        tier = MemoryPropertyTier({"a": "1"})
        tier.get_properties()["b"] = "2"

        assert tier.get_keys() == ["a"]


# =============================================================================
# SQLITE TIER
# =============================================================================


class TestSQLitePropertyTier:
    """SQLite specifics."""

    def test_survives_reconnect(self, tmp_path):
        config = PropertyTierConfig(db_path=str(tmp_path / "props.db"))
        first = SQLitePropertyTier(config)
        first.set_properties({"a": "1", "b": "2"})
        first.close()

        second = SQLitePropertyTier(config)
        try:
            assert second.get_properties() == {"a": "1", "b": "2"}
        finally:
            second.close()

    def test_tables_are_isolated(self, tmp_path):
        db_path = str(tmp_path / "props.db")
        script = SQLitePropertyTier(PropertyTierConfig(db_path=db_path, table_name="script_properties"))
        user = SQLitePropertyTier(PropertyTierConfig(db_path=db_path, table_name="user_properties"))
        try:
            script.set_property("key", "script")
            user.set_property("key", "user")

            assert script.get_property("key") == "script"
            assert user.get_property("key") == "user"
        finally:
            script.close()
            user.close()

    def test_creates_parent_directory(self, tmp_path):
        db_path = tmp_path / "nested" / "dir" / "props.db"
        tier = SQLitePropertyTier(PropertyTierConfig(db_path=str(db_path)))
        try:
            tier.set_property("key", "value")
        finally:
            tier.close()
        assert db_path.exists()

    def test_in_memory_database(self):
        tier = SQLitePropertyTier(PropertyTierConfig(db_path=":memory:"))
        try:
            tier.set_property("key", "value")
            assert tier.get_property("key") == "value"
        finally:
            tier.close()

    def test_close_is_idempotent(self, tmp_path):
        tier = SQLitePropertyTier(PropertyTierConfig(db_path=str(tmp_path / "props.db")))
        tier.close()
        tier.close()

    def test_invalid_table_name_rejected(self):
        with pytest.raises(ValidationError):
            PropertyTierConfig(table_name="props; DROP TABLE x")


def test_create_property_tier(tmp_path):
    assert isinstance(create_property_tier(), MemoryPropertyTier)

    tier = create_property_tier(PropertyTierConfig(db_path=str(tmp_path / "p.db")))
    assert isinstance(tier, SQLitePropertyTier)
    tier.close()
