# src/objectstore/tiers/properties.py
"""
Durable property tiers.

Two implementations of the :class:`~objectstore.tiers.base.PropertyTier`
contract:

- :class:`MemoryPropertyTier` keeps properties in a dict. It lives as long
  as the process and is the default for stores and tests.
- :class:`SQLitePropertyTier` keeps properties in a SQLite table, so values
  survive process restarts.

Both accept string values only and record read/write/delete statistics.

Example::

    from objectstore.tiers.properties import PropertyTierConfig, SQLitePropertyTier

    props = SQLitePropertyTier(PropertyTierConfig(db_path="/tmp/props.db"))
    props.set_property("greeting", '"hello"')
    props.get_property("greeting")  # '"hello"'
"""

from __future__ import annotations

import logging
import os
import sqlite3
import threading
import time
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


def _check_entry(key: Any, value: Any) -> None:
    if not isinstance(key, str):
        raise TypeError(f"Property key must be a string, got {type(key).__name__}")
    if not isinstance(value, str):
        raise TypeError(f"Property value for '{key}' must be a string, got {type(value).__name__}")


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class PropertyTierConfig(BaseModel):
    """Configuration for the SQLite property tier.

    Attributes:
        db_path: Path to the SQLite database file (``:memory:`` for a private in-memory db).
        table_name: Table holding the key/value rows.
    """

    db_path: str = Field(
        default="~/.local/share/objectstore/properties.db",
        description="SQLite database path",
    )
    table_name: str = Field(
        default="properties",
        pattern=r"^[A-Za-z_][A-Za-z0-9_]*$",
        description="Table for key-value data",
    )


# ---------------------------------------------------------------------------
# In-memory tier
# ---------------------------------------------------------------------------


class MemoryPropertyTier:
    """Process-lifetime property storage backed by a dict."""

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._props: dict[str, str] = {}
        self._lock = threading.RLock()
        self._stats = {"reads": 0, "writes": 0, "deletes": 0}
        if initial:
            for key, value in initial.items():
                _check_entry(key, value)
                self._props[key] = value

    def get_property(self, key: str) -> str | None:
        with self._lock:
            self._stats["reads"] += 1
            return self._props.get(key)

    def set_property(self, key: str, value: str) -> None:
        _check_entry(key, value)
        with self._lock:
            self._props[key] = value
            self._stats["writes"] += 1

    def get_properties(self) -> dict[str, str]:
        with self._lock:
            self._stats["reads"] += 1
            return dict(self._props)

    def set_properties(self, properties: Mapping[str, str]) -> None:
        """Write all properties, or none of them if any entry is not a string."""
        for key, value in properties.items():
            _check_entry(key, value)
        with self._lock:
            self._props.update(properties)
            self._stats["writes"] += 1

    def get_keys(self) -> list[str]:
        with self._lock:
            self._stats["reads"] += 1
            return list(self._props)

    def delete_property(self, key: str) -> None:
        with self._lock:
            if self._props.pop(key, None) is not None:
                self._stats["deletes"] += 1

    def delete_all_properties(self) -> None:
        with self._lock:
            self._props.clear()
            self._stats["deletes"] += 1

    def stats(self) -> dict[str, Any]:
        """Return read/write/delete statistics."""
        with self._lock:
            return {"item_count": len(self._props), **self._stats}

    def __len__(self) -> int:
        with self._lock:
            return len(self._props)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._props


# ---------------------------------------------------------------------------
# SQLite tier
# ---------------------------------------------------------------------------


class SQLitePropertyTier:
    """SQLite-backed durable property storage.

    The connection is opened lazily on first use and shared across threads
    under a lock.

    Args:
        config: Tier configuration.
    """

    def __init__(self, config: PropertyTierConfig | None = None) -> None:
        self._config = config or PropertyTierConfig()
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.RLock()
        self._stats = {"reads": 0, "writes": 0, "deletes": 0}
        self._table = self._config.table_name
        logger.debug(
            "SQLitePropertyTier created (db=%s, table=%s).",
            self._config.db_path,
            self._table,
        )

    @property
    def db_path(self) -> str:
        if self._config.db_path == ":memory:":
            return self._config.db_path
        return os.path.expanduser(self._config.db_path)

    def _connect(self) -> sqlite3.Connection:
        db_path = self.db_path
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(db_path, check_same_thread=False, timeout=30.0)
        conn.execute(f"""
            CREATE TABLE IF NOT EXISTS {self._table} (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at REAL NOT NULL
            )
        """)
        conn.commit()
        logger.info("SQLitePropertyTier initialized at %s (table=%s).", db_path, self._table)
        return conn

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        """Yield the shared connection, rolling back on error."""
        with self._lock:
            if self._conn is None:
                self._conn = self._connect()
            try:
                yield self._conn
            except Exception:
                self._conn.rollback()
                raise

    def get_property(self, key: str) -> str | None:
        with self._connection() as conn:
            row = conn.execute(
                f"SELECT value FROM {self._table} WHERE key = ?", (key,)
            ).fetchone()
            self._stats["reads"] += 1
        return row[0] if row is not None else None

    def set_property(self, key: str, value: str) -> None:
        self.set_properties({key: value})

    def get_properties(self) -> dict[str, str]:
        with self._connection() as conn:
            rows = conn.execute(f"SELECT key, value FROM {self._table}").fetchall()
            self._stats["reads"] += 1
        return {key: value for key, value in rows}

    def set_properties(self, properties: Mapping[str, str]) -> None:
        for key, value in properties.items():
            _check_entry(key, value)
        now = time.time()
        with self._connection() as conn:
            conn.executemany(
                f"""INSERT OR REPLACE INTO {self._table} (key, value, updated_at)
                    VALUES (?, ?, ?)""",
                [(key, value, now) for key, value in properties.items()],
            )
            conn.commit()
            self._stats["writes"] += 1

    def get_keys(self) -> list[str]:
        with self._connection() as conn:
            rows = conn.execute(f"SELECT key FROM {self._table}").fetchall()
            self._stats["reads"] += 1
        return [row[0] for row in rows]

    def delete_property(self, key: str) -> None:
        with self._connection() as conn:
            cursor = conn.execute(f"DELETE FROM {self._table} WHERE key = ?", (key,))
            conn.commit()
            if cursor.rowcount > 0:
                self._stats["deletes"] += 1

    def delete_all_properties(self) -> None:
        with self._connection() as conn:
            cursor = conn.execute(f"DELETE FROM {self._table}")
            conn.commit()
            self._stats["deletes"] += 1
        logger.debug("Deleted %d properties from %s.", cursor.rowcount, self._table)

    def stats(self) -> dict[str, Any]:
        """Return read/write/delete statistics."""
        return dict(self._stats)

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
                logger.info("SQLitePropertyTier closed.")


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


def create_property_tier(
    config: PropertyTierConfig | None = None,
) -> MemoryPropertyTier | SQLitePropertyTier:
    """Create a property tier: SQLite when ``config`` is given, in-memory otherwise."""
    if config is None:
        return MemoryPropertyTier()
    return SQLitePropertyTier(config)


__all__ = [
    "MemoryPropertyTier",
    "PropertyTierConfig",
    "SQLitePropertyTier",
    "create_property_tier",
]
