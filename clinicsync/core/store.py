"""Local replica store for ClinicSync.

A durable key -> JSON array mapping backed by SQLite. Each collection is one
row whose key carries a versioned prefix (e.g. ``clinicsync_v3_doctors``), so
a schema migration can write new keys next to the old ones without collision.

Every other component reads and writes collections through this store.

CRITICAL: This module must have NO Qt/PySide6 dependencies.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .config import DEFAULT_KEY_PREFIX
from .errors import StorageFailure
from .seed import default_records

logger = logging.getLogger(__name__)

__all__ = ["ReplicaStore"]

_SCHEMA = """
CREATE TABLE IF NOT EXISTS replica (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
)
"""


class ReplicaStore:
    """Durable, process-local storage of every synchronized collection.

    Attributes:
        db_path: Path of the SQLite file, or ':memory:'
        key_prefix: Versioned prefix applied to every collection key
    """

    def __init__(
        self,
        db_path: Union[Path, str] = ":memory:",
        key_prefix: str = DEFAULT_KEY_PREFIX,
        seed: bool = True,
    ) -> None:
        """Open (and create if needed) the replica database.

        Args:
            db_path: Path to the SQLite database file, or ':memory:'
            key_prefix: Versioned prefix for storage keys
            seed: Insert default records into absent collections

        Raises:
            StorageFailure: If the database cannot be opened
        """
        self.db_path = str(db_path)
        self.key_prefix = key_prefix
        try:
            if self.db_path != ":memory:":
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self.db_path)
            self._conn.execute(_SCHEMA)
            self._conn.commit()
        except (sqlite3.Error, OSError) as e:
            raise StorageFailure(f"Cannot open replica at {self.db_path}: {e}") from e

        logger.info(f"Opened replica store at {self.db_path} (prefix {key_prefix})")

        if seed:
            self.seed_defaults()

    def storage_key(self, collection: str) -> str:
        """Get the persisted key for a collection name."""
        return f"{self.key_prefix}_{collection}"

    def has(self, collection: str) -> bool:
        """Check whether the collection key exists at all (even if empty)."""
        try:
            row = self._conn.execute(
                "SELECT 1 FROM replica WHERE key = ?", (self.storage_key(collection),)
            ).fetchone()
        except sqlite3.Error as e:
            raise StorageFailure(f"Cannot read {collection}: {e}") from e
        return row is not None

    def get(self, collection: str) -> List[Any]:
        """Get a collection.

        Never fails: an absent, unreadable or malformed entry is returned as
        an empty collection.
        """
        key = self.storage_key(collection)
        try:
            row = self._conn.execute(
                "SELECT value FROM replica WHERE key = ?", (key,)
            ).fetchone()
        except sqlite3.Error as e:
            logger.error(f"Failed to read {key}: {e}")
            return []

        if row is None:
            return []

        try:
            value = json.loads(row[0])
        except json.JSONDecodeError as e:
            logger.warning(f"Discarding malformed JSON stored under {key}: {e}")
            return []

        if not isinstance(value, list):
            logger.warning(f"Discarding non-array value stored under {key}")
            return []
        return value

    def set(self, collection: str, items: List[Any]) -> None:
        """Replace a collection.

        Raises:
            StorageFailure: If the underlying medium is unavailable or full
        """
        key = self.storage_key(collection)
        payload = json.dumps(items if items is not None else [])
        try:
            with self._conn:
                self._conn.execute(
                    "INSERT INTO replica (key, value) VALUES (?, ?) "
                    "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                    (key, payload),
                )
        except sqlite3.Error as e:
            logger.error(f"Failed to write {key}: {e}")
            raise StorageFailure(f"Cannot write {collection}: {e}") from e

    def seed_defaults(self, defaults: Optional[Dict[str, List[Any]]] = None) -> List[str]:
        """Insert default records for collections whose key is absent.

        Existing keys are never touched, even when they hold an empty or
        partially populated collection.

        Returns:
            Names of the collections that were seeded
        """
        defaults = defaults if defaults is not None else default_records()
        seeded = []
        for collection, items in defaults.items():
            if self.has(collection):
                continue
            self.set(collection, items)
            seeded.append(collection)
        if seeded:
            logger.info(f"Seeded default data for: {', '.join(seeded)}")
        return seeded

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()
