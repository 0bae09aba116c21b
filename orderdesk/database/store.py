"""
Collection store for OrderDesk.

A store keeps named collections of JSON records. Each write replaces the
whole collection; there are no transactions across collections, so callers
read, modify and write back.
"""

import copy
import json
import sqlite3
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..utils.encryption import decrypt_data, encrypt_data

Record = Dict[str, Any]

# Collection names
USERS = "users"
PRODUCTS = "products"
ORDERS = "orders"
SETTINGS = "settings"
NOTIFICATIONS = "notifications"
REMINDERS = "reminders"


class Store(ABC):
    """
    Persistence contract shared by every store backend.

    Services hold `lock` around each read-modify-write; the reminder poll
    writes from its own thread.
    """

    def __init__(self) -> None:
        self.lock = threading.RLock()

    @abstractmethod
    def read(self, collection: str) -> List[Record]:
        """
        Read every record of a collection, in stored order.

        Args:
            collection: Collection name

        Returns:
            List of records; empty if the collection was never written
        """

    @abstractmethod
    def write(self, collection: str, records: List[Record]) -> None:
        """
        Replace a collection with the given records.

        Args:
            collection: Collection name
            records: JSON-compatible records
        """

    @abstractmethod
    def collections(self) -> List[str]:
        """List the names of stored collections."""

    def clear(self, collection: str) -> None:
        """Empty a collection."""
        self.write(collection, [])

    def close(self) -> None:
        """Release backend resources."""


class MemoryStore(Store):
    """
    In-process store.

    Records are serialized on write so that only JSON-compatible data is
    accepted, as with the durable backend.
    """

    def __init__(self) -> None:
        super().__init__()
        self._data: Dict[str, str] = {}

    def read(self, collection: str) -> List[Record]:
        payload = self._data.get(collection)
        if payload is None:
            return []
        return json.loads(payload)

    def write(self, collection: str, records: List[Record]) -> None:
        self._data[collection] = json.dumps(copy.deepcopy(list(records)))

    def collections(self) -> List[str]:
        return sorted(self._data)


class SQLiteStore(Store):
    """
    SQLite-backed store with optional encryption at rest.

    Each collection is one row holding the JSON payload. With an encryption
    key the payload is Fernet-encrypted before it reaches the file.
    """

    def __init__(self, db_path: str, encryption_key: Optional[str] = None) -> None:
        """
        Initialize the store.

        Args:
            db_path: Path to the database file
            encryption_key: Fernet key (None stores plain JSON)
        """
        super().__init__()
        self.db_path = Path(db_path)
        self.encryption_key = encryption_key.encode() if encryption_key else None
        self.is_encrypted = self.encryption_key is not None

        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.initialize_database()

    @contextmanager
    def get_connection(self):
        """
        Context manager for database connections.

        Yields:
            Database connection object
        """
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row

        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def initialize_database(self) -> None:
        """Create the collections table if it does not exist."""
        with self.get_connection() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS collections (
                    name TEXT PRIMARY KEY,
                    payload BLOB NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )

    def read(self, collection: str) -> List[Record]:
        with self.get_connection() as conn:
            row = conn.execute(
                "SELECT payload FROM collections WHERE name = ?", (collection,)
            ).fetchone()

        if row is None:
            return []

        payload = row["payload"]
        if isinstance(payload, str):
            payload = payload.encode("utf-8")
        if self.is_encrypted:
            payload = decrypt_data(payload, self.encryption_key)
        return json.loads(payload.decode("utf-8"))

    def write(self, collection: str, records: List[Record]) -> None:
        payload = json.dumps(list(records)).encode("utf-8")
        if self.is_encrypted:
            payload = encrypt_data(payload, self.encryption_key)

        with self.get_connection() as conn:
            conn.execute(
                """
                INSERT INTO collections (name, payload, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(name) DO UPDATE SET
                    payload = excluded.payload,
                    updated_at = excluded.updated_at
                """,
                (collection, payload, datetime.now().isoformat()),
            )

    def collections(self) -> List[str]:
        with self.get_connection() as conn:
            rows = conn.execute("SELECT name FROM collections ORDER BY name").fetchall()
        return [row["name"] for row in rows]

    def backup(self, backup_path: str) -> None:
        """
        Create a backup of the database file.

        Args:
            backup_path: Path for the backup file
        """
        with self.get_connection() as source:
            backup_conn = sqlite3.connect(backup_path)
            source.backup(backup_conn)
            backup_conn.close()


def create_store(
    backend: str = "sqlite",
    db_path: str = "data/orderdesk.db",
    encryption_key: Optional[str] = None
) -> Store:
    """
    Factory function to create a Store.

    Args:
        backend: "sqlite" or "memory"
        db_path: Path to database file (sqlite only)
        encryption_key: Fernet key (sqlite only, None for plain JSON)

    Returns:
        Configured Store instance
    """
    if backend == "memory":
        return MemoryStore()
    if backend == "sqlite":
        return SQLiteStore(db_path, encryption_key)
    raise ValueError(f"Unknown store backend: {backend}")
