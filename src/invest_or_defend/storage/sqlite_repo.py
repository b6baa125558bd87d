"""SQLite-based repository implementation.

Every collection is a table of JSON documents keyed by ID. A committed unit
of work is written in a single SQL transaction, so a turn is either stored
completely or not at all.
"""

import json
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from .repository import COLLECTIONS, DocumentRepository


class SQLiteRepository(DocumentRepository):
    """SQLite-backed repository using the standard library ``sqlite3``."""

    def __init__(self, database_uri: str = "instance/invest_or_defend.db"):
        """Initialize repository.

        Args:
            database_uri: Path to SQLite database file, or ":memory:"
        """
        super().__init__()
        self.database_uri = database_uri
        self._shared_connection: Optional[sqlite3.Connection] = None
        if database_uri == ":memory:":
            # A private in-memory database only lives as long as its connection
            self._shared_connection = sqlite3.connect(":memory:", check_same_thread=False)
        else:
            Path(database_uri).parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _get_connection(self) -> sqlite3.Connection:
        """Get database connection."""
        if self._shared_connection is not None:
            return self._shared_connection
        return sqlite3.connect(self.database_uri)

    def _release(self, conn: sqlite3.Connection) -> None:
        if conn is not self._shared_connection:
            conn.close()

    def _init_db(self) -> None:
        """Initialize database schema."""
        conn = self._get_connection()
        try:
            with conn:
                cursor = conn.cursor()
                cursor.execute("""
                    CREATE TABLE IF NOT EXISTS documents (
                        collection TEXT NOT NULL,
                        key TEXT NOT NULL,
                        data TEXT NOT NULL,
                        updated_at TEXT,
                        PRIMARY KEY (collection, key)
                    )
                """)
                cursor.execute(
                    "CREATE INDEX IF NOT EXISTS idx_documents_collection ON documents(collection)"
                )
        finally:
            self._release(conn)

    def _read(self, collection: str, key: str) -> Optional[dict]:
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT data FROM documents WHERE collection = ? AND key = ?",
                (collection, key),
            )
            row = cursor.fetchone()
        finally:
            self._release(conn)

        if row is None:
            return None
        return json.loads(row[0])

    def _scan(self, collection: str) -> list[tuple[str, dict]]:
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT key, data FROM documents WHERE collection = ? ORDER BY rowid",
                (collection,),
            )
            rows = cursor.fetchall()
        finally:
            self._release(conn)
        return [(key, json.loads(data)) for key, data in rows]

    def _write_batch(self, writes: list[tuple[str, str, dict]]) -> None:
        unknown = {collection for collection, _, _ in writes} - set(COLLECTIONS)
        if unknown:
            raise ValueError(f"Unknown collections: {sorted(unknown)}")

        now = datetime.now(timezone.utc).isoformat()
        conn = self._get_connection()
        try:
            # The connection context manager commits, or rolls back on error
            with conn:
                conn.executemany("""
                    INSERT INTO documents (collection, key, data, updated_at)
                    VALUES (?, ?, ?, ?)
                    ON CONFLICT(collection, key) DO UPDATE SET
                        data = excluded.data,
                        updated_at = excluded.updated_at
                """, [
                    (collection, key, json.dumps(document), now)
                    for collection, key, document in writes
                ])
        finally:
            self._release(conn)
