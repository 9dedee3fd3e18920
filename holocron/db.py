"""DuckDB key-value storage layer for Holocron."""

from datetime import datetime
from pathlib import Path

import duckdb

from .config import DEFAULT_DB_PATH


class Database:
    """DuckDB-backed blob store keyed by string."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or DEFAULT_DB_PATH
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.conn = duckdb.connect(str(self.db_path))
        self._init_schema()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
        return False

    def _init_schema(self) -> None:
        """Initialize database schema."""
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS kv_store (
                key TEXT PRIMARY KEY,
                value BLOB NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

    def close(self) -> None:
        """Close database connection."""
        self.conn.close()

    def load(self, key: str) -> bytes | None:
        """Load the blob stored under key, or None if nothing is stored."""
        result = self.conn.execute("SELECT value FROM kv_store WHERE key = ?", [key]).fetchone()

        if not result:
            return None

        return bytes(result[0])

    def save(self, key: str, data: bytes) -> None:
        """Insert or replace the blob stored under key."""
        self.conn.execute(
            """
            INSERT INTO kv_store (key, value, updated_at)
            VALUES (?, ?, ?)
            ON CONFLICT (key) DO UPDATE SET
                value = EXCLUDED.value,
                updated_at = EXCLUDED.updated_at
            """,
            [key, data, datetime.now()],
        )

    def delete(self, key: str) -> bool:
        """Remove a key. Returns True if removed."""
        result = self.conn.execute("SELECT COUNT(*) FROM kv_store WHERE key = ?", [key]).fetchone()
        if not result or result[0] == 0:
            return False
        self.conn.execute("DELETE FROM kv_store WHERE key = ?", [key])
        return True

    def keys(self) -> list[str]:
        """List stored keys in sorted order."""
        results = self.conn.execute("SELECT key FROM kv_store ORDER BY key").fetchall()
        return [r[0] for r in results]
