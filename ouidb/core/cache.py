import sqlite3
import logging
import threading
from typing import List, Optional
from pathlib import Path

from .database import EXPORT_VERSION

logger = logging.getLogger(__name__)

class ExportCache:
    """SQLite store for binary database exports, keyed by manuf source path."""

    def __init__(self, db_path: str = "data/ouidb_cache.db"):
        self.db_path = db_path
        self._lock = threading.Lock()
        self._init_db()

    def _init_db(self):
        """Initialize database tables."""
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        with self._lock, sqlite3.connect(self.db_path) as conn:
            cursor = conn.cursor()

            # One export per manuf source; fingerprint detects a changed file
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS exports (
                    source TEXT PRIMARY KEY,
                    fingerprint TEXT NOT NULL,
                    format_version INTEGER NOT NULL,
                    blob BLOB NOT NULL,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)

            conn.commit()
            logger.info(f"Export cache initialized at {self.db_path}")

    def save_export(self, source: str, fingerprint: str, blob: bytes):
        """Store (or replace) the export for a manuf source."""
        with self._lock, sqlite3.connect(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute("""
                INSERT OR REPLACE INTO exports (source, fingerprint, format_version, blob)
                VALUES (?, ?, ?, ?)
            """, (source, fingerprint, EXPORT_VERSION, sqlite3.Binary(blob)))
            conn.commit()
        logger.debug(f"Cached export for {source} ({len(blob)} bytes)")

    def load_export(self, source: str, fingerprint: str) -> Optional[bytes]:
        """
        Return the cached export for a source.

        Returns None when nothing is cached or the stored fingerprint no
        longer matches the source file.
        """
        with self._lock, sqlite3.connect(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT fingerprint, blob FROM exports WHERE source = ?",
                (source,),
            )
            row = cursor.fetchone()

        if row is None:
            return None

        stored_fingerprint, blob = row
        if stored_fingerprint != fingerprint:
            logger.debug(f"Cached export for {source} is stale")
            return None
        return bytes(blob)

    def delete_export(self, source: str):
        """Delete the cached export for a source."""
        with self._lock, sqlite3.connect(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM exports WHERE source = ?", (source,))
            conn.commit()

    def list_sources(self) -> List[str]:
        """Sources that currently have a cached export."""
        with self._lock, sqlite3.connect(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT source FROM exports ORDER BY source")
            return [row[0] for row in cursor.fetchall()]

    def clear(self):
        """Drop every cached export."""
        with self._lock, sqlite3.connect(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM exports")
            conn.commit()
