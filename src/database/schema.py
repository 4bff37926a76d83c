"""
Database schema definitions for the archive catalog.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path


def create_catalog_db(db_path: Path) -> None:
    """Create the catalog database and its tables."""
    conn = _connect(db_path)
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS items (
            id TEXT PRIMARY KEY DEFAULT (lower(hex(randomblob(12)))),
            name TEXT,
            item_type TEXT,
            date_added TIMESTAMP,
            document_json TEXT NOT NULL
        )
        """
    )
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS operations (
            id INTEGER PRIMARY KEY,
            operation_id TEXT UNIQUE,
            operation_type TEXT,
            status TEXT,
            started_at TIMESTAMP,
            finished_at TIMESTAMP,
            details TEXT
        )
        """
    )
    conn.execute("CREATE INDEX IF NOT EXISTS idx_items_type ON items(item_type)")
    conn.execute("CREATE INDEX IF NOT EXISTS idx_operations_status ON operations(status)")
    conn.commit()
    conn.close()


def _connect(db_path: Path) -> sqlite3.Connection:
    """Create a SQLite connection with WAL enabled."""
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path)
    conn.execute("PRAGMA journal_mode=WAL;")
    return conn
