"""
SQLite access layer for catalog records and operation tracking.
"""

from __future__ import annotations

import json
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from .schema import create_catalog_db


class DatabaseManager:
    """Manage the catalog connection and common queries."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        self._conn: Optional[sqlite3.Connection] = None

    def initialize(self) -> None:
        """Create the database file and tables."""
        create_catalog_db(self.db_path)

    def connect(self) -> None:
        """Open the database connection if it is not already open."""
        if self._conn is None:
            self._conn = sqlite3.connect(self.db_path)
            self._conn.execute("PRAGMA journal_mode=WAL;")

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def insert_item(self, document: dict[str, Any]) -> str:
        """Insert a catalog document and return the identifier the database assigned."""
        self.connect()
        payload = {key: value for key, value in document.items() if key != "id"}
        cursor = self._conn.execute(
            """
            INSERT INTO items (name, item_type, date_added, document_json)
            VALUES (?, ?, ?, ?)
            """,
            (
                payload.get("name"),
                payload.get("type"),
                payload.get("dateAdded"),
                json.dumps(payload),
            ),
        )
        row = self._conn.execute("SELECT id FROM items WHERE rowid = ?", (cursor.lastrowid,)).fetchone()
        self._conn.commit()
        return str(row[0])

    def find_item(self, item_id: str) -> Optional[dict[str, Any]]:
        """Return the stored document for an identifier, or None."""
        self.connect()
        row = self._conn.execute(
            "SELECT id, document_json FROM items WHERE id = ?",
            (item_id,),
        ).fetchone()
        if row is None:
            return None
        document = {"id": str(row[0])}
        document.update(json.loads(row[1]))
        return document

    def delete_item(self, item_id: str) -> bool:
        """Delete a catalog document. Returns False when nothing matched."""
        self.connect()
        cursor = self._conn.execute("DELETE FROM items WHERE id = ?", (item_id,))
        self._conn.commit()
        return cursor.rowcount > 0

    def count_items(self) -> int:
        self.connect()
        row = self._conn.execute("SELECT COUNT(*) FROM items").fetchone()
        return int(row[0]) if row else 0

    def start_operation(self, operation_type: str, details: Optional[str] = None) -> str:
        """Insert an operation record and return the generated operation ID."""
        self.connect()
        operation_id = f"{operation_type}_{datetime.utcnow().strftime('%Y%m%d_%H%M%S_%f')}"
        self._conn.execute(
            """
            INSERT INTO operations (
                operation_id, operation_type, status, started_at, details
            ) VALUES (?, ?, ?, ?, ?)
            """,
            (operation_id, operation_type, "in_progress", datetime.utcnow().isoformat(), details),
        )
        self._conn.commit()
        return operation_id

    def update_operation_details(self, operation_id: str, details: str) -> None:
        """Update the details field for an operation."""
        self.connect()
        self._conn.execute(
            "UPDATE operations SET details = ? WHERE operation_id = ?",
            (details, operation_id),
        )
        self._conn.commit()

    def complete_operation(self, operation_id: str, status: str = "completed") -> None:
        """Mark an operation as completed or failed."""
        self.connect()
        self._conn.execute(
            """
            UPDATE operations
            SET status = ?, finished_at = ?
            WHERE operation_id = ?
            """,
            (status, datetime.utcnow().isoformat(), operation_id),
        )
        self._conn.commit()

    def resolve_failed_operations(self, item_id: str) -> int:
        """Mark failed operations that mention an item as resolved."""
        self.connect()
        cursor = self._conn.execute(
            """
            UPDATE operations
            SET status = 'resolved', finished_at = ?
            WHERE status = 'failed' AND details LIKE ?
            """,
            (datetime.utcnow().isoformat(), f'%"{item_id}"%'),
        )
        self._conn.commit()
        return cursor.rowcount

    def get_operation(self, operation_id: str) -> Optional[dict]:
        self.connect()
        row = self._conn.execute(
            """
            SELECT operation_id, operation_type, status, started_at, finished_at, details
            FROM operations
            WHERE operation_id = ?
            """,
            (operation_id,),
        ).fetchone()
        return _operation_row(row) if row else None

    def list_unfinished_operations(self) -> list[dict]:
        """Return operations that are still in progress or ended in failure."""
        self.connect()
        cursor = self._conn.execute(
            """
            SELECT operation_id, operation_type, status, started_at, finished_at, details
            FROM operations
            WHERE status IN ('in_progress', 'failed')
            ORDER BY started_at DESC
            """
        )
        return [_operation_row(row) for row in cursor.fetchall()]


def _operation_row(row: tuple) -> dict:
    return {
        "operation_id": row[0],
        "operation_type": row[1],
        "status": row[2],
        "started_at": row[3],
        "finished_at": row[4],
        "details": row[5],
    }
