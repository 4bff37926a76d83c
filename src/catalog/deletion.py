"""
Reverse a commit: remove an item's record, object-store blobs, and local directory.

The database record goes first. If the run stops partway, what is left is
orphaned blobs and files, and the catalog never points at half-deleted content.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from cloud import ObjectStore
from database import DatabaseManager

from .errors import ItemNotFound, UnsafeIdentifier
from .models import ItemRecord

ConfirmDeletion = Callable[[ItemRecord], bool]


@dataclass
class DeletionOutcome:
    """What a deletion request did."""

    item_id: str
    found: bool
    deleted: bool = False
    name: Optional[str] = None
    blobs_deleted: int = 0
    blob_errors: list[str] = field(default_factory=list)
    local_files: list[str] = field(default_factory=list)


class DeletionEngine:
    """Delete cataloged items by identifier."""

    def __init__(
        self,
        db_manager: DatabaseManager,
        object_store: ObjectStore,
        catalog_root: Path,
        logger: Optional[logging.Logger] = None,
        movement_logger: Optional[logging.Logger] = None,
    ) -> None:
        self.db_manager = db_manager
        self.object_store = object_store
        self.catalog_root = catalog_root
        self.logger = logger or logging.getLogger("archive_catalog")
        self.movement_logger = movement_logger or logging.getLogger("archive_catalog.movement")

    def lookup(self, item_id: str) -> ItemRecord:
        document = self.db_manager.find_item(item_id)
        if document is None:
            raise ItemNotFound(item_id)
        return ItemRecord.from_document(document)

    def delete_item(self, item_id: str, confirm: Optional[ConfirmDeletion] = None) -> DeletionOutcome:
        """Delete an item after confirmation. An unknown id touches no store."""
        self.logger.info("Fetching item %s...", item_id)
        try:
            record = self.lookup(item_id)
        except ItemNotFound as exc:
            self.logger.warning("%s", exc)
            return DeletionOutcome(item_id=item_id, found=False)

        outcome = DeletionOutcome(item_id=item_id, found=True, name=record.name)
        if confirm is not None and not confirm(record):
            self.logger.info("Deletion of %s declined.", item_id)
            return outcome

        _ensure_safe_identifier(item_id)

        self.logger.info("Deleting item data...")
        self.db_manager.delete_item(item_id)
        self.db_manager.resolve_failed_operations(item_id)
        self.logger.info("Item data deleted for %s.", item_id)

        blobs = self.object_store.list_by_prefix(f"{item_id}/")
        self.logger.info("Deleting %s file(s) from the object store...", len(blobs))
        stats = self.object_store.delete_many(blobs)
        outcome.blobs_deleted = stats.deleted_count
        outcome.blob_errors = stats.failed
        self.logger.info("%s file(s) deleted from the object store.", stats.deleted_count)
        if stats.failed:
            self.logger.error(
                "%s object store file(s) could not be deleted: %s",
                stats.error_count,
                ", ".join(stats.failed),
            )

        outcome.local_files = self._remove_local_directory(item_id)
        outcome.deleted = True
        return outcome

    def _remove_local_directory(self, item_id: str) -> list[str]:
        item_dir = self.catalog_root / item_id
        if not item_dir.exists():
            self.logger.warning("Local catalog directory missing for %s: %s", item_id, item_dir)
            return []
        local_files = sorted(path.name for path in item_dir.iterdir())
        shutil.rmtree(item_dir)
        self.movement_logger.info("REMOVE %s (%s file(s))", item_dir, len(local_files))
        self.logger.info(
            "%s file(s) deleted from local storage (%s)",
            len(local_files),
            ", ".join(f'"{name}"' for name in local_files),
        )
        return local_files


def _ensure_safe_identifier(item_id: str) -> None:
    value = (item_id or "").strip()
    if not value or "/" in value or "\\" in value or value in {".", ".."}:
        raise UnsafeIdentifier(item_id)
