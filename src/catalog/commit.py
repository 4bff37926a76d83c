"""
Commit a finished record to the database, the object store, and the local catalog.

Steps run strictly in order, and each must succeed before the next starts:

1. insert the record (the database assigns the id)
2. create ``<catalog>/<id>/`` and write the metadata file
3. upload each file to ``<id>/<filename>``, one at a time
4. copy each file into ``<catalog>/<id>/``
5. remove each file from staging

Once the insert has succeeded the database is authoritative. A later
failure leaves the mirrors incomplete and staging intact. Nothing is undone
automatically. The failure is recorded in the operations table and in an
incident report in the logs directory.
"""

from __future__ import annotations

import json
import logging
import shutil
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

from cloud import ObjectStore
from database import DatabaseManager

from .errors import CommitStepFailed, DatabaseInsertFailed
from .models import ItemRecord

STEP_INSERT = "insert"
STEP_METADATA = "write_metadata"
STEP_UPLOAD = "upload"
STEP_COPY = "copy"
STEP_CLEAR_STAGING = "clear_staging"

DEFAULT_METADATA_FILENAME = "data.json"


@dataclass
class CommitProgress:
    """Steps finished so far for one commit, used for failure reports."""

    item_id: Optional[str] = None
    completed_steps: list[str] = field(default_factory=list)


class CommitEngine:
    """Write one item into every store, in order."""

    def __init__(
        self,
        db_manager: DatabaseManager,
        object_store: ObjectStore,
        staging_root: Path,
        catalog_root: Path,
        logs_root: Path,
        metadata_filename: str = DEFAULT_METADATA_FILENAME,
        logger: Optional[logging.Logger] = None,
        movement_logger: Optional[logging.Logger] = None,
    ) -> None:
        self.db_manager = db_manager
        self.object_store = object_store
        self.staging_root = staging_root
        self.catalog_root = catalog_root
        self.logs_root = logs_root
        self.metadata_filename = metadata_filename
        self.logger = logger or logging.getLogger("archive_catalog")
        self.movement_logger = movement_logger or logging.getLogger("archive_catalog.movement")

    def commit(
        self,
        candidate: ItemRecord,
        staging_root: Optional[Path] = None,
        catalog_root: Optional[Path] = None,
    ) -> ItemRecord:
        """Commit a candidate record and return it with its assigned id."""
        staging_root = staging_root or self.staging_root
        catalog_root = catalog_root or self.catalog_root
        progress = CommitProgress()

        operation_id, record = self._insert(candidate)
        progress.item_id = record.item_id
        progress.completed_steps.append(STEP_INSERT)
        self._track(
            self.db_manager.update_operation_details,
            operation_id,
            _details(record, STEP_INSERT),
        )

        try:
            item_dir = catalog_root / record.item_id
            self._write_metadata(record, item_dir)
            progress.completed_steps.append(STEP_METADATA)

            self._upload_files(record, staging_root)
            progress.completed_steps.append(STEP_UPLOAD)

            self._copy_files(record, staging_root, item_dir)
            progress.completed_steps.append(STEP_COPY)

            self._clear_staging(record, staging_root)
            progress.completed_steps.append(STEP_CLEAR_STAGING)
        except CommitStepFailed as exc:
            self.logger.error("%s", exc)
            self._track(self.db_manager.update_operation_details, operation_id, _details(record, exc.step))
            self._track(self.db_manager.complete_operation, operation_id, "failed")
            self._write_incident_report(record, progress, exc, staging_root, catalog_root)
            raise

        self._track(self.db_manager.complete_operation, operation_id, "completed")
        self.logger.info(
            "Cataloged %s as %s (%s file(s))", record.name, record.item_id, len(record.file_set)
        )
        return record

    def _insert(self, candidate: ItemRecord) -> tuple[str, ItemRecord]:
        self.logger.info('Uploading "%s" data to the catalog database...', candidate.name)
        operation_id = None
        try:
            operation_id = self.db_manager.start_operation(
                "catalog", json.dumps({"name": candidate.name, "step": "pending"})
            )
            item_id = self.db_manager.insert_item(candidate.to_document())
        except Exception as exc:
            if operation_id is not None:
                self._track(self.db_manager.complete_operation, operation_id, "failed")
            raise DatabaseInsertFailed(
                f'Inserting "{candidate.name}" into the catalog database failed: {exc}'
            ) from exc
        self.logger.info("Catalog record created with id %s", item_id)
        return operation_id, candidate.with_id(item_id)

    def _write_metadata(self, record: ItemRecord, item_dir: Path) -> None:
        try:
            item_dir.mkdir(parents=True, exist_ok=False)
            (item_dir / self.metadata_filename).write_text(
                json.dumps(record.to_document(), indent=2),
                encoding="utf-8",
            )
        except OSError as exc:
            raise CommitStepFailed(
                STEP_METADATA, record.item_id, str(exc), filename=self.metadata_filename
            ) from exc
        self.movement_logger.info("WRITE %s", item_dir / self.metadata_filename)

    def _upload_files(self, record: ItemRecord, staging_root: Path) -> None:
        uploaded: list[str] = []
        for filename in record.file_set:
            self.logger.info("Uploading %s to the object store...", filename)
            try:
                self.object_store.upload(staging_root / filename, f"{record.item_id}/{filename}")
            except Exception as exc:
                raise CommitStepFailed(
                    STEP_UPLOAD, record.item_id, str(exc), filename=filename, completed=uploaded
                ) from exc
            uploaded.append(filename)

    def _copy_files(self, record: ItemRecord, staging_root: Path, item_dir: Path) -> None:
        copied: list[str] = []
        for filename in record.file_set:
            destination = item_dir / filename
            try:
                shutil.copy2(staging_root / filename, destination)
            except OSError as exc:
                raise CommitStepFailed(
                    STEP_COPY, record.item_id, str(exc), filename=filename, completed=copied
                ) from exc
            self.movement_logger.info("COPY %s -> %s", staging_root / filename, destination)
            copied.append(filename)

    def _clear_staging(self, record: ItemRecord, staging_root: Path) -> None:
        removed: list[str] = []
        for filename in record.file_set:
            try:
                (staging_root / filename).unlink()
            except OSError as exc:
                raise CommitStepFailed(
                    STEP_CLEAR_STAGING, record.item_id, str(exc), filename=filename, completed=removed
                ) from exc
            self.movement_logger.info("REMOVE %s", staging_root / filename)
            removed.append(filename)

    def _write_incident_report(
        self,
        record: ItemRecord,
        progress: CommitProgress,
        error: CommitStepFailed,
        staging_root: Path,
        catalog_root: Path,
    ) -> Optional[Path]:
        report_path = self.logs_root / (
            f"commit_failure_{record.item_id}_{datetime.utcnow().strftime('%Y%m%d_%H%M%S')}.json"
        )
        try:
            self.logs_root.mkdir(parents=True, exist_ok=True)
            report_path.write_text(
                json.dumps(
                    {
                        "generated_at": datetime.utcnow().isoformat(),
                        "item_id": record.item_id,
                        "name": record.name,
                        "completed_steps": progress.completed_steps,
                        "failed_step": error.step,
                        "failed_filename": error.filename,
                        "completed_in_failed_step": error.completed,
                        "error": str(error),
                        "file_set": list(record.file_set),
                        "staging_root": str(staging_root),
                        "catalog_root": str(catalog_root),
                    },
                    indent=2,
                ),
                encoding="utf-8",
            )
        except OSError:
            self.logger.exception("Could not write commit failure report for %s", record.item_id)
            return None
        self.logger.error("Commit failure report written to %s", report_path)
        return report_path

    def _track(self, action, *args) -> None:
        """Run an operation-tracking call; a tracking failure is logged but does not stop the commit."""
        try:
            action(*args)
        except Exception:
            self.logger.exception("Operation tracking failed (%s)", getattr(action, "__name__", action))


def _details(record: ItemRecord, step: str) -> str:
    return json.dumps({"item_id": record.item_id, "name": record.name, "step": step})
