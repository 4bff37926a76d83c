"""
Google Cloud Storage adapter for archival copies of cataloged files.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from google.api_core import exceptions as api_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import storage
from google.oauth2 import service_account

from catalog.errors import ConfigurationError, ObjectStoreUnavailable
from config import AppConfig


@dataclass
class BlobDeletionStats:
    """Outcome of a batch of blob deletions."""

    deleted: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    @property
    def deleted_count(self) -> int:
        return len(self.deleted)

    @property
    def error_count(self) -> int:
        return len(self.failed)


class ObjectStore:
    """Upload, list, and delete blobs in a single bucket."""

    def __init__(
        self,
        bucket,
        logger: Optional[logging.Logger] = None,
        movement_logger: Optional[logging.Logger] = None,
        delete_workers: int = 8,
    ) -> None:
        self.bucket = bucket
        self.logger = logger or logging.getLogger("archive_catalog")
        self.movement_logger = movement_logger or logging.getLogger("archive_catalog.movement")
        self.delete_workers = max(int(delete_workers), 1)

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        logger: Optional[logging.Logger] = None,
        movement_logger: Optional[logging.Logger] = None,
    ) -> "ObjectStore":
        """Open a storage client once and bind it to the configured bucket."""
        try:
            bucket_name = str(config.require("storage", "bucket"))
        except KeyError as exc:
            raise ConfigurationError(exc.args[0]) from exc
        project = config.get("storage", "project", default=None)
        account_file = config.get("storage", "service_account_path", default=None)
        try:
            if account_file:
                path = Path(account_file)
                if not path.is_absolute():
                    path = (config.root_dir / path).resolve()
                credentials = service_account.Credentials.from_service_account_file(str(path))
                client = storage.Client(project=project or credentials.project_id, credentials=credentials)
            else:
                client = storage.Client(project=project)
        except (auth_exceptions.GoogleAuthError, OSError, ValueError) as exc:
            raise ObjectStoreUnavailable(
                f"Could not open a storage client for bucket {bucket_name}: {exc}"
            ) from exc
        return cls(
            client.bucket(bucket_name),
            logger=logger,
            movement_logger=movement_logger,
            delete_workers=int(config.get("storage", "delete_workers", default=8)),
        )

    def upload(self, local_path: Path, key: str) -> None:
        """Upload one local file under the given key."""
        blob = self.bucket.blob(key)
        blob.upload_from_filename(str(local_path))
        self.movement_logger.info("UPLOAD %s -> gs://%s/%s", local_path, self.bucket.name, key)

    def list_by_prefix(self, prefix: str) -> list:
        try:
            return list(self.bucket.list_blobs(prefix=prefix))
        except (api_exceptions.GoogleAPIError, auth_exceptions.GoogleAuthError) as exc:
            raise ObjectStoreUnavailable(
                f"Listing gs://{self.bucket.name}/{prefix} failed: {exc}"
            ) from exc

    def delete(self, blob) -> None:
        blob.delete()
        self.movement_logger.info("DELETE gs://%s/%s", self.bucket.name, blob.name)

    def delete_many(self, blobs: list) -> BlobDeletionStats:
        """Issue every delete at once, then collect outcomes. Failures are counted, not retried."""
        stats = BlobDeletionStats()
        if not blobs:
            return stats
        workers = min(self.delete_workers, len(blobs))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {executor.submit(self.delete, blob): blob for blob in blobs}
            for future in as_completed(futures):
                blob = futures[future]
                try:
                    future.result()
                except Exception as exc:
                    stats.failed.append(blob.name)
                    self.logger.error(
                        "Error deleting %s; the blob was likely not deleted: %s", blob.name, exc
                    )
                else:
                    stats.deleted.append(blob.name)
        stats.deleted.sort()
        stats.failed.sort()
        return stats
