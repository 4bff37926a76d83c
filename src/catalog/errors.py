"""
Exception hierarchy for the archive cataloger.

Fatal errors end the current run with a non-zero exit status. Everything
else is recoverable and is handled where it is raised.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence


class CatalogError(Exception):
    """Base exception for all catalog errors."""


class FatalCatalogError(CatalogError):
    """Raised for conditions that must halt the run."""


class StagingError(FatalCatalogError):
    """Raised when the staging directory breaks the naming convention."""


class EmptyStaging(StagingError):
    """Raised when there is nothing in the staging directory to catalog."""

    def __init__(self) -> None:
        super().__init__("Staging directory is empty; no items to be cataloged")


class NoAnchorFound(StagingError):
    """Raised when every staged file carries the upscaled marker."""

    def __init__(self, listing: Sequence[str]) -> None:
        self.listing = list(listing)
        super().__init__(
            f"No base file found among {len(self.listing)} staged file(s); "
            "only upscaled files remain, check the staging directory"
        )


class BadSequenceNaming(StagingError):
    """Raised when a multi-file item's first file is not suffixed with -1."""

    def __init__(self, filename: str) -> None:
        self.filename = filename
        super().__init__(
            f"Incorrect naming convention for a type with multiple files; {filename} "
            'as the first file is not suffixed with "-1" before the file extension'
        )


class MissingUpscaledFile(StagingError):
    """Raised when a file that needs an upscaled counterpart has none."""

    def __init__(self, filename: str) -> None:
        self.filename = filename
        super().__init__(f"Upscaled file missing for {filename}; recheck files in the staging directory")


class ConfigurationError(FatalCatalogError):
    """Raised when the configuration file is missing, unreadable, or lacks a required value."""


class ObjectStoreUnavailable(FatalCatalogError):
    """Raised when the object store cannot be opened or listed."""


class DimensionProbeFailed(FatalCatalogError):
    """Raised when the display dimensions of a file cannot be read."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Could not read dimensions of {path}: {reason}")


class DatabaseInsertFailed(FatalCatalogError):
    """Raised when the catalog record could not be inserted. Nothing else was written."""


class CommitStepFailed(FatalCatalogError):
    """Raised when a commit step after the database insert fails."""

    def __init__(
        self,
        step: str,
        item_id: str,
        reason: str,
        filename: Optional[str] = None,
        completed: Sequence[str] = (),
    ) -> None:
        self.step = step
        self.item_id = item_id
        self.filename = filename
        self.completed = list(completed)
        target = f" ({filename})" if filename else ""
        super().__init__(f"Commit step '{step}' failed for item {item_id}{target}: {reason}")


class UnsafeIdentifier(FatalCatalogError):
    """Raised when an identifier is unusable as a storage prefix right before deletion."""

    def __init__(self, item_id: str) -> None:
        self.item_id = item_id
        super().__init__(
            f'Item id was found to be "{item_id}" right before deletion; recheck the item id'
        )


class ItemNotFound(CatalogError):
    """Raised when no catalog record exists for an identifier."""

    def __init__(self, item_id: str) -> None:
        self.item_id = item_id
        super().__init__(f"No item with id {item_id} was found to exist")
