"""
Interactive orchestration for cataloging and deleting items.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Iterable, Optional, Sequence

import yaml

from catalog.builder import ItemSchemaBuilder
from catalog.commit import DEFAULT_METADATA_FILENAME, CommitEngine
from catalog.deletion import DeletionEngine, DeletionOutcome
from catalog.errors import ConfigurationError, EmptyStaging, FatalCatalogError
from catalog.models import ItemRecord
from cloud import ObjectStore
from config import AppConfig, ensure_directories
from database import DatabaseManager
from metadata import probe_dimensions
from prompts import OperatorPrompt
from staging import DEFAULT_IGNORED_FILES, DEFAULT_UPSCALED_MARKER, list_staged_files
from utils import enable_crash_diagnostics, setup_logging

ACTIONS = ("catalog", "delete", "exit")


class CatalogSession:
    """Run the catalog and delete loops against stores opened once at startup."""

    def __init__(
        self,
        db_manager: DatabaseManager,
        prompter: OperatorPrompt,
        builder: ItemSchemaBuilder,
        commit_engine: CommitEngine,
        deletion_engine: DeletionEngine,
        staging_root: Path,
        ignored_files: Iterable[str] = DEFAULT_IGNORED_FILES,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.db_manager = db_manager
        self.prompter = prompter
        self.builder = builder
        self.commit_engine = commit_engine
        self.deletion_engine = deletion_engine
        self.staging_root = staging_root
        self.ignored_files = tuple(ignored_files)
        self.logger = logger or logging.getLogger("archive_catalog")

    def run(self) -> None:
        """Prompt for actions until the operator exits."""
        self._log_unfinished_operations()
        while True:
            action = self.prompter.choose("ACTION", ACTIONS)
            if action == "exit":
                break
            if action == "catalog":
                self.catalog_items()
            else:
                self.delete_items()
            if not self.prompter.confirm("CONTINUE WITH ANOTHER ACTION?"):
                break
        self.prompter.info("BYE!")

    def scan_staging(self) -> list[str]:
        return list_staged_files(self.staging_root, self.ignored_files)

    def catalog_items(self) -> list[ItemRecord]:
        """Build and commit items until staging is empty. The listing is re-read after every item."""
        listing = self.scan_staging()
        if not listing:
            raise EmptyStaging()

        committed: list[ItemRecord] = []
        while listing:
            candidate = self.builder.build(listing)
            if self.builder.review(candidate):
                record = self.commit_engine.commit(candidate)
                committed.append(record)
                self.prompter.success(f'CATALOGED "{record.name}" AS {record.item_id}')
                self.prompter.info("---")
            else:
                self.prompter.info("REDOING ITEM FROM BEGINNING...")
            listing = self.scan_staging()

        self.prompter.success(f"ALL ITEMS CATALOGED! ({len(committed)} item(s))")
        return committed

    def delete_items(self) -> list[DeletionOutcome]:
        """Delete items by id until the operator stops."""
        outcomes: list[DeletionOutcome] = []
        while True:
            item_id = self.prompter.ask_identifier("ITEM ID")
            outcome = self.deletion_engine.delete_item(item_id, confirm=self._confirm_deletion)
            outcomes.append(outcome)
            if outcome.found:
                if outcome.deleted:
                    self._report_deletion(outcome)
                question = "CONTINUE WITH A NEW ITEM ID?"
            else:
                self.prompter.error(f"NO ITEM WITH ID {item_id} WAS FOUND TO EXIST...")
                question = "TRY AGAIN WITH A DIFFERENT ITEM ID?"
            if not self.prompter.confirm(question):
                return outcomes

    def close(self) -> None:
        self.db_manager.close()

    def _confirm_deletion(self, record: ItemRecord) -> bool:
        self.prompter.info("ITEM FOUND!")
        return self.prompter.confirm(f'DELETE ITEM "{record.name}"?')

    def _report_deletion(self, outcome: DeletionOutcome) -> None:
        self.prompter.success(f"{outcome.blobs_deleted} FILE(S) DELETED FROM THE OBJECT STORE")
        if outcome.blob_errors:
            self.prompter.error(
                f"{len(outcome.blob_errors)} FILE(S) COULD NOT BE DELETED FROM THE OBJECT STORE: "
                + ", ".join(outcome.blob_errors)
            )
        names = ", ".join(f'"{name}"' for name in outcome.local_files)
        self.prompter.success(f"{len(outcome.local_files)} FILE(S) DELETED FROM LOCAL STORAGE ({names})")

    def _log_unfinished_operations(self) -> None:
        for operation in self.db_manager.list_unfinished_operations():
            self.logger.warning(
                "Unfinished %s operation %s (%s) started at %s: %s",
                operation["operation_type"],
                operation["operation_id"],
                operation["status"],
                operation["started_at"],
                operation["details"],
            )


def build_session(
    config: AppConfig,
    loggers: dict[str, logging.Logger],
    prompter: Optional[OperatorPrompt] = None,
    object_store: Optional[ObjectStore] = None,
) -> CatalogSession:
    """Open every store once and wire the engines together."""
    logger = loggers["main"]
    movement_logger = loggers["movement"]
    staging_root = config.resolve_path("paths", "staging", default="staging")
    catalog_root = config.resolve_path("paths", "cataloged", default="cataloged")
    logs_root = config.resolve_path("paths", "logs", default="logs")
    ensure_directories([staging_root, catalog_root, logs_root])

    if object_store is None:
        object_store = ObjectStore.from_config(config, logger=logger, movement_logger=movement_logger)
    db_manager = DatabaseManager(config.resolve_path("database", "path", default="data/catalog.sqlite"))
    db_manager.initialize()
    prompter = prompter or OperatorPrompt()

    builder = ItemSchemaBuilder(
        prompter,
        probe_dimensions,
        staging_root,
        upscaled_marker=str(config.get("staging", "upscaled_marker", default=DEFAULT_UPSCALED_MARKER)),
        logger=logger,
    )
    commit_engine = CommitEngine(
        db_manager,
        object_store,
        staging_root,
        catalog_root,
        logs_root,
        metadata_filename=str(
            config.get("catalog", "metadata_filename", default=DEFAULT_METADATA_FILENAME)
        ),
        logger=logger,
        movement_logger=movement_logger,
    )
    deletion_engine = DeletionEngine(
        db_manager,
        object_store,
        catalog_root,
        logger=logger,
        movement_logger=movement_logger,
    )
    return CatalogSession(
        db_manager,
        prompter,
        builder,
        commit_engine,
        deletion_engine,
        staging_root,
        ignored_files=config.get("staging", "ignored_files", default=list(DEFAULT_IGNORED_FILES)),
        logger=logger,
    )


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Catalog staged files or delete cataloged items.")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.yaml")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def load_config(path: Optional[Path] = None) -> AppConfig:
    """Load the configuration, reporting an unreadable file as a fatal error."""
    try:
        return AppConfig.load(path)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Could not load configuration: {exc}") from exc


def main(argv: Optional[Sequence[str]] = None, crash_diagnostics: bool = False) -> int:
    """CLI entry point. Returns the process exit status."""
    args = parse_args(argv)
    try:
        config = load_config(args.config)
    except ConfigurationError as exc:
        logging.getLogger("archive_catalog").error("FATAL: %s", exc)
        return 1
    logs_root = config.resolve_path("paths", "logs", default="logs")
    if crash_diagnostics:
        enable_crash_diagnostics(logs_root)
    loggers = setup_logging(logs_root, verbose=args.verbose)
    logger = loggers["main"]
    session: Optional[CatalogSession] = None
    try:
        session = build_session(config, loggers)
        session.run()
    except FatalCatalogError as exc:
        logger.error("FATAL: %s", exc)
        return 1
    except KeyboardInterrupt:
        logger.warning("Operation cancelled by operator.")
        return 1
    finally:
        if session is not None:
            session.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
