"""
Main entry point for running the archive cataloger.
"""

import os
import sys
from pathlib import Path

from orchestrator.main import main
from utils.instance_guard import InstanceLockError, acquire_instance_lock


def run() -> None:
    lock = None
    if os.environ.get("ARCHIVE_CATALOG_ALLOW_MULTI_INSTANCE") != "1":
        try:
            lock = acquire_instance_lock(Path("data") / "archive_catalog.lock")
        except InstanceLockError as exc:
            message = (
                "ERROR: Another archive cataloger is already running.\n"
                "Items are cataloged one at a time; close the other process or set "
                "ARCHIVE_CATALOG_ALLOW_MULTI_INSTANCE=1 to override.\n"
            )
            print(message, file=sys.stderr)
            raise SystemExit(2) from exc
    try:
        # Crash logs go to the configured logs directory once the config is loaded.
        status = main(crash_diagnostics=True)
    finally:
        if lock is not None:
            lock.release()
    raise SystemExit(status)


if __name__ == "__main__":
    run()
