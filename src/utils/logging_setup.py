"""
Logging configuration for the archive cataloger.
"""

from __future__ import annotations

import faulthandler
import logging
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Dict


def setup_logging(log_dir: Path, verbose: bool = False) -> Dict[str, logging.Logger]:
    """Initialize loggers and return a mapping of named loggers."""
    log_dir.mkdir(parents=True, exist_ok=True)
    date_stamp = datetime.utcnow().strftime("%Y%m%d")
    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    master_log = log_dir / f"master_log_{date_stamp}.log"
    error_log = log_dir / f"error_log_{date_stamp}.log"
    movement_log = log_dir / f"movement_log_{date_stamp}.log"

    base_logger = logging.getLogger("archive_catalog")
    if not base_logger.handlers:
        base_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)
        base_logger.addHandler(stream_handler)

        file_handler = logging.FileHandler(master_log, encoding="utf-8")
        file_handler.setFormatter(formatter)
        base_logger.addHandler(file_handler)

        error_handler = logging.FileHandler(error_log, encoding="utf-8")
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)
        base_logger.addHandler(error_handler)

    # Every write or delete against a store, kept out of the console.
    movement_logger = logging.getLogger("archive_catalog.movement")
    if not movement_logger.handlers:
        movement_logger.setLevel(logging.INFO)
        move_handler = logging.FileHandler(movement_log, encoding="utf-8")
        move_handler.setFormatter(formatter)
        movement_logger.addHandler(move_handler)
        movement_logger.propagate = False

    logging.getLogger("google").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.WARNING)

    return {"main": base_logger, "movement": movement_logger}


def enable_crash_diagnostics(log_dir: Path) -> Path:
    """Send fatal signals and unhandled exceptions to a dated crash log in log_dir."""
    log_dir.mkdir(parents=True, exist_ok=True)
    crash_log = log_dir / f"crash_traceback_{datetime.utcnow().strftime('%Y%m%d')}.log"
    crash_stream = crash_log.open("a", encoding="utf-8")
    faulthandler.enable(file=crash_stream)

    def _hook(exc_type, exc, tb):
        with crash_log.open("a", encoding="utf-8") as handle:
            handle.write("\n")
            handle.write(datetime.utcnow().isoformat() + " Unhandled exception\n")
            traceback.print_exception(exc_type, exc, tb, file=handle)
        sys.__excepthook__(exc_type, exc, tb)

    sys.excepthook = _hook
    return crash_log
