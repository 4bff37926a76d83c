import faulthandler
import logging
import sys
from pathlib import Path

import pytest

from utils import InstanceLockError, acquire_instance_lock, enable_crash_diagnostics, setup_logging


def test_second_instance_lock_is_refused(tmp_path: Path) -> None:
    lock_path = tmp_path / "data" / "archive_catalog.lock"
    lock = acquire_instance_lock(lock_path)

    with pytest.raises(InstanceLockError):
        acquire_instance_lock(lock_path)

    lock.release()
    acquire_instance_lock(lock_path).release()
    assert "pid=" in lock_path.read_text(encoding="utf-8")


@pytest.fixture
def clean_loggers():
    names = ("archive_catalog", "archive_catalog.movement")

    def reset() -> None:
        for name in names:
            logger = logging.getLogger(name)
            for handler in list(logger.handlers):
                logger.removeHandler(handler)
                handler.close()

    reset()
    yield
    reset()


def test_setup_logging_writes_master_error_and_movement_logs(tmp_path: Path, clean_loggers) -> None:
    loggers = setup_logging(tmp_path / "logs")

    loggers["main"].error("commit failed")
    loggers["movement"].info("UPLOAD a -> b")

    names = sorted(path.name.rsplit("_", 1)[0] for path in (tmp_path / "logs").iterdir())
    assert names == ["error_log", "master_log", "movement_log"]
    master = next((tmp_path / "logs").glob("master_log_*.log")).read_text(encoding="utf-8")
    assert "commit failed" in master
    assert "UPLOAD" not in master
    movement = next((tmp_path / "logs").glob("movement_log_*.log")).read_text(encoding="utf-8")
    assert "UPLOAD a -> b" in movement


def test_crash_diagnostics_write_unhandled_exceptions_to_log_dir(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    fault_streams: list = []
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    monkeypatch.setattr(faulthandler, "enable", lambda file: fault_streams.append(file))

    crash_log = enable_crash_diagnostics(tmp_path / "logs")
    sys.excepthook(ValueError, ValueError("boom"), None)
    fault_streams[0].close()

    assert crash_log.parent == tmp_path / "logs"
    assert "ValueError: boom" in crash_log.read_text(encoding="utf-8")
