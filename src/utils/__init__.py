"""
Utility helpers for the archive cataloger.
"""

from .instance_guard import InstanceLock, InstanceLockError, acquire_instance_lock
from .logging_setup import enable_crash_diagnostics, setup_logging

__all__ = [
    "enable_crash_diagnostics",
    "setup_logging",
    "InstanceLock",
    "InstanceLockError",
    "acquire_instance_lock",
]
