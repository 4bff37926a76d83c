"""
Staging directory reconciliation.
"""

from .reconciler import (
    DEFAULT_IGNORED_FILES,
    DEFAULT_UPSCALED_MARKER,
    list_staged_files,
    reconcile,
    select_anchor,
)

__all__ = [
    "DEFAULT_IGNORED_FILES",
    "DEFAULT_UPSCALED_MARKER",
    "list_staged_files",
    "reconcile",
    "select_anchor",
]
