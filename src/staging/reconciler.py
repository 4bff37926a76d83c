"""
Group the flat staging directory into logical items.

Naming convention (the contract staged deposits must follow):

* An upscaled file contains the marker (``-upscaled.`` by default) and begins
  with the stem of the file it upscales: ``photo.png`` -> ``photo-upscaled.png``.
* A multi-file item is a hyphen-numbered sequence sharing everything up to the
  last hyphen, starting at ``-1``: ``game-1.png``, ``game-2.png``, ...

Grouping is inferred only from names, so any violation is an error rather
than a guess.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional, Sequence

from catalog.errors import BadSequenceNaming, EmptyStaging, MissingUpscaledFile, NoAnchorFound
from catalog.models import ItemType, rules_for

DEFAULT_UPSCALED_MARKER = "-upscaled."
DEFAULT_IGNORED_FILES = (".gitignore", "desktop.ini")
FIRST_IN_SEQUENCE = "-1"


def list_staged_files(staging_root: Path, ignored_names: Iterable[str] = DEFAULT_IGNORED_FILES) -> list[str]:
    """Return the sorted names of regular files in the staging directory."""
    ignored = set(ignored_names)
    return sorted(
        entry.name
        for entry in staging_root.iterdir()
        if entry.is_file() and entry.name not in ignored
    )


def select_anchor(listing: Sequence[str], marker: str = DEFAULT_UPSCALED_MARKER) -> str:
    """Return the first staged file that is not an upscaled version."""
    if not listing:
        raise EmptyStaging()
    for filename in listing:
        if marker not in filename:
            return filename
    raise NoAnchorFound(listing)


def reconcile(
    listing: Sequence[str],
    item_type: ItemType,
    marker: str = DEFAULT_UPSCALED_MARKER,
) -> tuple[str, ...]:
    """Resolve the complete, sorted file set of the next item in the listing."""
    rules = rules_for(item_type)
    anchor = select_anchor(listing, marker)

    if rules.multiple_files:
        if not _stem(anchor).endswith(FIRST_IN_SEQUENCE):
            raise BadSequenceNaming(anchor)
        prefix = _sequence_prefix(anchor)
        members = sorted(
            {name for name in listing if marker not in name and _sequence_prefix(name) == prefix}
        )
    else:
        members = [anchor]

    if rules.upscaled_versions:
        upscaled = [_find_upscaled(member, listing, marker) for member in members]
        members = sorted(set(members).union(upscaled))

    return tuple(members)


def _find_upscaled(filename: str, listing: Sequence[str], marker: str) -> str:
    stem = _stem(filename)
    for candidate in sorted(listing):
        # The marker must follow the stem directly: shot.png pairs with shot-upscaled.png only.
        if candidate.startswith(stem) and candidate[len(stem):].startswith(marker):
            return candidate
    raise MissingUpscaledFile(filename)


def _stem(filename: str) -> str:
    """Name up to the last dot; the whole name when there is no extension."""
    index = filename.rfind(".")
    return filename[:index] if index > 0 else filename


def _sequence_prefix(filename: str) -> Optional[str]:
    index = filename.rfind("-")
    if index < 0:
        return None
    return filename[:index]
