"""
Pixel dimension probing for staged images.
"""

from __future__ import annotations

from pathlib import Path

from PIL import Image, UnidentifiedImageError

from catalog.errors import DimensionProbeFailed


def probe_dimensions(path: Path) -> tuple[int, int]:
    """Return the (width, height) of an image without decoding its pixels."""
    try:
        with Image.open(path) as image:
            width, height = image.size
    except (OSError, UnidentifiedImageError, Image.DecompressionBombError) as exc:
        raise DimensionProbeFailed(path, str(exc)) from exc
    return int(width), int(height)
