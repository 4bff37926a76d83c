"""
File metadata helpers.
"""

from .dimensions import probe_dimensions

__all__ = ["probe_dimensions"]
