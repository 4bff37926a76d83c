"""
Cloud storage integration.
"""

from .storage import BlobDeletionStats, ObjectStore

__all__ = ["BlobDeletionStats", "ObjectStore"]
