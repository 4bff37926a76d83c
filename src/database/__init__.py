"""
Database package for schema creation and persistence helpers.
"""

from .manager import DatabaseManager
from .schema import create_catalog_db

__all__ = ["DatabaseManager", "create_catalog_db"]
