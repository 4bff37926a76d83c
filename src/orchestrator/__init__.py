"""
Orchestration of the catalog and delete workflows.
"""

from .main import CatalogSession, build_session, main

__all__ = ["CatalogSession", "build_session", "main"]
