"""
Configuration package for the archive cataloger.
"""

from .settings import AppConfig, ensure_directories

__all__ = ["AppConfig", "ensure_directories"]
