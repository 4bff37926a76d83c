"""
Catalog records and the engines that commit and delete them.

Engines live in their own modules (``catalog.builder``, ``catalog.commit``,
``catalog.deletion``) and are imported from there.
"""

from .errors import CatalogError, FatalCatalogError
from .models import ItemRecord, ItemType, TYPE_RULES, TypeRules, rules_for

__all__ = [
    "CatalogError",
    "FatalCatalogError",
    "ItemRecord",
    "ItemType",
    "TYPE_RULES",
    "TypeRules",
    "rules_for",
]
