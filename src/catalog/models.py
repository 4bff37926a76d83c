"""
Item types, per-type field rules, and the catalog record.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional


class ItemType(str, Enum):
    """Kinds of items the catalog holds."""

    ARCHIVED_AUDIO = "archived-audio"
    ARCHIVED_IMAGE = "archived-image"
    SOFTWARE = "software"
    SCREENSHOT = "screenshot"
    PHYSICAL = "physical"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


@dataclass(frozen=True)
class TypeRules:
    """Which optional fields and grouping rules apply to an item type."""

    dimensions: bool
    multiple_files: bool
    upscaled_versions: bool
    original_source: bool
    creators: bool
    website_url: bool


TYPE_RULES: dict[ItemType, TypeRules] = {
    ItemType.ARCHIVED_AUDIO: TypeRules(
        dimensions=False,
        multiple_files=False,
        upscaled_versions=False,
        original_source=True,
        creators=False,
        website_url=True,
    ),
    ItemType.ARCHIVED_IMAGE: TypeRules(
        dimensions=True,
        multiple_files=False,
        upscaled_versions=True,
        original_source=True,
        creators=False,
        website_url=True,
    ),
    ItemType.SOFTWARE: TypeRules(
        dimensions=True,
        multiple_files=True,
        upscaled_versions=True,
        original_source=False,
        creators=True,
        website_url=True,
    ),
    ItemType.SCREENSHOT: TypeRules(
        dimensions=True,
        multiple_files=False,
        upscaled_versions=True,
        original_source=False,
        creators=False,
        website_url=True,
    ),
    ItemType.PHYSICAL: TypeRules(
        dimensions=True,
        multiple_files=True,
        upscaled_versions=False,
        original_source=False,
        creators=False,
        website_url=False,
    ),
}


def rules_for(item_type: ItemType) -> TypeRules:
    return TYPE_RULES[ItemType(item_type)]


@dataclass(frozen=True)
class ItemRecord:
    """A catalog entry. `item_id` stays None until the database has assigned one."""

    name: str
    item_type: ItemType
    file_set: tuple[str, ...]
    date_added: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    description: str = ""
    tags: tuple[str, ...] = ()
    display_width: Optional[int] = None
    display_height: Optional[int] = None
    original_source_url: Optional[str] = None
    creators: Optional[tuple[str, ...]] = None
    website_url: Optional[str] = None
    item_id: Optional[str] = None

    def with_id(self, item_id: str) -> "ItemRecord":
        return replace(self, item_id=item_id)

    def to_document(self) -> dict[str, Any]:
        """Serialize to the stored document, omitting fields the type does not carry."""
        rules = rules_for(self.item_type)
        document: dict[str, Any] = {}
        if self.item_id is not None:
            document["id"] = self.item_id
        document["name"] = self.name
        document["type"] = ItemType(self.item_type).value
        document["dateAdded"] = self.date_added.isoformat()
        document["fileSet"] = list(self.file_set)
        if rules.dimensions:
            document["displayWidth"] = self.display_width
            document["displayHeight"] = self.display_height
        if rules.original_source:
            document["originalSourceURL"] = self.original_source_url
        if rules.creators:
            document["creators"] = list(self.creators or ())
        if rules.website_url:
            document["websiteURL"] = self.website_url
        document["description"] = self.description
        document["tags"] = list(self.tags)
        return document

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "ItemRecord":
        creators = document.get("creators")
        return cls(
            item_id=document.get("id"),
            name=document["name"],
            item_type=ItemType(document["type"]),
            date_added=datetime.fromisoformat(document["dateAdded"]),
            file_set=tuple(document.get("fileSet", [])),
            description=document.get("description", ""),
            tags=tuple(document.get("tags", [])),
            display_width=document.get("displayWidth"),
            display_height=document.get("displayHeight"),
            original_source_url=document.get("originalSourceURL"),
            creators=tuple(creators) if creators is not None else None,
            website_url=document.get("websiteURL"),
        )
