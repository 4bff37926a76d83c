"""
Interactive construction of catalog records from staged files.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Callable, Optional, Sequence

from prompts import OperatorPrompt
from staging import DEFAULT_UPSCALED_MARKER, reconcile, select_anchor

from .models import ItemRecord, ItemType, rules_for

DimensionProbe = Callable[[Path], tuple[int, int]]


class ItemSchemaBuilder:
    """Collect the fields an item's type calls for into an unsaved ItemRecord."""

    def __init__(
        self,
        prompter: OperatorPrompt,
        probe: DimensionProbe,
        staging_root: Path,
        upscaled_marker: str = DEFAULT_UPSCALED_MARKER,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.prompter = prompter
        self.probe = probe
        self.staging_root = staging_root
        self.upscaled_marker = upscaled_marker
        self.logger = logger or logging.getLogger("archive_catalog")

    def build(self, listing: Sequence[str]) -> ItemRecord:
        """Build the next item in the listing. Staging errors propagate unchanged."""
        anchor = select_anchor(listing, self.upscaled_marker)
        self.prompter.info(f"FILE NAME: {anchor}")

        item_type = ItemType(self.prompter.choose("TYPE", ItemType.values()))
        rules = rules_for(item_type)
        file_set = reconcile(listing, item_type, self.upscaled_marker)
        self.logger.info("Reconciled %s as %s: %s", anchor, item_type.value, ", ".join(file_set))

        width = height = None
        if rules.dimensions:
            width, height = self.probe(self.staging_root / anchor)

        source_url = None
        if rules.original_source:
            name = Path(anchor).stem
            source_url = self.prompter.ask("SOURCE")
        else:
            name = self.prompter.ask("ITEM NAME")

        creators = None
        if rules.creators:
            creators = tuple(self.prompter.collect_list("CREATOR NAME", "ENTER ANOTHER CREATOR?"))

        website_url = self.prompter.ask("FOUND AT") if rules.website_url else None
        description = self.prompter.ask("DESCRIPTION")
        tags = tuple(self.prompter.collect_list("TAG", "ENTER ANOTHER TAG?"))

        return ItemRecord(
            name=name,
            item_type=item_type,
            file_set=file_set,
            description=description,
            tags=tags,
            display_width=width,
            display_height=height,
            original_source_url=source_url,
            creators=creators,
            website_url=website_url,
        )

    def review(self, record: ItemRecord) -> bool:
        """Show the assembled record. Returns True to commit, False to redo the item."""
        self.prompter.info("FINAL DATA TO BE ADDED:\n" + json.dumps(record.to_document(), indent=4))
        return self.prompter.confirm("DOES THIS LOOK CORRECT?")
