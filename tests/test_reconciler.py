from pathlib import Path

import pytest

from catalog.errors import BadSequenceNaming, EmptyStaging, MissingUpscaledFile, NoAnchorFound
from catalog.models import ItemType
from staging import list_staged_files, reconcile, select_anchor


def test_multi_file_group_is_sorted_and_excludes_unrelated_files() -> None:
    listing = sorted(["game-1.png", "game-2.png", "game-10.png", "other.png", "gamepad.png"])

    file_set = reconcile(listing, ItemType.PHYSICAL)

    assert file_set == ("game-1.png", "game-10.png", "game-2.png")


def test_software_pairs_every_sequence_member_with_its_upscaled_file() -> None:
    listing = sorted(["photo-1.png", "photo-2.png", "photo-1-upscaled.png", "photo-2-upscaled.png"])

    file_set = reconcile(listing, ItemType.SOFTWARE)

    assert file_set == (
        "photo-1-upscaled.png",
        "photo-1.png",
        "photo-2-upscaled.png",
        "photo-2.png",
    )


def test_archived_image_takes_only_the_anchor_and_its_upscaled_pair() -> None:
    listing = sorted(["photo-1.png", "photo-2.png", "photo-1-upscaled.png", "photo-2-upscaled.png"])

    file_set = reconcile(listing, ItemType.ARCHIVED_IMAGE)

    assert file_set == ("photo-1-upscaled.png", "photo-1.png")


def test_single_file_type_returns_the_anchor_alone() -> None:
    listing = ["clip.wav", "song.mp3"]

    assert reconcile(listing, ItemType.ARCHIVED_AUDIO) == ("clip.wav",)


def test_screenshot_returns_anchor_plus_upscaled_pair() -> None:
    listing = sorted(["shot.png", "shot-upscaled.png", "zebra.png", "zebra-upscaled.png"])

    assert reconcile(listing, ItemType.SCREENSHOT) == ("shot-upscaled.png", "shot.png")


@pytest.mark.parametrize("item_type", [ItemType.ARCHIVED_IMAGE, ItemType.SCREENSHOT, ItemType.SOFTWARE])
def test_missing_upscaled_file_fails(item_type: ItemType) -> None:
    listing = ["cover-1.png"]

    with pytest.raises(MissingUpscaledFile) as excinfo:
        reconcile(listing, item_type)

    assert excinfo.value.filename == "cover-1.png"


def test_missing_upscaled_file_names_the_unpaired_sequence_member() -> None:
    listing = sorted(["game-1.png", "game-1-upscaled.png", "game-2.png"])

    with pytest.raises(MissingUpscaledFile) as excinfo:
        reconcile(listing, ItemType.SOFTWARE)

    assert excinfo.value.filename == "game-2.png"


def test_upscaled_lookup_does_not_confuse_overlapping_stems() -> None:
    listing = sorted(["photo-1.png", "photo-10.png", "photo-1-upscaled.png", "photo-10-upscaled.png"])

    file_set = reconcile(listing, ItemType.SOFTWARE)

    assert file_set == (
        "photo-1-upscaled.png",
        "photo-1.png",
        "photo-10-upscaled.png",
        "photo-10.png",
    )


@pytest.mark.parametrize(
    "listing, item_type, unpaired",
    [
        (["game-1.png", "game-10-upscaled.png", "game-10.png"], ItemType.SOFTWARE, "game-1.png"),
        (["shot.png", "shot2-upscaled.png", "shot2.png"], ItemType.SCREENSHOT, "shot.png"),
    ],
)
def test_upscaled_file_of_a_longer_stem_is_not_a_pair(
    listing: list[str], item_type: ItemType, unpaired: str
) -> None:
    with pytest.raises(MissingUpscaledFile) as excinfo:
        reconcile(sorted(listing), item_type)

    assert excinfo.value.filename == unpaired


@pytest.mark.parametrize("anchor", ["game.png", "game-2.png", "game-1a.png", "game1.png"])
def test_multi_file_anchor_must_end_in_first_sequence_number(anchor: str) -> None:
    with pytest.raises(BadSequenceNaming) as excinfo:
        reconcile([anchor], ItemType.PHYSICAL)

    assert excinfo.value.filename == anchor


def test_multi_file_group_ignores_upscaled_files_sharing_the_prefix() -> None:
    listing = sorted(["box-1.jpg", "box-2.jpg", "box-upscaled.jpg"])

    assert reconcile(listing, ItemType.PHYSICAL) == ("box-1.jpg", "box-2.jpg")


def test_anchor_skips_upscaled_files() -> None:
    assert select_anchor(["a-upscaled.png", "a.png", "b.png"]) == "a.png"


def test_empty_listing_fails() -> None:
    with pytest.raises(EmptyStaging):
        select_anchor([])


def test_only_upscaled_files_fails() -> None:
    with pytest.raises(NoAnchorFound):
        reconcile(["a-upscaled.png", "b-upscaled.png"], ItemType.SCREENSHOT)


def test_custom_marker_is_respected() -> None:
    listing = ["art.png", "art_x4.png"]

    assert reconcile(listing, ItemType.SCREENSHOT, marker="_x4.") == ("art.png", "art_x4.png")


def test_list_staged_files_skips_housekeeping_entries_and_directories(tmp_path: Path) -> None:
    for name in ("b.png", "a.png", ".gitignore", "desktop.ini"):
        (tmp_path / name).write_text("x", encoding="utf-8")
    (tmp_path / "nested").mkdir()

    assert list_staged_files(tmp_path) == ["a.png", "b.png"]
