from pathlib import Path

import pytest
from google.api_core import exceptions as api_exceptions

from catalog.errors import ConfigurationError, ObjectStoreUnavailable
from cloud import ObjectStore
from config import AppConfig


def test_upload_stores_file_under_key(tmp_path: Path, bucket, object_store: ObjectStore) -> None:
    source = tmp_path / "clip.wav"
    source.write_bytes(b"wave")

    object_store.upload(source, "abc/clip.wav")

    assert bucket.objects == {"abc/clip.wav": b"wave"}


def test_list_by_prefix_only_returns_that_item(bucket, object_store: ObjectStore) -> None:
    bucket.objects.update({"abc/a.png": b"1", "abc/b.png": b"2", "abcd/c.png": b"3"})

    names = [blob.name for blob in object_store.list_by_prefix("abc/")]

    assert names == ["abc/a.png", "abc/b.png"]


def test_delete_many_counts_failures_without_stopping(bucket, object_store: ObjectStore) -> None:
    bucket.objects.update({"abc/a.png": b"1", "abc/b.png": b"2", "abc/c.png": b"3"})
    bucket.fail_delete_keys.add("abc/b.png")

    stats = object_store.delete_many(object_store.list_by_prefix("abc/"))

    assert stats.deleted == ["abc/a.png", "abc/c.png"]
    assert stats.failed == ["abc/b.png"]
    assert stats.deleted_count == 2
    assert stats.error_count == 1
    assert list(bucket.objects) == ["abc/b.png"]


def test_delete_many_with_nothing_to_delete(object_store: ObjectStore) -> None:
    stats = object_store.delete_many([])

    assert stats.deleted_count == 0
    assert stats.error_count == 0


class UnreachableBucket:
    name = "test-bucket"

    def list_blobs(self, prefix: str = ""):
        raise api_exceptions.ServiceUnavailable("bucket unreachable")


def test_listing_failure_is_fatal() -> None:
    store = ObjectStore(UnreachableBucket())

    with pytest.raises(ObjectStoreUnavailable) as excinfo:
        store.list_by_prefix("abc/")

    assert "gs://test-bucket/abc/" in str(excinfo.value)


def test_missing_bucket_name_is_a_configuration_error(tmp_path: Path) -> None:
    config = AppConfig(root_dir=tmp_path, raw={"storage": {"bucket": ""}})

    with pytest.raises(ConfigurationError) as excinfo:
        ObjectStore.from_config(config)

    assert "storage.bucket" in str(excinfo.value)
