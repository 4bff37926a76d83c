import io
from pathlib import Path
from typing import Iterable

import pytest
from rich.console import Console

from cloud import ObjectStore
from database import DatabaseManager
from prompts import OperatorPrompt


class FakeBlob:
    """Stand-in for google.cloud.storage.Blob backed by FakeBucket.objects."""

    def __init__(self, bucket: "FakeBucket", name: str) -> None:
        self.bucket = bucket
        self.name = name

    def upload_from_filename(self, filename: str) -> None:
        if self.name.rsplit("/", 1)[-1] in self.bucket.fail_upload_names:
            raise RuntimeError(f"simulated upload failure for {self.name}")
        self.bucket.objects[self.name] = Path(filename).read_bytes()
        self.bucket.upload_order.append(self.name)

    def delete(self) -> None:
        if self.name in self.bucket.fail_delete_keys:
            raise RuntimeError(f"simulated delete failure for {self.name}")
        del self.bucket.objects[self.name]


class FakeBucket:
    name = "test-bucket"

    def __init__(self) -> None:
        self.objects: dict[str, bytes] = {}
        self.upload_order: list[str] = []
        self.fail_upload_names: set[str] = set()
        self.fail_delete_keys: set[str] = set()

    def blob(self, name: str) -> FakeBlob:
        return FakeBlob(self, name)

    def list_blobs(self, prefix: str = "") -> list[FakeBlob]:
        return [FakeBlob(self, name) for name in sorted(self.objects) if name.startswith(prefix)]


@pytest.fixture
def bucket() -> FakeBucket:
    return FakeBucket()


@pytest.fixture
def object_store(bucket: FakeBucket) -> ObjectStore:
    return ObjectStore(bucket, delete_workers=4)


@pytest.fixture
def db_manager(tmp_path: Path):
    manager = DatabaseManager(tmp_path / "data" / "catalog.sqlite")
    manager.initialize()
    yield manager
    manager.close()


@pytest.fixture
def staging(tmp_path: Path) -> Path:
    path = tmp_path / "staging"
    path.mkdir()
    return path


@pytest.fixture
def catalog_root(tmp_path: Path) -> Path:
    path = tmp_path / "cataloged"
    path.mkdir()
    return path


@pytest.fixture
def make_prompter():
    def build(answers: Iterable[str]) -> OperatorPrompt:
        stream = io.StringIO("".join(f"{answer}\n" for answer in answers))
        console = Console(file=io.StringIO(), force_terminal=False, width=120)
        return OperatorPrompt(console=console, stream=stream)

    return build


@pytest.fixture
def stage_files():
    def write(root: Path, *names: str) -> None:
        for name in names:
            (root / name).write_bytes(f"contents of {name}".encode("utf-8"))

    return write
