from pathlib import Path

import pytest

from config import AppConfig
from config.settings import ENV_CONFIG_PATH


def test_config_resolves_paths(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("paths:\n  logs: \"logs\"\n", encoding="utf-8")

    config = AppConfig.load(config_path)
    logs_path = config.resolve_path("paths", "logs")

    assert logs_path == config_path.parent / "logs"
    assert config.get("missing", default=123) == 123


def test_config_path_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "custom.yaml"
    config_path.write_text("storage:\n  delete_workers: 3\n", encoding="utf-8")
    monkeypatch.setenv(ENV_CONFIG_PATH, str(config_path))

    config = AppConfig.load()

    assert config.root_dir == tmp_path
    assert config.get("storage", "delete_workers") == 3


def test_string_values_expand_environment_variables(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("storage:\n  bucket: \"${GCS_BUCKETNAME}\"\n", encoding="utf-8")
    monkeypatch.setenv("GCS_BUCKETNAME", "archive-bucket")

    config = AppConfig.load(config_path)

    assert config.require("storage", "bucket") == "archive-bucket"


def test_require_rejects_missing_and_empty_values(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("storage:\n  bucket: \"\"\n  project: null\n", encoding="utf-8")

    config = AppConfig.load(config_path)

    for keys in (("storage", "bucket"), ("storage", "project"), ("storage", "missing")):
        with pytest.raises(KeyError):
            config.require(*keys)


def test_missing_config_file_is_reported(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        AppConfig.load(tmp_path / "absent.yaml")
