from __future__ import annotations

from pathlib import Path  # noqa: TC003

import pytest

from infrasync.config import (
    InvalidConfigurationError,
    StorageConfig,
    StoreBackend,
    get_storage_config,
    parse_backend,
)
from infrasync.config.storage import DEFAULT_DB_FILENAME


def test_get_storage_config_prefers_explicit_env(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    custom = tmp_path / "custom-data"
    monkeypatch.setenv("INFRASYNC_DATA_DIR", str(custom))

    config = get_storage_config()

    assert config.resolve_data_dir() == custom.resolve()
    assert config.backend is StoreBackend.FILE


def test_default_data_dir_follows_xdg(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("INFRASYNC_DATA_DIR", raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg"))

    config = get_storage_config()

    assert config.resolve_data_dir() == (tmp_path / "xdg" / "infrasync").resolve()


def test_backend_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INFRASYNC_STORE", " SQLite ")

    assert get_storage_config().backend is StoreBackend.SQLITE


def test_unknown_backend_rejected() -> None:
    with pytest.raises(InvalidConfigurationError, match="memory, file, sqlite"):
        parse_backend("cloud")


def test_instances_dir_layout(tmp_path: Path) -> None:
    config = StorageConfig(data_dir=tmp_path)

    assert config.instances_dir() == tmp_path.resolve() / "instances"


def test_database_uri_uses_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INFRASYNC_DATABASE_URI", "sqlite:///override.db")

    assert get_storage_config().database_uri() == "sqlite:///override.db"


def test_database_uri_creates_data_dir(tmp_path: Path) -> None:
    config = StorageConfig(data_dir=tmp_path / "data-dir")

    uri = config.database_uri()

    expected_path = (tmp_path / "data-dir" / DEFAULT_DB_FILENAME).resolve()
    assert uri == f"sqlite+pysqlite:///{expected_path}"
    assert expected_path.parent.exists()


def test_with_helpers_return_copies(tmp_path: Path) -> None:
    config = StorageConfig(data_dir=tmp_path)

    changed = config.with_backend("memory").with_data_dir(tmp_path / "other")

    assert config.backend is StoreBackend.FILE
    assert changed.backend is StoreBackend.MEMORY
    assert changed.data_dir == tmp_path / "other"
