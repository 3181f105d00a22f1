from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from infrasync.adapters.filesystem import FileResourceStore
from infrasync.adapters.memory import InMemoryResourceStore
from infrasync.adapters.sqlalchemy import SqlAlchemyResourceStore
from infrasync.domain.registry import ComponentTypeRegistry, default_registry

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from infrasync.domain.ports import ResourceStore


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("INFRASYNC_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("INFRASYNC_STORE", raising=False)
    monkeypatch.delenv("INFRASYNC_DATABASE_URI", raising=False)


@pytest.fixture
def registry() -> ComponentTypeRegistry:
    return default_registry()


@pytest.fixture
def memory_store() -> InMemoryResourceStore:
    return InMemoryResourceStore()


@pytest.fixture
def file_store(tmp_path: Path) -> FileResourceStore:
    return FileResourceStore(tmp_path / "instances")


@pytest.fixture
def sqlite_store() -> Iterator[SqlAlchemyResourceStore]:
    store = SqlAlchemyResourceStore.from_uri("sqlite+pysqlite:///:memory:")
    try:
        yield store
    finally:
        store.dispose()


@pytest.fixture(params=["memory", "file", "sqlite"])
def any_store(
    request: pytest.FixtureRequest,
    memory_store: InMemoryResourceStore,
    file_store: FileResourceStore,
    sqlite_store: SqlAlchemyResourceStore,
) -> ResourceStore:
    stores: dict[str, ResourceStore] = {
        "memory": memory_store,
        "file": file_store,
        "sqlite": sqlite_store,
    }
    return stores[request.param]
