"""Behaviour every resource store backend must share."""

from __future__ import annotations

import threading
from datetime import UTC, datetime

import pytest

from infrasync.adapters.sqlalchemy import SqlAlchemyResourceStore
from infrasync.domain.errors import InstanceNotFoundError
from infrasync.domain.model import (
    InstanceLabel,
    InstanceState,
    ResourceKind,
    ResourceState,
    ResourceStatus,
)
from infrasync.domain.ports import ResourceStore

EARLY = datetime(2024, 1, 1, tzinfo=UTC)
LATE = datetime(2024, 3, 1, tzinfo=UTC)


def _host(host_id: str, *, stamp: datetime = EARLY, **metadata: str) -> ResourceState:
    return ResourceState(
        id=host_id,
        kind=ResourceKind.HOST,
        status=ResourceStatus.RUNNING,
        metadata=metadata,
        created_at=stamp,
        updated_at=stamp,
    )


def test_store_satisfies_protocol(any_store: ResourceStore) -> None:
    assert isinstance(any_store, ResourceStore)


def test_unknown_instance_has_no_resources(any_store: ResourceStore) -> None:
    assert any_store.get_resources("missing") == {}


def test_save_and_load_round_trip(any_store: ResourceStore) -> None:
    any_store.save_resource("demo", _host("h1", instanceType="small"))
    component = ResourceState(
        id="h1/c1",
        kind=ResourceKind.COMPONENT,
        status=ResourceStatus.RUNNING,
        metadata={"componentType": "router"},
        created_at=EARLY,
        updated_at=EARLY,
    )
    any_store.save_resource("demo", component)

    loaded = any_store.get_resources("demo")

    assert sorted(loaded) == ["h1", "h1/c1"]
    assert loaded["h1"].metadata["instanceType"] == "small"
    assert loaded["h1/c1"].kind is ResourceKind.COMPONENT
    assert loaded["h1/c1"].created_at == EARLY


def test_upsert_replaces_by_id_and_keeps_created_at(any_store: ResourceStore) -> None:
    any_store.save_resource("demo", _host("h1", instanceType="small"))
    any_store.save_resource("demo", _host("h1", stamp=LATE, instanceType="large"))

    loaded = any_store.get_resources("demo")["h1"]

    assert loaded.metadata["instanceType"] == "large"
    assert loaded.created_at == EARLY
    assert loaded.updated_at == LATE


def test_delete_is_noop_when_absent(any_store: ResourceStore) -> None:
    any_store.save_resource("demo", _host("h1"))

    any_store.delete_resource("demo", "h2")
    any_store.delete_resource("other", "h1")
    any_store.delete_resource("demo", "h1")

    assert any_store.get_resources("demo") == {}


def test_instances_are_isolated(any_store: ResourceStore) -> None:
    any_store.save_resource("a", _host("h1"))
    any_store.save_resource("b", _host("h2"))

    assert list(any_store.get_resources("a")) == ["h1"]
    assert list(any_store.get_resources("b")) == ["h2"]


def test_returned_mapping_is_a_copy(any_store: ResourceStore) -> None:
    any_store.save_resource("demo", _host("h1"))

    any_store.get_resources("demo").clear()

    assert list(any_store.get_resources("demo")) == ["h1"]


def test_status_round_trip(any_store: ResourceStore) -> None:
    label = InstanceLabel(
        instance_id="demo",
        model_id="demo",
        state=InstanceState.RECONCILED,
        bindings={"env": "prod"},
        updated_at=EARLY,
    )

    any_store.save_status("demo", label)
    loaded = any_store.get_status("demo")

    assert loaded.state is InstanceState.RECONCILED
    assert dict(loaded.bindings) == {"env": "prod"}
    assert loaded.updated_at == EARLY
    assert any_store.list_instances() == ["demo"]


def test_missing_status_raises(any_store: ResourceStore) -> None:
    with pytest.raises(InstanceNotFoundError) as excinfo:
        any_store.get_status("ghost")

    assert excinfo.value.instance_id == "ghost"


def test_concurrent_writes_are_all_kept(any_store: ResourceStore) -> None:
    if isinstance(any_store, SqlAlchemyResourceStore):
        pytest.skip("in-memory SQLite shares a single connection")

    def write(index: int) -> None:
        any_store.save_resource("demo", _host(f"h{index}"))

    threads = [threading.Thread(target=write, args=(i,)) for i in range(20)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(any_store.get_resources("demo")) == 20
