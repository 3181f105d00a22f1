from __future__ import annotations

from datetime import UTC, datetime

import pytest

from infrasync.domain.model import (
    COMPONENT_ID_KEY,
    HOST_ID_KEY,
    REGION_ID_KEY,
    InstanceLabel,
    InstanceState,
    ResourceKind,
    ResourceState,
    ResourceStatus,
)


def test_resource_state_coerces_enums() -> None:
    state = ResourceState(id="h1", kind="host", status="running")

    assert state.kind is ResourceKind.HOST
    assert state.status is ResourceStatus.RUNNING


def test_resource_state_rejects_kind_mismatch() -> None:
    with pytest.raises(ValueError, match="h1/c1"):
        ResourceState(id="h1/c1", kind=ResourceKind.HOST)
    with pytest.raises(ValueError, match="h1"):
        ResourceState(id="h1", kind=ResourceKind.COMPONENT)


def test_metadata_is_read_only_copy() -> None:
    source = {REGION_ID_KEY: "r1"}
    state = ResourceState(id="h1", kind=ResourceKind.HOST, metadata=source)
    source[REGION_ID_KEY] = "changed"

    assert state.metadata[REGION_ID_KEY] == "r1"
    with pytest.raises(TypeError):
        state.metadata[REGION_ID_KEY] = "x"  # type: ignore[index]


def test_component_ids_fall_back_to_id_convention() -> None:
    state = ResourceState(id="h1/c1", kind=ResourceKind.COMPONENT)

    assert state.host_id == "h1"
    assert state.component_id == "c1"
    assert state.region_id is None


def test_component_ids_prefer_metadata() -> None:
    state = ResourceState(
        id="h1/c1",
        kind=ResourceKind.COMPONENT,
        metadata={HOST_ID_KEY: "h1", COMPONENT_ID_KEY: "c1", REGION_ID_KEY: "r9"},
    )

    assert state.region_id == "r9"
    assert state.component_id == "c1"


def test_upsert_keeps_earliest_created_at() -> None:
    early = datetime(2024, 1, 1, tzinfo=UTC)
    late = datetime(2024, 6, 1, tzinfo=UTC)
    previous = ResourceState(id="h1", kind=ResourceKind.HOST, created_at=early, updated_at=early)
    incoming = ResourceState(id="h1", kind=ResourceKind.HOST, created_at=late, updated_at=late)

    stored = incoming.upserted_over(previous)

    assert stored.created_at == early
    assert stored.updated_at == late
    assert incoming.upserted_over(None) is incoming


def test_label_with_state_advances_timestamp() -> None:
    stamp = datetime(2024, 1, 1, tzinfo=UTC)
    label = InstanceLabel(instance_id="demo", bindings={"k": "v"}, updated_at=stamp)

    failed = label.with_state(InstanceState.FAILED)

    assert label.state is InstanceState.CREATED
    assert failed.state is InstanceState.FAILED
    assert failed.updated_at > stamp
    assert dict(failed.bindings) == {"k": "v"}
