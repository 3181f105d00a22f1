"""Rebuild a current-state ``Model`` from persisted resource records.

Both host and component records are folded back into the tree so that the
next diff sees everything that was applied. Components are attached to their
host by the ``hostId`` metadata (falling back to the id prefix); when the host
record itself is missing, a host is synthesised from the component metadata so
the orphaned component can still be diffed away.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from infrasync.domain.model import (
    COMPONENT_ID_KEY,
    COMPONENT_TYPE_KEY,
    HOST_ID_KEY,
    INSTANCE_TYPE_KEY,
    REGION_ID_KEY,
    Component,
    Model,
    RecordedComponentType,
    ResourceKind,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from infrasync.domain.model import Host, ResourceState

DEFAULT_REGION_ID: Final[str] = "default"

_RESERVED_COMPONENT_KEYS: Final[frozenset[str]] = frozenset(
    {REGION_ID_KEY, HOST_ID_KEY, COMPONENT_ID_KEY, COMPONENT_TYPE_KEY}
)


def build_model_from_resources(
    resources: Mapping[str, ResourceState],
    *,
    model_id: str = "",
) -> Model:
    """Reconstruct the applied topology described by ``resources``."""

    model = Model(id=model_id)
    hosts: dict[str, Host] = {}

    host_records = [res for res in resources.values() if res.kind is ResourceKind.HOST]
    component_records = [
        res for res in resources.values() if res.kind is ResourceKind.COMPONENT
    ]

    for record in sorted(host_records, key=lambda res: res.id):
        region = model.ensure_region(record.region_id or DEFAULT_REGION_ID)
        hosts[record.id] = region.add_host(
            record.id,
            instance_type=record.metadata.get(INSTANCE_TYPE_KEY, ""),
        )

    for record in sorted(component_records, key=lambda res: res.id):
        host = hosts.get(record.host_id)
        if host is None:
            region = model.ensure_region(record.region_id or DEFAULT_REGION_ID)
            host = region.add_host(record.host_id)
            hosts[host.id] = host
        component_id = record.component_id
        if component_id is None:  # pragma: no cover - guarded by ResourceState
            continue
        host.add_component(
            Component(
                id=component_id,
                type=RecordedComponentType(
                    recorded_label=record.metadata.get(COMPONENT_TYPE_KEY, ""),
                    attributes={
                        key: value
                        for key, value in record.metadata.items()
                        if key not in _RESERVED_COMPONENT_KEYS
                    },
                ),
            )
        )

    return model
