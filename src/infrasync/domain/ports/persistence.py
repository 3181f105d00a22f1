"""Ports for persisting instance labels and applied resources."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from infrasync.domain.model import InstanceLabel, ResourceState


@runtime_checkable
class StatusStore(Protocol):
    """Per-instance status records.

    ``get_status`` raises ``InstanceNotFoundError`` for unknown instances.
    """

    def get_status(self, instance_id: str) -> InstanceLabel: ...

    def save_status(self, instance_id: str, label: InstanceLabel) -> None: ...

    def list_instances(self) -> list[str]: ...


@runtime_checkable
class ResourceStore(StatusStore, Protocol):
    """Resource-level tracking on top of the status store.

    ``get_resources`` returns an empty mapping (not an error) when nothing has
    been stored for the instance; ``delete_resource`` is a no-op for unknown ids.
    Failures surface as ``StoreLoadError`` / ``StoreWriteError``.
    """

    def get_resources(self, instance_id: str) -> dict[str, ResourceState]: ...

    def save_resource(self, instance_id: str, resource: ResourceState) -> None: ...

    def delete_resource(self, instance_id: str, resource_id: str) -> None: ...
