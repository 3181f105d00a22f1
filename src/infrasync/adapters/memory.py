"""In-memory resource store for tests and ephemeral sessions.

Nothing is durable. Reads run concurrently under a shared lock and always
return copies so callers cannot mutate the stored mappings.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from infrasync.common.locks import ReadWriteLock
from infrasync.domain.errors import InstanceNotFoundError

if TYPE_CHECKING:
    from infrasync.domain.model import InstanceLabel, ResourceState


class InMemoryResourceStore:
    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._labels: dict[str, InstanceLabel] = {}
        self._resources: dict[str, dict[str, ResourceState]] = {}

    def get_status(self, instance_id: str) -> InstanceLabel:
        with self._lock.read():
            label = self._labels.get(instance_id)
        if label is None:
            raise InstanceNotFoundError(instance_id)
        return label

    def save_status(self, instance_id: str, label: InstanceLabel) -> None:
        with self._lock.write():
            self._labels[instance_id] = label

    def list_instances(self) -> list[str]:
        with self._lock.read():
            return sorted(self._labels)

    def get_resources(self, instance_id: str) -> dict[str, ResourceState]:
        with self._lock.read():
            return dict(self._resources.get(instance_id, {}))

    def save_resource(self, instance_id: str, resource: ResourceState) -> None:
        with self._lock.write():
            resources = self._resources.setdefault(instance_id, {})
            resources[resource.id] = resource.upserted_over(resources.get(resource.id))

    def delete_resource(self, instance_id: str, resource_id: str) -> None:
        with self._lock.write():
            resources = self._resources.get(instance_id)
            if resources is not None:
                resources.pop(resource_id, None)


if TYPE_CHECKING:
    from infrasync.domain.ports import ResourceStore

    _store_check: ResourceStore = InMemoryResourceStore()
