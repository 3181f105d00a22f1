"""Persisted records: applied resources and per-instance labels."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from .enums import InstanceState, ResourceKind, ResourceStatus
from .topology import COMPONENT_ID_SEPARATOR

if TYPE_CHECKING:
    from collections.abc import Mapping

REGION_ID_KEY: Final[str] = "regionId"
HOST_ID_KEY: Final[str] = "hostId"
COMPONENT_ID_KEY: Final[str] = "componentId"
INSTANCE_TYPE_KEY: Final[str] = "instanceType"
COMPONENT_TYPE_KEY: Final[str] = "componentType"


def utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True, kw_only=True)
class ResourceState:
    """Persisted form of one applied host or component."""

    id: str
    kind: ResourceKind
    status: ResourceStatus = ResourceStatus.PENDING
    metadata: Mapping[str, str] = field(default_factory=dict[str, str])
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", ResourceKind(self.kind))
        object.__setattr__(self, "status", ResourceStatus(self.status))
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))
        expected = (
            ResourceKind.COMPONENT if COMPONENT_ID_SEPARATOR in self.id else ResourceKind.HOST
        )
        if self.kind is not expected:
            raise ValueError(f"Resource id '{self.id}' does not name a {self.kind} resource")

    @property
    def host_id(self) -> str:
        """Owning host id, derived from metadata or the id naming convention."""

        return self.metadata.get(HOST_ID_KEY) or self.id.split(COMPONENT_ID_SEPARATOR, 1)[0]

    @property
    def component_id(self) -> str | None:
        if self.kind is not ResourceKind.COMPONENT:
            return None
        return (
            self.metadata.get(COMPONENT_ID_KEY) or self.id.split(COMPONENT_ID_SEPARATOR, 1)[1]
        )

    @property
    def region_id(self) -> str | None:
        return self.metadata.get(REGION_ID_KEY) or None

    def upserted_over(self, previous: ResourceState | None) -> ResourceState:
        """Return the record to store when replacing ``previous`` by id."""

        if previous is None:
            return self
        return replace(self, created_at=min(previous.created_at, self.created_at))


@dataclass(frozen=True, slots=True, kw_only=True)
class InstanceLabel:
    """Status record of one tracked instance."""

    instance_id: str
    model_id: str = ""
    state: InstanceState = InstanceState.CREATED
    bindings: Mapping[str, str] = field(default_factory=dict[str, str])
    updated_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        object.__setattr__(self, "state", InstanceState(self.state))
        object.__setattr__(self, "bindings", MappingProxyType(dict(self.bindings)))

    def with_state(self, state: InstanceState) -> InstanceLabel:
        return replace(self, state=state, updated_at=utcnow())
