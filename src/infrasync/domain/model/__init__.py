"""Domain model for infrastructure topologies and persisted resources."""

from __future__ import annotations

from .component_types import (
    BaseComponentType,
    ComponentType,
    ControllerComponentType,
    GenericComponentType,
    HostSession,
    RecordedComponentType,
    RouterComponentType,
    StartableComponentType,
    supports_start,
)
from .enums import InstanceState, ResourceKind, ResourceStatus, RouterMode
from .resources import (
    COMPONENT_ID_KEY,
    COMPONENT_TYPE_KEY,
    HOST_ID_KEY,
    INSTANCE_TYPE_KEY,
    REGION_ID_KEY,
    InstanceLabel,
    ResourceState,
    utcnow,
)
from .topology import Component, Host, Model, Region, component_resource_id

__all__ = [
    "COMPONENT_ID_KEY",
    "COMPONENT_TYPE_KEY",
    "HOST_ID_KEY",
    "INSTANCE_TYPE_KEY",
    "REGION_ID_KEY",
    "BaseComponentType",
    "Component",
    "ComponentType",
    "ControllerComponentType",
    "GenericComponentType",
    "Host",
    "HostSession",
    "InstanceLabel",
    "InstanceState",
    "Model",
    "RecordedComponentType",
    "Region",
    "ResourceKind",
    "ResourceState",
    "ResourceStatus",
    "RouterComponentType",
    "RouterMode",
    "StartableComponentType",
    "component_resource_id",
    "supports_start",
    "utcnow",
]
