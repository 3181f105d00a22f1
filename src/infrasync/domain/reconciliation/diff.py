"""Difference between a desired and a current topology.

``compute_diff`` is pure: it reads both models and returns ordered change
lists without touching any store. Hosts are matched by id across all regions,
components by id within their host.

Ordering contract relied on by the reconciler:
- a created host precedes its created components
- a deleted host's component deletions precede the host deletion
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from infrasync.domain.model import (
    COMPONENT_TYPE_KEY,
    INSTANCE_TYPE_KEY,
    ResourceKind,
    component_resource_id,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

    from infrasync.domain.model import Component, Host, Model


class Action(StrEnum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True, slots=True, kw_only=True)
class ResourceChange:
    """One resource to create, update or delete."""

    id: str
    kind: ResourceKind
    region_id: str
    host_id: str
    action: Action
    component_id: str | None = None
    changes: tuple[str, ...] = ()
    old_metadata: dict[str, str] = field(default_factory=dict[str, str])
    new_metadata: dict[str, str] = field(default_factory=dict[str, str])


@dataclass(slots=True)
class Diff:
    to_create: list[ResourceChange] = field(default_factory=list[ResourceChange])
    to_update: list[ResourceChange] = field(default_factory=list[ResourceChange])
    to_delete: list[ResourceChange] = field(default_factory=list[ResourceChange])

    def is_empty(self) -> bool:
        return not (self.to_create or self.to_update or self.to_delete)

    def total(self) -> int:
        return len(self.to_create) + len(self.to_update) + len(self.to_delete)

    def changes(self) -> Iterator[ResourceChange]:
        """Iterate every change in apply order."""

        yield from self.to_create
        yield from self.to_update
        yield from self.to_delete

    def changed_ids(self) -> set[str]:
        return {change.id for change in self.changes()}

    def extend(self, other: Diff) -> None:
        self.to_create.extend(other.to_create)
        self.to_update.extend(other.to_update)
        self.to_delete.extend(other.to_delete)


def compute_diff(desired: Model | None, current: Model | None) -> Diff:
    """Compute the changes that move ``current`` toward ``desired``."""

    diff = Diff()
    desired_hosts = _collect_hosts(desired)
    current_hosts = _collect_hosts(current)

    for host_id, desired_host in desired_hosts.items():
        current_host = current_hosts.get(host_id)
        if current_host is None:
            diff.to_create.append(_host_change(desired_host, Action.CREATE))
            diff.to_create.extend(
                _component_change(desired_host, component, Action.CREATE)
                for component in desired_host.components.values()
            )
            continue

        host_changes = _detect_host_changes(desired_host, current_host)
        if host_changes:
            diff.to_update.append(
                _host_change(
                    desired_host,
                    Action.UPDATE,
                    changes=host_changes,
                    old_metadata=_host_metadata(current_host),
                )
            )
        diff.extend(_compute_component_diff(desired_host, current_host))

    for host_id, current_host in current_hosts.items():
        if host_id in desired_hosts:
            continue
        diff.to_delete.extend(
            _component_change(
                current_host,
                component,
                Action.DELETE,
                old_metadata=_component_metadata(component),
            )
            for component in current_host.components.values()
        )
        diff.to_delete.append(
            _host_change(current_host, Action.DELETE, old_metadata=_host_metadata(current_host))
        )

    return diff


def _collect_hosts(model: Model | None) -> dict[str, Host]:
    if model is None:
        return {}
    return model.hosts_by_id()


def _detect_host_changes(desired: Host, current: Host) -> tuple[str, ...]:
    changes: list[str] = []
    if desired.instance_type != current.instance_type:
        changes.append(INSTANCE_TYPE_KEY)
    return tuple(changes)


def _compute_component_diff(desired_host: Host, current_host: Host) -> Diff:
    diff = Diff()
    desired_components = desired_host.components
    current_components = current_host.components

    for component_id, desired_component in desired_components.items():
        current_component = current_components.get(component_id)
        if current_component is None:
            diff.to_create.append(_component_change(desired_host, desired_component, Action.CREATE))
        elif desired_component.type.label != current_component.type.label:
            diff.to_update.append(
                _component_change(
                    desired_host,
                    desired_component,
                    Action.UPDATE,
                    changes=(COMPONENT_TYPE_KEY,),
                    old_metadata=_component_metadata(current_component),
                )
            )

    diff.to_delete.extend(
        _component_change(
            current_host,
            current_component,
            Action.DELETE,
            old_metadata=_component_metadata(current_component),
        )
        for component_id, current_component in current_components.items()
        if component_id not in desired_components
    )
    return diff


def _host_metadata(host: Host) -> dict[str, str]:
    return {INSTANCE_TYPE_KEY: host.instance_type}


def _component_metadata(component: Component) -> dict[str, str]:
    return {COMPONENT_TYPE_KEY: component.type.label}


def _host_change(
    host: Host,
    action: Action,
    *,
    changes: tuple[str, ...] = (),
    old_metadata: dict[str, str] | None = None,
) -> ResourceChange:
    return ResourceChange(
        id=host.id,
        kind=ResourceKind.HOST,
        region_id=host.region_id,
        host_id=host.id,
        action=action,
        changes=changes,
        old_metadata=old_metadata or {},
        new_metadata={} if action is Action.DELETE else _host_metadata(host),
    )


def _component_change(
    host: Host,
    component: Component,
    action: Action,
    *,
    changes: tuple[str, ...] = (),
    old_metadata: dict[str, str] | None = None,
) -> ResourceChange:
    return ResourceChange(
        id=component_resource_id(host.id, component.id),
        kind=ResourceKind.COMPONENT,
        region_id=host.region_id,
        host_id=host.id,
        component_id=component.id,
        action=action,
        changes=changes,
        old_metadata=old_metadata or {},
        new_metadata={} if action is Action.DELETE else _component_metadata(component),
    )
