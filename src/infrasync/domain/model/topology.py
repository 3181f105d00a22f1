"""Infrastructure topology: Model -> Regions -> Hosts -> Components.

Ownership flows strictly downwards. A host records the id of the region that
owns it; the region itself is resolved through the owning ``Model`` so no
object reference cycle exists between the levels.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

    from .component_types import ComponentType

COMPONENT_ID_SEPARATOR = "/"


def component_resource_id(host_id: str, component_id: str) -> str:
    return f"{host_id}{COMPONENT_ID_SEPARATOR}{component_id}"


@dataclass(eq=False, kw_only=True)
class Component:
    id: str
    type: ComponentType


@dataclass(eq=False, kw_only=True)
class Host:
    id: str
    region_id: str
    instance_type: str = ""
    components: dict[str, Component] = field(default_factory=dict[str, Component])

    def add_component(self, component: Component) -> Component:
        if component.id in self.components:
            raise ValueError(f"Duplicate component id '{component.id}' on host '{self.id}'")
        self.components[component.id] = component
        return component


@dataclass(eq=False, kw_only=True)
class Region:
    id: str
    site: str | None = None
    hosts: dict[str, Host] = field(default_factory=dict[str, Host])

    def add_host(self, host_id: str, *, instance_type: str = "") -> Host:
        if COMPONENT_ID_SEPARATOR in host_id:
            raise ValueError(f"Host id '{host_id}' must not contain '{COMPONENT_ID_SEPARATOR}'")
        if host_id in self.hosts:
            raise ValueError(f"Duplicate host id '{host_id}' in region '{self.id}'")
        host = Host(id=host_id, region_id=self.id, instance_type=instance_type)
        self.hosts[host_id] = host
        return host


@dataclass(eq=False, kw_only=True)
class Model:
    """Full desired or reconstructed topology for one instance."""

    id: str
    regions: dict[str, Region] = field(default_factory=dict[str, Region])

    def add_region(self, region_id: str, *, site: str | None = None) -> Region:
        if region_id in self.regions:
            raise ValueError(f"Duplicate region id '{region_id}'")
        region = Region(id=region_id, site=site)
        self.regions[region_id] = region
        return region

    def ensure_region(self, region_id: str) -> Region:
        region = self.regions.get(region_id)
        if region is None:
            region = self.add_region(region_id)
        return region

    def iter_hosts(self) -> Iterator[Host]:
        for region in self.regions.values():
            yield from region.hosts.values()

    def hosts_by_id(self) -> dict[str, Host]:
        """Flatten all regions into a host-id keyed lookup."""

        hosts: dict[str, Host] = {}
        for host in self.iter_hosts():
            if host.id in hosts:
                raise ValueError(
                    f"Host id '{host.id}' appears in regions "
                    f"'{hosts[host.id].region_id}' and '{host.region_id}'"
                )
            hosts[host.id] = host
        return hosts

    def region_of(self, host: Host) -> Region:
        """Resolve the region that owns ``host``."""

        region = self.regions.get(host.region_id)
        if region is None or region.hosts.get(host.id) is not host:
            raise LookupError(f"Host '{host.id}' is not owned by model '{self.id}'")
        return region

    def resource_count(self) -> int:
        return sum(1 + len(host.components) for host in self.iter_hosts())
