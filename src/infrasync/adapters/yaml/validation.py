"""Structural validation of a parsed topology document.

Validation collects every problem instead of stopping at the first one so
that a user can fix a document in one pass. Errors block loading; warnings
are reported but do not.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from infrasync.domain.errors import UnknownComponentTypeError
from infrasync.domain.model import BaseComponentType

if TYPE_CHECKING:
    from infrasync.domain.registry import ComponentTypeRegistry

    from .schema import HostSpec, RegionSpec, TopologyDocument

VALID_ID_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[a-zA-Z][a-zA-Z0-9_-]*$")


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


@dataclass(slots=True)
class ValidationResult:
    errors: list[ValidationIssue] = field(default_factory=list[ValidationIssue])
    warnings: list[ValidationIssue] = field(default_factory=list[ValidationIssue])

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add_error(self, path: str, message: str) -> None:
        self.errors.append(ValidationIssue(path, message))

    def add_warning(self, path: str, message: str) -> None:
        self.warnings.append(ValidationIssue(path, message))


def validate_document(
    document: TopologyDocument,
    registry: ComponentTypeRegistry,
) -> ValidationResult:
    result = ValidationResult()
    _validate_model(document, result)
    _validate_regions(document, registry, result)
    return result


def _validate_model(document: TopologyDocument, result: ValidationResult) -> None:
    model_id = document.model.id
    if not model_id:
        result.add_error("model.id", "model id is required")
    elif not VALID_ID_PATTERN.match(model_id):
        result.add_error(
            "model.id",
            "invalid id format: must start with a letter and contain only "
            "alphanumerics, hyphens and underscores",
        )


def _validate_regions(
    document: TopologyDocument,
    registry: ComponentTypeRegistry,
    result: ValidationResult,
) -> None:
    if not document.regions:
        result.add_warning("regions", "no regions defined")
        return

    host_owners: dict[str, str] = {}
    for region_id, region in document.regions.items():
        path = f"regions.{region_id}"
        if not VALID_ID_PATTERN.match(region_id):
            result.add_error(path, "invalid region id format")
        _validate_hosts(region, path, host_owners, region_id, registry, result)


def _validate_hosts(
    region: RegionSpec,
    base_path: str,
    host_owners: dict[str, str],
    region_id: str,
    registry: ComponentTypeRegistry,
    result: ValidationResult,
) -> None:
    if not region.hosts:
        result.add_warning(f"{base_path}.hosts", "no hosts defined in region")
        return

    for host_id, host in region.hosts.items():
        path = f"{base_path}.hosts.{host_id}"
        if not VALID_ID_PATTERN.match(host_id):
            result.add_error(path, "invalid host id format")
        owner = host_owners.setdefault(host_id, region_id)
        if owner != region_id:
            result.add_error(path, f"duplicate host id (already defined in region '{owner}')")
        _validate_components(host, path, registry, result)


def _validate_components(
    host: HostSpec,
    base_path: str,
    registry: ComponentTypeRegistry,
    result: ValidationResult,
) -> None:
    seen_ids: set[str] = set()
    for index, component in enumerate(host.components):
        path = f"{base_path}.components[{index}]"

        component_id = component.id or f"{component.type}-{index}"
        if component.id and not VALID_ID_PATTERN.match(component.id):
            result.add_error(f"{path}.id", "invalid component id format")
        if component_id in seen_ids:
            result.add_error(f"{path}.id", "duplicate component id within host")
        seen_ids.add(component_id)

        if not component.type:
            result.add_error(f"{path}.type", "component type is required")
            continue
        try:
            component_type = registry.lookup(component.type)
        except UnknownComponentTypeError:
            result.add_error(
                f"{path}.type",
                f"unknown component type '{component.type}'. "
                f"Valid types: {', '.join(registry.names())}",
            )
            continue

        settings = component.settings()
        if not settings:
            continue
        if not isinstance(component_type, BaseComponentType):
            result.add_error(path, f"component type '{component.type}' accepts no settings")
            continue
        try:
            component_type.configure(**settings)
        except ValueError as exc:
            result.add_error(path, str(exc))
