"""Load declarative topology documents into domain ``Model`` trees."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import yaml
from pydantic import ValidationError

from infrasync.domain.model import BaseComponentType, Component, Model

from .schema import TopologyDocument
from .validation import validate_document

if TYPE_CHECKING:
    from pathlib import Path

    from infrasync.domain.model import Host
    from infrasync.domain.registry import ComponentTypeRegistry

    from .schema import ComponentSpec
    from .validation import ValidationResult

log = getLogger(__name__)


class ModelLoadError(ValueError):
    """Raised when a topology document cannot be read or parsed."""


class ModelValidationError(ModelLoadError):
    """Raised when a topology document parses but fails validation."""

    def __init__(self, result: ValidationResult) -> None:
        details = "; ".join(str(issue) for issue in result.errors)
        super().__init__(f"Invalid topology document: {details}")
        self.result = result


def parse_document(text: str) -> TopologyDocument:
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ModelLoadError(f"Failed to parse YAML: {exc}") from exc
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ModelLoadError("Topology document must be a mapping at the top level")
    try:
        return TopologyDocument.model_validate(raw)
    except ValidationError as exc:
        raise ModelLoadError(f"Malformed topology document: {exc}") from exc


def read_document(path: Path) -> TopologyDocument:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ModelLoadError(f"Failed to read {path}: {exc}") from exc
    return parse_document(text)


def validate_text(text: str, registry: ComponentTypeRegistry) -> ValidationResult:
    return validate_document(parse_document(text), registry)


def validate_file(path: Path, registry: ComponentTypeRegistry) -> ValidationResult:
    return validate_document(read_document(path), registry)


def load_model_from_text(text: str, registry: ComponentTypeRegistry) -> Model:
    return _validated_model(parse_document(text), registry)


def load_model(path: Path, registry: ComponentTypeRegistry) -> Model:
    model = _validated_model(read_document(path), registry)
    log.info(
        "Loaded model '%s' from %s: %d region(s), %d host(s)",
        model.id,
        path,
        len(model.regions),
        len(model.hosts_by_id()),
    )
    return model


def _validated_model(document: TopologyDocument, registry: ComponentTypeRegistry) -> Model:
    result = validate_document(document, registry)
    for warning in result.warnings:
        log.warning("%s", warning)
    if not result.is_valid:
        raise ModelValidationError(result)
    return build_model(document, registry)


def build_model(document: TopologyDocument, registry: ComponentTypeRegistry) -> Model:
    """Translate ``document`` into a ``Model``.

    Raises ``UnknownComponentTypeError`` for unregistered component types.
    """

    model = Model(id=document.model.id)
    for region_id, region_spec in document.regions.items():
        region = model.add_region(region_id, site=region_spec.site)
        for host_id, host_spec in region_spec.hosts.items():
            host = region.add_host(host_id, instance_type=host_spec.instance_type)
            for index, component_spec in enumerate(host_spec.components):
                _add_component(host, index, component_spec, registry)
    return model


def _add_component(
    host: Host,
    index: int,
    component_spec: ComponentSpec,
    registry: ComponentTypeRegistry,
) -> None:
    component_type = registry.lookup(component_spec.type)
    settings = component_spec.settings()
    if settings:
        if not isinstance(component_type, BaseComponentType):
            raise ModelLoadError(f"Component type '{component_spec.type}' accepts no settings")
        component_type.configure(**settings)
    component_id = component_spec.id or f"{component_spec.type}-{index}"
    host.add_component(Component(id=component_id, type=component_type))
