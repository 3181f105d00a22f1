from __future__ import annotations

from typing import TYPE_CHECKING

from infrasync.adapters.yaml import validate_file, validate_text
from tests.helpers.topologies import EXAMPLE_TOPOLOGY

if TYPE_CHECKING:
    from pathlib import Path

    from infrasync.domain.registry import ComponentTypeRegistry


def _error_paths(text: str, registry: ComponentTypeRegistry) -> list[str]:
    return [issue.path for issue in validate_text(text, registry).errors]


def test_example_topology_is_valid(registry: ComponentTypeRegistry) -> None:
    result = validate_text(EXAMPLE_TOPOLOGY, registry)

    assert result.is_valid
    assert result.warnings == []


def test_model_id_required(registry: ComponentTypeRegistry) -> None:
    assert _error_paths("regions: {}\n", registry) == ["model.id"]


def test_model_id_format(registry: ComponentTypeRegistry) -> None:
    result = validate_text("model: {id: 9lives}\n", registry)

    assert [issue.path for issue in result.errors] == ["model.id"]
    assert "must start with a letter" in result.errors[0].message


def test_missing_regions_is_a_warning(registry: ComponentTypeRegistry) -> None:
    result = validate_text("model: {id: demo}\n", registry)

    assert result.is_valid
    assert [issue.path for issue in result.warnings] == ["regions"]


def test_region_without_hosts_is_a_warning(registry: ComponentTypeRegistry) -> None:
    result = validate_text("model: {id: demo}\nregions: {r1: {}}\n", registry)

    assert result.is_valid
    assert [str(issue) for issue in result.warnings] == [
        "regions.r1.hosts: no hosts defined in region"
    ]


def test_invalid_region_and_host_ids(registry: ComponentTypeRegistry) -> None:
    text = "model: {id: demo}\nregions: {_r: {hosts: {'1h': {}}}}\n"

    assert _error_paths(text, registry) == ["regions._r", "regions._r.hosts.1h"]


def test_duplicate_host_across_regions(registry: ComponentTypeRegistry) -> None:
    text = """\
model: {id: demo}
regions:
  r1: {hosts: {h1: {}}}
  r2: {hosts: {h1: {}}}
"""
    result = validate_text(text, registry)

    assert [issue.path for issue in result.errors] == ["regions.r2.hosts.h1"]
    assert "r1" in result.errors[0].message


def test_component_type_checks(registry: ComponentTypeRegistry) -> None:
    text = """\
model: {id: demo}
regions:
  r1:
    hosts:
      h1:
        components:
          - {id: a}
          - {id: b, type: database}
"""
    result = validate_text(text, registry)

    assert [issue.path for issue in result.errors] == [
        "regions.r1.hosts.h1.components[0].type",
        "regions.r1.hosts.h1.components[1].type",
    ]
    assert "Valid types: controller, generic, router" in result.errors[1].message


def test_duplicate_and_malformed_component_ids(registry: ComponentTypeRegistry) -> None:
    text = """\
model: {id: demo}
regions:
  r1:
    hosts:
      h1:
        components:
          - {id: dup, type: generic}
          - {id: dup, type: generic}
          - {id: bad id, type: generic}
"""
    result = validate_text(text, registry)

    assert [issue.message for issue in result.errors] == [
        "duplicate component id within host",
        "invalid component id format",
    ]


def test_unsupported_settings_reported(registry: ComponentTypeRegistry) -> None:
    text = """\
model: {id: demo}
regions:
  r1:
    hosts:
      h1:
        components:
          - {type: router, mode: sideways}
          - {type: controller, colour: blue}
"""
    result = validate_text(text, registry)

    assert len(result.errors) == 2
    assert "sideways" in result.errors[0].message
    assert "colour" in result.errors[1].message


def test_validate_file(tmp_path: Path, registry: ComponentTypeRegistry) -> None:
    path = tmp_path / "topology.yml"
    path.write_text(EXAMPLE_TOPOLOGY)

    assert validate_file(path, registry).is_valid
