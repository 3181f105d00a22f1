from __future__ import annotations

import pytest

from infrasync.domain.model import (
    Component,
    GenericComponentType,
    Model,
    component_resource_id,
)


def test_hosts_record_owning_region() -> None:
    model = Model(id="demo")
    region = model.add_region("r1", site="lab")
    host = region.add_host("h1", instance_type="small")

    assert host.region_id == "r1"
    assert model.region_of(host) is region
    assert region.site == "lab"


def test_duplicate_ids_rejected_at_each_level() -> None:
    model = Model(id="demo")
    region = model.add_region("r1")
    host = region.add_host("h1")
    host.add_component(Component(id="c1", type=GenericComponentType()))

    with pytest.raises(ValueError, match="Duplicate region"):
        model.add_region("r1")
    with pytest.raises(ValueError, match="Duplicate host"):
        region.add_host("h1")
    with pytest.raises(ValueError, match="Duplicate component"):
        host.add_component(Component(id="c1", type=GenericComponentType()))


def test_host_id_with_separator_rejected() -> None:
    region = Model(id="demo").add_region("r1")

    with pytest.raises(ValueError, match="must not contain"):
        region.add_host("edge/1")
    assert region.hosts == {}


def test_hosts_by_id_flattens_regions() -> None:
    model = Model(id="demo")
    model.add_region("r1").add_host("h1")
    model.add_region("r2").add_host("h2")

    assert sorted(model.hosts_by_id()) == ["h1", "h2"]


def test_hosts_by_id_rejects_host_in_two_regions() -> None:
    model = Model(id="demo")
    model.add_region("r1").add_host("h1")
    model.add_region("r2").add_host("h1")

    with pytest.raises(ValueError, match="h1"):
        model.hosts_by_id()


def test_ensure_region_reuses_existing() -> None:
    model = Model(id="demo")
    first = model.ensure_region("r1")

    assert model.ensure_region("r1") is first


def test_region_of_foreign_host_raises() -> None:
    model = Model(id="demo")
    other = Model(id="other")
    host = other.add_region("r1").add_host("h1")
    model.add_region("r1")

    with pytest.raises(LookupError):
        model.region_of(host)


def test_resource_count_includes_hosts_and_components() -> None:
    model = Model(id="demo")
    host = model.add_region("r1").add_host("h1")
    host.add_component(Component(id="a", type=GenericComponentType()))
    host.add_component(Component(id="b", type=GenericComponentType()))
    model.add_region("r2").add_host("h2")

    assert model.resource_count() == 4


def test_component_resource_id_joins_host_and_component() -> None:
    assert component_resource_id("h1", "c1") == "h1/c1"
