from __future__ import annotations

import pytest

from infrasync.domain.model import (
    Component,
    ComponentType,
    ControllerComponentType,
    GenericComponentType,
    RecordedComponentType,
    RouterComponentType,
    RouterMode,
    supports_start,
)


class FakeSession:
    def __init__(self, output: str = "") -> None:
        self.output = output
        self.commands: list[str] = []
        self.kills: list[tuple[str, str]] = []

    @property
    def working_dir(self) -> str:
        return "/opt/infra"

    def exec(self, command: str) -> str:
        self.commands.append(command)
        return self.output

    def kill_processes(self, signal: str, pattern: str) -> None:
        self.kills.append((signal, pattern))


def test_builtin_variants_satisfy_protocol() -> None:
    for component_type in (
        GenericComponentType(),
        ControllerComponentType(),
        RouterComponentType(),
        RecordedComponentType(recorded_label="x"),
    ):
        assert isinstance(component_type, ComponentType)


def test_start_capability_is_optional() -> None:
    assert supports_start(ControllerComponentType())
    assert supports_start(RouterComponentType())
    assert not supports_start(GenericComponentType())
    assert not supports_start(RecordedComponentType(recorded_label="router"))


def test_generic_label_follows_type_name() -> None:
    assert GenericComponentType().label == "generic"
    assert GenericComponentType(type_name="cache").label == "cache"


def test_configure_applies_known_settings() -> None:
    router = RouterComponentType()
    router.configure(version="2.0", mode="fabric")

    assert router.version == "2.0"
    assert router.mode is RouterMode.FABRIC
    assert router.dump() == {"type": "router", "version": "2.0", "mode": "fabric"}


def test_configure_rejects_unknown_settings() -> None:
    with pytest.raises(ValueError, match="colour"):
        ControllerComponentType().configure(colour="blue")


def test_router_rejects_unknown_mode() -> None:
    with pytest.raises(ValueError, match="sideways"):
        RouterComponentType().configure(mode="sideways")


def test_process_variant_checks_and_stops() -> None:
    session = FakeSession(output="1234\n")
    controller = ControllerComponentType()
    component = Component(id="ctrl", type=controller)

    assert controller.is_running(session, component)
    controller.stop(session, component)

    assert session.kills == [("-TERM", "controller")]


def test_process_variant_start_launches_in_working_dir() -> None:
    session = FakeSession()
    router = RouterComponentType()
    component = Component(id="r1", type=router)

    router.start(session, component)

    assert session.kills == [("-TERM", "router")]
    assert "/opt/infra/bin/router run /opt/infra/cfg/r1-router.yml" in session.commands[-1]


def test_recorded_type_dumps_attributes() -> None:
    recorded = RecordedComponentType(
        recorded_label="router", recorded_version="1.0", attributes={"mode": "edge"}
    )

    assert recorded.label == "router"
    assert recorded.dump() == {"type": "router", "version": "1.0", "mode": "edge"}
    assert not recorded.is_running(FakeSession("1"), Component(id="r", type=recorded))
