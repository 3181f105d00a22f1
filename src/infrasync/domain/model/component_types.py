"""Component behaviours.

Every component carries a ``ComponentType`` describing how it is labelled,
versioned and checked on its host. The shared capability set is the
``ComponentType`` protocol; starting a process is a narrower capability that
only some variants provide and that callers must query with
``supports_start`` before use.

Concrete variants form a small tagged union keyed by ``label``:

- ``GenericComponentType``: inert placeholder, never reported as running
- ``ControllerComponentType``: control-plane process
- ``RouterComponentType``: data-plane process with an ``edge``/``fabric`` mode
- ``RecordedComponentType``: label-only type rebuilt from persisted state
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING, Any, ClassVar, Protocol, runtime_checkable

from .enums import RouterMode

if TYPE_CHECKING:
    from .topology import Component


@runtime_checkable
class HostSession(Protocol):
    """Command channel to one deployed host."""

    @property
    def working_dir(self) -> str: ...

    def exec(self, command: str) -> str: ...

    def kill_processes(self, signal: str, pattern: str) -> None: ...


@runtime_checkable
class ComponentType(Protocol):
    """Capabilities shared by every component variant."""

    @property
    def label(self) -> str: ...

    @property
    def version(self) -> str: ...

    def dump(self) -> dict[str, Any]: ...

    def is_running(self, session: HostSession, component: Component) -> bool: ...

    def stop(self, session: HostSession, component: Component) -> None: ...


@runtime_checkable
class StartableComponentType(ComponentType, Protocol):
    """Optional capability: the component can be started on its host."""

    def start(self, session: HostSession, component: Component) -> None: ...


def supports_start(component_type: ComponentType) -> bool:
    """Return whether ``component_type`` exposes the start capability."""

    return isinstance(component_type, StartableComponentType)


@dataclass(kw_only=True)
class BaseComponentType:
    """Common settings handling for the built-in variants."""

    version: str = ""

    LABEL: ClassVar[str]

    @property
    def label(self) -> str:
        return self.LABEL

    def dump(self) -> dict[str, Any]:
        return {"type": self.label, "version": self.version}

    def configure(self, **settings: str) -> None:
        """Apply declared settings (``version``, variant-specific keys)."""

        known = {item.name for item in fields(self) if item.init}
        unknown = sorted(set(settings) - known)
        if unknown:
            raise ValueError(
                f"Unsupported settings for component type '{self.label}': {', '.join(unknown)}"
            )
        for name, value in settings.items():
            setattr(self, name, value)


@dataclass(kw_only=True)
class GenericComponentType(BaseComponentType):
    type_name: str = "generic"

    LABEL: ClassVar[str] = "generic"

    @property
    def label(self) -> str:
        return self.type_name

    def is_running(self, session: HostSession, component: Component) -> bool:
        _ = session, component
        return False

    def stop(self, session: HostSession, component: Component) -> None:
        _ = session, component


@dataclass(kw_only=True)
class _ProcessComponentType(BaseComponentType):
    """Variant backed by a single long-running process on the host."""

    binary: ClassVar[str]
    config_name: ClassVar[str]

    def is_running(self, session: HostSession, component: Component) -> bool:
        _ = component
        output = session.exec(f"pgrep -f {self.binary} || true")
        return bool(output.strip())

    def stop(self, session: HostSession, component: Component) -> None:
        _ = component
        session.kill_processes("-TERM", self.binary)

    def start(self, session: HostSession, component: Component) -> None:
        self.stop(session, component)
        root = session.working_dir
        session.exec(
            f"nohup {root}/bin/{self.binary} run {root}/cfg/{component.id}-{self.config_name} "
            f"> {root}/logs/{component.id}.log 2>&1 &"
        )


@dataclass(kw_only=True)
class ControllerComponentType(_ProcessComponentType):
    LABEL: ClassVar[str] = "controller"
    binary: ClassVar[str] = "controller"
    config_name: ClassVar[str] = "controller.yml"


@dataclass(kw_only=True)
class RouterComponentType(_ProcessComponentType):
    mode: str = RouterMode.EDGE

    LABEL: ClassVar[str] = "router"
    binary: ClassVar[str] = "router"
    config_name: ClassVar[str] = "router.yml"

    def __post_init__(self) -> None:
        self.mode = RouterMode(self.mode)

    def configure(self, **settings: str) -> None:
        super().configure(**settings)
        self.mode = RouterMode(self.mode)

    def dump(self) -> dict[str, Any]:
        return {**super().dump(), "mode": str(self.mode)}


@dataclass(frozen=True)
class RecordedComponentType:
    """Label-only type reconstructed from a persisted resource record.

    Recorded types describe what was applied; they carry no process behaviour.
    """

    recorded_label: str
    recorded_version: str = ""
    attributes: dict[str, str] = field(default_factory=dict[str, str])

    @property
    def label(self) -> str:
        return self.recorded_label

    @property
    def version(self) -> str:
        return self.recorded_version

    def dump(self) -> dict[str, Any]:
        return {"type": self.recorded_label, "version": self.recorded_version, **self.attributes}

    def is_running(self, session: HostSession, component: Component) -> bool:
        _ = session, component
        return False

    def stop(self, session: HostSession, component: Component) -> None:
        _ = session, component
