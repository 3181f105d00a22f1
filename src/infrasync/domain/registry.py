"""Component type registry.

A registry maps type names to factories that build fresh ``ComponentType``
objects. One registry is built at process start (``default_registry``) and
passed explicitly to whatever needs type lookup; there is no module-level
registry.
"""

from __future__ import annotations

from collections.abc import Callable

from infrasync.common.locks import ReadWriteLock
from infrasync.domain.errors import DuplicateRegistrationError, UnknownComponentTypeError
from infrasync.domain.model import (
    ComponentType,
    ControllerComponentType,
    GenericComponentType,
    RouterComponentType,
)

type ComponentFactory = Callable[[], ComponentType]


class ComponentTypeRegistry:
    """Thread-safe name -> factory lookup for component behaviours."""

    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._factories: dict[str, ComponentFactory] = {}

    def register(self, name: str, factory: ComponentFactory) -> None:
        if not name or not name.strip():
            raise ValueError("Component type name must be a non-empty string")
        with self._lock.write():
            if name in self._factories:
                raise DuplicateRegistrationError(name)
            self._factories[name] = factory

    def lookup(self, name: str) -> ComponentType:
        """Build a new component type instance for ``name``."""

        with self._lock.read():
            factory = self._factories.get(name)
            if factory is None:
                raise UnknownComponentTypeError(name, sorted(self._factories))
        return factory()

    def names(self) -> list[str]:
        with self._lock.read():
            return sorted(self._factories)

    def __contains__(self, name: object) -> bool:
        with self._lock.read():
            return name in self._factories


def default_registry() -> ComponentTypeRegistry:
    """Return a registry holding the built-in component variants."""

    registry = ComponentTypeRegistry()
    registry.register(GenericComponentType.LABEL, GenericComponentType)
    registry.register(ControllerComponentType.LABEL, ControllerComponentType)
    registry.register(RouterComponentType.LABEL, RouterComponentType)
    return registry
