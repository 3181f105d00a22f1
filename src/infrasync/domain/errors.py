"""Domain error kinds raised by the registry, stores and reconciler."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence


class DuplicateRegistrationError(ValueError):
    """Raised when a component type name is registered twice."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Component type '{name}' is already registered")
        self.name = name


class UnknownComponentTypeError(LookupError):
    """Raised when a component type name has no registered factory."""

    def __init__(self, name: str, known: Sequence[str] = ()) -> None:
        message = f"Component type '{name}' not found in registry"
        if known:
            message += f" (valid types: {', '.join(known)})"
        super().__init__(message)
        self.name = name
        self.known = tuple(known)


class StoreError(RuntimeError):
    """Base class for resource store failures."""


class StoreLoadError(StoreError):
    """Raised when persisted state cannot be read or decoded."""


class StoreWriteError(StoreError):
    """Raised when a resource or status record cannot be written."""


class InstanceNotFoundError(StoreError, LookupError):
    """Raised when no status record exists for an instance."""

    def __init__(self, instance_id: str) -> None:
        super().__init__(f"Instance [{instance_id}] not found")
        self.instance_id = instance_id
