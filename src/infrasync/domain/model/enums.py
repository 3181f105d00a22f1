"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class ResourceKind(StrEnum):
    HOST = "host"
    COMPONENT = "component"


class ResourceStatus(StrEnum):
    """Lifecycle status of a persisted resource.

    The reconciler only ever writes ``RUNNING``; the finer-grained values are
    available to stores and external tooling.
    """

    PENDING = "pending"
    CREATING = "creating"
    RUNNING = "running"
    UPDATING = "updating"
    DELETING = "deleting"
    DELETED = "deleted"
    ERROR = "error"


class InstanceState(StrEnum):
    CREATED = "created"
    RECONCILED = "reconciled"
    FAILED = "failed"
    DISPOSED = "disposed"


class RouterMode(StrEnum):
    EDGE = "edge"
    FABRIC = "fabric"
