"""Options and reporting types for one reconciliation run."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .diff import Action


@dataclass(frozen=True, slots=True)
class ReconcileOptions:
    """``continue_on_error`` defaults to fail-fast."""

    dry_run: bool = False
    continue_on_error: bool = False


@dataclass(frozen=True, slots=True)
class ReconcileError:
    """A store write or delete that failed while applying a change."""

    resource_id: str
    action: Action
    error: Exception

    def __str__(self) -> str:
        return f"{self.action} {self.resource_id}: {self.error}"


@dataclass(slots=True)
class ReconcileResult:
    """Summary rendered by the CLI and remote adapters as-is."""

    created: int = 0
    updated: int = 0
    deleted: int = 0
    unchanged: int = 0
    errors: list[ReconcileError] = field(default_factory=list[ReconcileError])
    dry_run: bool = False

    @property
    def succeeded(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "created": self.created,
            "updated": self.updated,
            "deleted": self.deleted,
            "unchanged": self.unchanged,
            "dryRun": self.dry_run,
            "errors": [
                {
                    "resourceId": error.resource_id,
                    "action": str(error.action),
                    "error": str(error.error),
                }
                for error in self.errors
            ],
        }


class ReconcileAbortedError(RuntimeError):
    """Raised in fail-fast mode on the first failed change.

    ``result`` holds the counts accumulated before the failure; changes applied
    so far stay applied.
    """

    def __init__(self, result: ReconcileResult, failure: ReconcileError) -> None:
        super().__init__(f"Reconciliation aborted: {failure}")
        self.result = result
        self.failure = failure
