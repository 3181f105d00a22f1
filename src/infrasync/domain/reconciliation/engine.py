"""Reconciler: load current state, diff against desired, apply through a store.

A run is synchronous and sequential: load, diff, then apply every create,
every update and finally every delete. Nothing is rolled back when a change
fails; already-applied changes stay applied.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from infrasync.domain.errors import StoreError
from infrasync.domain.model import (
    COMPONENT_ID_KEY,
    HOST_ID_KEY,
    REGION_ID_KEY,
    ResourceState,
    ResourceStatus,
    utcnow,
)

from .current_state import build_model_from_resources
from .diff import Action, Diff, compute_diff
from .result import ReconcileAbortedError, ReconcileError, ReconcileOptions, ReconcileResult

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from datetime import datetime

    from infrasync.domain.ports import ResourceStore

    from .context import ReconcileContext
    from .diff import ResourceChange

log = getLogger(__name__)


class Reconciler:
    """Converge the persisted resources of an instance toward a desired model."""

    def __init__(
        self,
        store: ResourceStore,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.store = store
        self._clock = clock

    def reconcile(self, context: ReconcileContext) -> ReconcileResult:
        return self.reconcile_with_options(context, ReconcileOptions())

    def reconcile_with_options(
        self,
        context: ReconcileContext,
        options: ReconcileOptions,
    ) -> ReconcileResult:
        """Reconcile ``context`` and return the run summary.

        Raises ``ReconcileAbortedError`` on the first failed change unless
        ``options.continue_on_error`` is set.
        """

        instance_id = context.instance_id
        current_resources = self._load_resources(instance_id)
        diff = self._diff(context, current_resources)
        result = ReconcileResult(dry_run=options.dry_run)

        if options.dry_run:
            result.created = len(diff.to_create)
            result.updated = len(diff.to_update)
            result.deleted = len(diff.to_delete)
            result.unchanged = count_unchanged(current_resources, diff)
            log.info(
                "Dry-run for instance [%s]: would create %d, update %d, delete %d resources",
                instance_id,
                result.created,
                result.updated,
                result.deleted,
            )
            return result

        for change in diff.to_create:
            if self._apply(instance_id, change, result, options):
                result.created += 1
                log.info("Created resource [%s] kind=%s", change.id, change.kind)

        for change in diff.to_update:
            if self._apply(instance_id, change, result, options):
                result.updated += 1
                log.info(
                    "Updated resource [%s] kind=%s changes=%s",
                    change.id,
                    change.kind,
                    list(change.changes),
                )

        for change in diff.to_delete:
            if self._apply(instance_id, change, result, options):
                result.deleted += 1
                log.info("Deleted resource [%s] kind=%s", change.id, change.kind)

        result.unchanged = count_unchanged(current_resources, diff)
        return result

    def get_diff(self, context: ReconcileContext) -> Diff:
        """Compute the pending changes for ``context`` without applying them."""

        current_resources = self._load_resources(context.instance_id)
        return self._diff(context, current_resources)

    def _load_resources(self, instance_id: str) -> dict[str, ResourceState]:
        try:
            return self.store.get_resources(instance_id)
        except StoreError as exc:
            log.warning(
                "Unable to load resources for instance [%s]: %s. Assuming fresh start.",
                instance_id,
                exc,
            )
            return {}

    @staticmethod
    def _diff(context: ReconcileContext, current_resources: Mapping[str, ResourceState]) -> Diff:
        current_model = build_model_from_resources(
            current_resources,
            model_id=context.instance_id,
        )
        return compute_diff(context.model, current_model)

    def _apply(
        self,
        instance_id: str,
        change: ResourceChange,
        result: ReconcileResult,
        options: ReconcileOptions,
    ) -> bool:
        try:
            if change.action is Action.DELETE:
                self.store.delete_resource(instance_id, change.id)
            else:
                self.store.save_resource(instance_id, self._resource_for(change))
        except StoreError as exc:
            failure = ReconcileError(resource_id=change.id, action=change.action, error=exc)
            result.errors.append(failure)
            log.error("Failed to %s resource [%s]: %s", change.action, change.id, exc)
            if not options.continue_on_error:
                raise ReconcileAbortedError(result, failure) from exc
            return False
        return True

    def _resource_for(self, change: ResourceChange) -> ResourceState:
        metadata = merge_metadata(
            {REGION_ID_KEY: change.region_id, HOST_ID_KEY: change.host_id},
            change.new_metadata,
        )
        if change.component_id:
            metadata[COMPONENT_ID_KEY] = change.component_id
        now = self._clock()
        return ResourceState(
            id=change.id,
            kind=change.kind,
            status=ResourceStatus.RUNNING,
            metadata=metadata,
            created_at=now,
            updated_at=now,
        )


def merge_metadata(base: Mapping[str, str], override: Mapping[str, str]) -> dict[str, str]:
    """Overlay ``override`` on ``base``, ignoring empty override values."""

    merged = dict(base)
    merged.update({key: value for key, value in override.items() if value})
    return merged


def count_unchanged(current_resources: Mapping[str, ResourceState], diff: Diff) -> int:
    """Count persisted resources that no change in ``diff`` touches."""

    changed_ids = diff.changed_ids()
    return sum(1 for resource_id in current_resources if resource_id not in changed_ids)
