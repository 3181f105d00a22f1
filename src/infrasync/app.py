"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from infrasync.adapters.filesystem import FileResourceStore
from infrasync.adapters.memory import InMemoryResourceStore
from infrasync.adapters.sqlalchemy import SqlAlchemyResourceStore
from infrasync.adapters.yaml import load_model, validate_file
from infrasync.config import StoreBackend, get_storage_config
from infrasync.domain.errors import StoreError, StoreLoadError
from infrasync.domain.model import InstanceLabel, InstanceState
from infrasync.domain.reconciliation import (
    ReconcileAbortedError,
    ReconcileContext,
    ReconcileOptions,
    Reconciler,
)
from infrasync.domain.registry import default_registry

if TYPE_CHECKING:
    from pathlib import Path

    from infrasync.adapters.yaml import ValidationResult
    from infrasync.config import StorageConfig
    from infrasync.domain.ports import ResourceStore
    from infrasync.domain.reconciliation import Diff, ReconcileResult
    from infrasync.domain.registry import ComponentTypeRegistry


log = getLogger(__name__)


def build_resource_store(config: StorageConfig | None = None) -> ResourceStore:
    """Create the resource store selected by ``config.backend``."""

    effective_config = config or get_storage_config()
    match effective_config.backend:
        case StoreBackend.MEMORY:
            return InMemoryResourceStore()
        case StoreBackend.FILE:
            return FileResourceStore.from_config(effective_config)
        case StoreBackend.SQLITE:
            return SqlAlchemyResourceStore.from_config(effective_config)


def apply_configuration(
    path: Path,
    *,
    store: ResourceStore | None = None,
    registry: ComponentTypeRegistry | None = None,
    dry_run: bool = False,
    continue_on_error: bool = False,
) -> ReconcileResult:
    """Reconcile the topology described in ``path`` against the store.

    Outside dry-run the instance label is recorded as ``reconciled`` or
    ``failed``. A fail-fast abort is re-raised after the label is saved.
    """

    effective_store = store or build_resource_store()
    model = load_model(path, registry or default_registry())
    context = ReconcileContext(model=model, label=_existing_label(effective_store, model.id))
    options = ReconcileOptions(dry_run=dry_run, continue_on_error=continue_on_error)
    log.info(
        "Starting reconciliation of [%s]: dry_run=%s, continue_on_error=%s",
        model.id,
        dry_run,
        continue_on_error,
    )

    try:
        result = Reconciler(effective_store).reconcile_with_options(context, options)
    except ReconcileAbortedError:
        try:
            _record_outcome(effective_store, context, InstanceState.FAILED)
        except StoreError as exc:
            log.error("Unable to record failure of instance [%s]: %s", model.id, exc)  # noqa: TRY400
        raise

    if not dry_run:
        state = InstanceState.RECONCILED if result.succeeded else InstanceState.FAILED
        _record_outcome(effective_store, context, state)

    log.info(
        f"Finished reconciliation of [{model.id}]: created={result.created}, "
        f"updated={result.updated}, deleted={result.deleted}, "
        f"unchanged={result.unchanged}, errors={len(result.errors)}"
    )
    return result


def plan_configuration(
    path: Path,
    *,
    store: ResourceStore | None = None,
    registry: ComponentTypeRegistry | None = None,
) -> Diff:
    """Compute the changes ``apply_configuration`` would make, without applying them."""

    effective_store = store or build_resource_store()
    model = load_model(path, registry or default_registry())
    return Reconciler(effective_store).get_diff(ReconcileContext(model=model))


def validate_configuration(
    path: Path,
    registry: ComponentTypeRegistry | None = None,
) -> ValidationResult:
    return validate_file(path, registry or default_registry())


def instance_status(instance_id: str, store: ResourceStore | None = None) -> InstanceLabel:
    return (store or build_resource_store()).get_status(instance_id)


def list_instances(store: ResourceStore | None = None) -> list[str]:
    return (store or build_resource_store()).list_instances()


def _existing_label(store: ResourceStore, instance_id: str) -> InstanceLabel | None:
    try:
        return store.get_status(instance_id)
    except LookupError:
        return None
    except StoreLoadError as exc:
        log.warning("Ignoring unreadable label of instance [%s]: %s", instance_id, exc)
        return None


def _record_outcome(
    store: ResourceStore,
    context: ReconcileContext,
    state: InstanceState,
) -> None:
    instance_id = context.instance_id
    if context.label is not None:
        label = context.label.with_state(state)
    else:
        label = InstanceLabel(instance_id=instance_id, model_id=context.model.id, state=state)
    store.save_status(instance_id, label)
    log.info("Instance [%s] marked %s", instance_id, state)
