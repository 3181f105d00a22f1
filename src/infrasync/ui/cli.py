# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from infrasync.adapters.yaml import ModelLoadError, ModelValidationError
from infrasync.app import (
    apply_configuration,
    build_resource_store,
    instance_status,
    list_instances,
    plan_configuration,
    validate_configuration,
)
from infrasync.config import (
    ConfigurationError,
    StoreBackend,
    configure_logging,
    get_storage_config,
)
from infrasync.domain.errors import InstanceNotFoundError
from infrasync.domain.reconciliation import ReconcileAbortedError
from infrasync.domain.registry import default_registry

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from infrasync.adapters.yaml import ValidationResult
    from infrasync.config import StorageConfig
    from infrasync.domain.reconciliation import Diff, ReconcileResult

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile declarative infrastructure state")
    parser.add_argument(
        "--store",
        choices=[backend.value for backend in StoreBackend],
        help="Resource store backend (defaults to INFRASYNC_STORE or 'file')",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        help="Directory holding instance state (defaults to INFRASYNC_DATA_DIR)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    apply = subparsers.add_parser("apply", help="Reconcile a topology document")
    _add_config_argument(apply)
    apply.add_argument(
        "--dry-run",
        action="store_true",
        help="Report the changes without writing them",
    )
    apply.add_argument(
        "--continue-on-error",
        action="store_true",
        help="Keep applying changes after a failure instead of stopping",
    )

    plan = subparsers.add_parser("plan", help="Show pending changes for a topology document")
    _add_config_argument(plan)

    validate = subparsers.add_parser("validate", help="Validate a topology document")
    _add_config_argument(validate)

    status = subparsers.add_parser("status", help="Show the status of one instance")
    status.add_argument("instance", type=str, help="Instance id")

    subparsers.add_parser("instances", help="List tracked instances")
    subparsers.add_parser("component-types", help="List registered component types")

    return parser.parse_args(list(argv))


def _add_config_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        required=True,
        help="Path to the YAML topology document",
    )


def _storage_config(args: argparse.Namespace) -> StorageConfig:
    config = get_storage_config()
    if args.store:
        config = config.with_backend(args.store)
    if args.data_dir:
        config = config.with_data_dir(args.data_dir)
    return config


def _print_result(result: ReconcileResult) -> None:
    prefix = "Would apply" if result.dry_run else "Applied"
    print(
        f"{prefix}: created={result.created}, updated={result.updated}, "
        f"deleted={result.deleted}, unchanged={result.unchanged}"
    )
    for error in result.errors:
        print(f"  error: {error}", file=sys.stderr)


def _print_diff(diff: Diff) -> None:
    if diff.is_empty():
        print("No changes.")
        return
    symbols = {"create": "+", "update": "~", "delete": "-"}
    for change in diff.changes():
        line = f"{symbols[change.action]} {change.kind} {change.id}"
        if change.changes:
            line += f" ({', '.join(change.changes)})"
        print(line)
    print(
        f"Plan: {len(diff.to_create)} to create, {len(diff.to_update)} to update, "
        f"{len(diff.to_delete)} to delete."
    )


def _print_validation(result: ValidationResult) -> None:
    for warning in result.warnings:
        print(f"warning: {warning}")
    for error in result.errors:
        print(f"error: {error}", file=sys.stderr)
    if result.is_valid:
        print("Configuration is valid.")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        storage_config = _storage_config(parsed_args)
    except ConfigurationError:
        log.exception("CLI validation error")
        sys.exit(2)

    registry = default_registry()
    try:
        if parsed_args.command == "apply":
            result = apply_configuration(
                parsed_args.config,
                store=build_resource_store(storage_config),
                registry=registry,
                dry_run=parsed_args.dry_run,
                continue_on_error=parsed_args.continue_on_error,
            )
            _print_result(result)
            if not result.succeeded:
                sys.exit(1)
        elif parsed_args.command == "plan":
            diff = plan_configuration(
                parsed_args.config,
                store=build_resource_store(storage_config),
                registry=registry,
            )
            _print_diff(diff)
        elif parsed_args.command == "validate":
            validation = validate_configuration(parsed_args.config, registry)
            _print_validation(validation)
            if not validation.is_valid:
                sys.exit(2)
        elif parsed_args.command == "status":
            label = instance_status(parsed_args.instance, build_resource_store(storage_config))
            print(
                json.dumps(
                    {
                        "instanceId": label.instance_id,
                        "modelId": label.model_id,
                        "state": str(label.state),
                        "bindings": dict(label.bindings),
                        "updatedAt": label.updated_at.isoformat(),
                    },
                    indent=2,
                )
            )
        elif parsed_args.command == "instances":
            for instance_id in list_instances(build_resource_store(storage_config)):
                print(instance_id)
        elif parsed_args.command == "component-types":
            for name in registry.names():
                print(name)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except ModelValidationError as exc:
        for issue in exc.result.errors:
            log.error("%s", issue)  # noqa: TRY400
        sys.exit(2)
    except ModelLoadError:
        log.exception("Unable to load configuration")
        sys.exit(2)
    except InstanceNotFoundError as exc:
        log.error("%s", exc)  # noqa: TRY400
        sys.exit(1)
    except ReconcileAbortedError as exc:
        _print_result(exc.result)
        log.error("%s", exc)  # noqa: TRY400
        sys.exit(1)
    except Exception:
        log.exception("Fatal error during reconciliation")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
