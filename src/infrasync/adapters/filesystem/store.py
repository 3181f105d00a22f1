"""File-backed resource store.

Each instance owns a working directory holding ``resources.json`` (resource id
-> record, pretty-printed) and ``label.json`` (its status record). Every
operation is a full read-deserialize-modify-serialize-write cycle, serialised
by one mutex per store object.

There is no cross-process coordination: two processes pointed at the same
working directory can interleave writes and lose updates. A single logical
writer per directory is assumed.
"""

from __future__ import annotations

import os
import threading
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import ValidationError

from infrasync.config.storage import INSTANCES_DIR_NAME, LABEL_FILENAME, RESOURCES_FILENAME
from infrasync.domain.errors import InstanceNotFoundError, StoreLoadError, StoreWriteError

from .schema import LabelRecord, ResourceDocument, ResourceRecord

if TYPE_CHECKING:
    from collections.abc import Mapping

    from infrasync.config.storage import StorageConfig
    from infrasync.domain.model import InstanceLabel, ResourceState

log = getLogger(__name__)


class FileResourceStore:
    """Persist instance state as JSON documents below ``root``.

    ``instance_dirs`` pins individual instances to explicit working
    directories; any other instance lives in ``root / <instance_id>``.
    """

    def __init__(self, root: Path, *, instance_dirs: Mapping[str, Path] | None = None) -> None:
        self.root = root
        self._instance_dirs = dict(instance_dirs or {})
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: StorageConfig) -> FileResourceStore:
        return cls(config.instances_dir())

    def working_dir(self, instance_id: str) -> Path:
        if not instance_id or os.sep in instance_id or instance_id in {".", ".."}:
            raise ValueError(f"Invalid instance id: {instance_id!r}")
        return self._instance_dirs.get(instance_id, self.root / instance_id)

    def resources_path(self, instance_id: str) -> Path:
        return self.working_dir(instance_id) / RESOURCES_FILENAME

    def label_path(self, instance_id: str) -> Path:
        return self.working_dir(instance_id) / LABEL_FILENAME

    # Status store ---------------------------------------------------------------

    def get_status(self, instance_id: str) -> InstanceLabel:
        path = self.label_path(instance_id)
        with self._lock:
            try:
                data = path.read_bytes()
            except FileNotFoundError as exc:
                raise InstanceNotFoundError(instance_id) from exc
            except OSError as exc:
                raise StoreLoadError(f"Failed to read label {path}: {exc}") from exc
        try:
            return LabelRecord.model_validate_json(data).to_domain()
        except ValidationError as exc:
            raise StoreLoadError(f"Failed to parse label {path}: {exc}") from exc

    def save_status(self, instance_id: str, label: InstanceLabel) -> None:
        path = self.label_path(instance_id)
        payload = LabelRecord.from_domain(label).model_dump_json(by_alias=True, indent=2)
        with self._lock:
            self._write(path, payload.encode())

    def list_instances(self) -> list[str]:
        """Instances pinned to a working directory or holding a status record."""

        found = set(self._instance_dirs)
        try:
            candidates = list(self.root.iterdir()) if self.root.is_dir() else []
        except OSError as exc:
            raise StoreLoadError(f"Failed to list instances in {self.root}: {exc}") from exc
        found.update(
            candidate.name
            for candidate in candidates
            if candidate.is_dir() and (candidate / LABEL_FILENAME).is_file()
        )
        return sorted(found)

    # Resource store -------------------------------------------------------------

    def get_resources(self, instance_id: str) -> dict[str, ResourceState]:
        with self._lock:
            records = self._read_resources(instance_id)
        try:
            return {resource_id: record.to_domain() for resource_id, record in records.items()}
        except ValueError as exc:
            raise StoreLoadError(f"Invalid resource record for [{instance_id}]: {exc}") from exc

    def save_resource(self, instance_id: str, resource: ResourceState) -> None:
        with self._lock:
            records = self._read_resources(instance_id)
            previous = records.get(resource.id)
            stored = resource.upserted_over(previous.to_domain() if previous else None)
            records[resource.id] = ResourceRecord.from_domain(stored)
            self._write_resources(instance_id, records)

    def delete_resource(self, instance_id: str, resource_id: str) -> None:
        with self._lock:
            records = self._read_resources(instance_id)
            if records.pop(resource_id, None) is None:
                return
            self._write_resources(instance_id, records)

    # Internals (caller holds the lock) ----------------------------------------

    def _read_resources(self, instance_id: str) -> dict[str, ResourceRecord]:
        path = self.resources_path(instance_id)
        try:
            data = path.read_bytes()
        except FileNotFoundError:
            return {}
        except OSError as exc:
            raise StoreLoadError(f"Failed to read resources {path}: {exc}") from exc
        try:
            return ResourceDocument.validate_json(data)
        except ValidationError as exc:
            raise StoreLoadError(f"Failed to parse resources {path}: {exc}") from exc

    def _write_resources(self, instance_id: str, records: dict[str, ResourceRecord]) -> None:
        payload = ResourceDocument.dump_json(records, by_alias=True, indent=2)
        self._write(self.resources_path(instance_id), payload)

    @staticmethod
    def _write(path: Path, payload: bytes) -> None:
        tmp_path = path.with_name(f".{path.name}.tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_bytes(payload)
            tmp_path.replace(path)
        except OSError as exc:
            raise StoreWriteError(f"Failed to write {path}: {exc}") from exc
        log.debug("Wrote %s", path)


if TYPE_CHECKING:
    from infrasync.domain.ports import ResourceStore

    _store_check: ResourceStore = FileResourceStore(Path(INSTANCES_DIR_NAME))
