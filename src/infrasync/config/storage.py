"""Data storage configuration helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from enum import StrEnum
from pathlib import Path
from typing import Final

from .env import optional_env_var
from .errors import InvalidConfigurationError

APP_DIR_NAME: Final[str] = "infrasync"
DEFAULT_DB_FILENAME: Final[str] = "infrasync.db"
INSTANCES_DIR_NAME: Final[str] = "instances"
RESOURCES_FILENAME: Final[str] = "resources.json"
LABEL_FILENAME: Final[str] = "label.json"

DATA_DIR_ENV: Final[str] = "INFRASYNC_DATA_DIR"
STORE_BACKEND_ENV: Final[str] = "INFRASYNC_STORE"
DATABASE_URI_ENV: Final[str] = "INFRASYNC_DATABASE_URI"


class StoreBackend(StrEnum):
    MEMORY = "memory"
    FILE = "file"
    SQLITE = "sqlite"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    backend: StoreBackend = StoreBackend.FILE
    database_filename: str = DEFAULT_DB_FILENAME
    database_uri_override: str | None = None

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def ensure_data_dir(self) -> Path:
        data_dir = self.resolve_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def instances_dir(self) -> Path:
        return self.resolve_data_dir() / INSTANCES_DIR_NAME

    def database_path(self, *, ensure: bool = True) -> Path:
        base = self.ensure_data_dir() if ensure else self.resolve_data_dir()
        return base / self.database_filename

    def database_uri(self) -> str:
        if self.database_uri_override:
            return self.database_uri_override
        return f"sqlite+pysqlite:///{self.database_path()}"

    def with_backend(self, backend: StoreBackend | str) -> StorageConfig:
        return replace(self, backend=parse_backend(str(backend)))

    def with_data_dir(self, data_dir: Path) -> StorageConfig:
        return replace(self, data_dir=data_dir)


def parse_backend(value: str) -> StoreBackend:
    try:
        return StoreBackend(value.strip().lower())
    except ValueError as exc:
        choices = ", ".join(backend.value for backend in StoreBackend)
        raise InvalidConfigurationError(
            f"Unknown store backend '{value}' (expected one of: {choices})"
        ) from exc


def _default_data_dir() -> Path:
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        base_path = Path(base) if base else (Path.home() / "AppData" / "Local")
    else:
        base = os.getenv("XDG_DATA_HOME")
        base_path = Path(base) if base else (Path.home() / ".local" / "share")
    return (base_path / APP_DIR_NAME).expanduser().resolve()


def get_storage_config() -> StorageConfig:
    env_dir = optional_env_var(DATA_DIR_ENV)
    data_dir = Path(env_dir) if env_dir else _default_data_dir()
    backend_value = optional_env_var(STORE_BACKEND_ENV)
    backend = parse_backend(backend_value) if backend_value else StoreBackend.FILE
    return StorageConfig(
        data_dir=data_dir,
        backend=backend,
        database_uri_override=optional_env_var(DATABASE_URI_ENV),
    )
