"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var
from .errors import ConfigurationError, InvalidConfigurationError
from .logging import configure_logging
from .storage import (
    LABEL_FILENAME,
    RESOURCES_FILENAME,
    StorageConfig,
    StoreBackend,
    get_storage_config,
    parse_backend,
)

__all__ = [
    "LABEL_FILENAME",
    "RESOURCES_FILENAME",
    "ConfigurationError",
    "InvalidConfigurationError",
    "StorageConfig",
    "StoreBackend",
    "configure_logging",
    "get_storage_config",
    "optional_env_var",
    "parse_backend",
]
