"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import ResourceStore, StatusStore

__all__ = [
    "ResourceStore",
    "StatusStore",
]
