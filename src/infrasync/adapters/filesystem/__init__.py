"""JSON file persistence for instance labels and resources."""

from __future__ import annotations

from .schema import LabelRecord, ResourceDocument, ResourceRecord
from .store import FileResourceStore

__all__ = [
    "FileResourceStore",
    "LabelRecord",
    "ResourceDocument",
    "ResourceRecord",
]
