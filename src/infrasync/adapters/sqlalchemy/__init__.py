"""SQLAlchemy adapter package for infrasync."""

from __future__ import annotations

from .mappings import create_all_tables, instance_label_table, metadata, resource_state_table
from .store import SqlAlchemyResourceStore, build_engine

__all__ = [
    "SqlAlchemyResourceStore",
    "build_engine",
    "create_all_tables",
    "instance_label_table",
    "metadata",
    "resource_state_table",
]
