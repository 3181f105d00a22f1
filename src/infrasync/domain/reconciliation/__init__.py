"""Reconciliation core: diff a desired topology against applied resources.

Flow for one run:
1) load persisted resources for the instance from a ``ResourceStore``
2) rebuild the applied topology from those records
3) diff desired vs. applied topology into create/update/delete changes
4) apply creates, then updates, then deletes back through the store
"""

from __future__ import annotations

from .context import ReconcileContext
from .current_state import DEFAULT_REGION_ID, build_model_from_resources
from .diff import Action, Diff, ResourceChange, compute_diff
from .engine import Reconciler, count_unchanged, merge_metadata
from .result import ReconcileAbortedError, ReconcileError, ReconcileOptions, ReconcileResult

__all__ = [
    "DEFAULT_REGION_ID",
    "Action",
    "Diff",
    "ReconcileAbortedError",
    "ReconcileContext",
    "ReconcileError",
    "ReconcileOptions",
    "ReconcileResult",
    "Reconciler",
    "ResourceChange",
    "build_model_from_resources",
    "compute_diff",
    "count_unchanged",
    "merge_metadata",
]
