"""Inputs handed to the reconciler by loaders and front-ends."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from infrasync.domain.model import InstanceLabel, Model


@dataclass(frozen=True, slots=True)
class ReconcileContext:
    """Desired model plus the instance label it is reconciled against, if known."""

    model: Model
    label: InstanceLabel | None = None

    @property
    def instance_id(self) -> str:
        return self.model.id

    def with_model(self, model: Model) -> ReconcileContext:
        return replace(self, model=model)

    def with_label(self, label: InstanceLabel | None) -> ReconcileContext:
        return replace(self, label=label)
