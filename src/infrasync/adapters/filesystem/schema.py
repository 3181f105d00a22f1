"""Pydantic models for the JSON documents kept in instance working directories."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from infrasync.domain.model import (
    InstanceLabel,
    InstanceState,
    ResourceKind,
    ResourceState,
    ResourceStatus,
)


class DocumentModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ResourceRecord(DocumentModel):
    id: str
    kind: ResourceKind
    status: ResourceStatus
    metadata: dict[str, str] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, state: ResourceState) -> ResourceRecord:
        return cls(
            id=state.id,
            kind=state.kind,
            status=state.status,
            metadata=dict(state.metadata),
            created_at=state.created_at,
            updated_at=state.updated_at,
        )

    def to_domain(self) -> ResourceState:
        return ResourceState(
            id=self.id,
            kind=self.kind,
            status=self.status,
            metadata=self.metadata,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class LabelRecord(DocumentModel):
    instance_id: str
    model_id: str = ""
    state: InstanceState = InstanceState.CREATED
    bindings: dict[str, str] = Field(default_factory=dict)
    updated_at: datetime

    @classmethod
    def from_domain(cls, label: InstanceLabel) -> LabelRecord:
        return cls(
            instance_id=label.instance_id,
            model_id=label.model_id,
            state=label.state,
            bindings=dict(label.bindings),
            updated_at=label.updated_at,
        )

    def to_domain(self) -> InstanceLabel:
        return InstanceLabel(
            instance_id=self.instance_id,
            model_id=self.model_id,
            state=self.state,
            bindings=self.bindings,
            updated_at=self.updated_at,
        )


ResourceDocument = TypeAdapter(dict[str, ResourceRecord])
