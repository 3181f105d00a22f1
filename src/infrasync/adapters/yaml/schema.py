"""Pydantic models for the declarative topology document."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TopologyBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


def _empty_if_none(value: Any, default: Any) -> Any:
    return default if value is None else value


def _empty_entries(value: Any) -> Any:
    """Treat a missing mapping and bare ``key:`` entries inside it as empty."""

    if value is None:
        return {}
    if isinstance(value, dict):
        return {key: {} if entry is None else entry for key, entry in value.items()}
    return value


class ComponentSpec(BaseModel):
    """One component entry; unknown keys are kept as type-specific settings."""

    model_config = ConfigDict(extra="allow")

    type: str = ""
    id: str = ""
    version: str | None = None

    @field_validator("version", mode="before")
    @classmethod
    def _stringify_version(cls, value: Any) -> Any:
        if isinstance(value, int | float):
            return str(value)
        return value

    def settings(self) -> dict[str, str]:
        """Settings to apply to the component type (``version`` plus extras)."""

        values = {key: str(value) for key, value in (self.model_extra or {}).items()}
        if self.version is not None:
            values["version"] = self.version
        return values


class HostSpec(TopologyBaseModel):
    instance_type: str = Field(default="", alias="instanceType")
    components: list[ComponentSpec] = Field(default_factory=list["ComponentSpec"])

    @field_validator("components", mode="before")
    @classmethod
    def _components_default(cls, value: Any) -> Any:
        return _empty_if_none(value, [])

    @field_validator("instance_type", mode="before")
    @classmethod
    def _instance_type_default(cls, value: Any) -> Any:
        return _empty_if_none(value, "")


class RegionSpec(TopologyBaseModel):
    site: str | None = None
    hosts: dict[str, HostSpec] = Field(default_factory=dict)

    @field_validator("hosts", mode="before")
    @classmethod
    def _hosts_default(cls, value: Any) -> Any:
        return _empty_entries(value)


class ModelSpec(TopologyBaseModel):
    id: str = ""


class TopologyDocument(TopologyBaseModel):
    model: ModelSpec = Field(default_factory=ModelSpec)
    regions: dict[str, RegionSpec] = Field(default_factory=dict)

    @field_validator("model", mode="before")
    @classmethod
    def _model_default(cls, value: Any) -> Any:
        return _empty_if_none(value, {})

    @field_validator("regions", mode="before")
    @classmethod
    def _regions_default(cls, value: Any) -> Any:
        return _empty_entries(value)
