"""YAML topology loader and validator."""

from __future__ import annotations

from .loader import (
    ModelLoadError,
    ModelValidationError,
    build_model,
    load_model,
    load_model_from_text,
    parse_document,
    read_document,
    validate_file,
    validate_text,
)
from .schema import ComponentSpec, HostSpec, ModelSpec, RegionSpec, TopologyDocument
from .validation import ValidationIssue, ValidationResult, validate_document

__all__ = [
    "ComponentSpec",
    "HostSpec",
    "ModelLoadError",
    "ModelSpec",
    "ModelValidationError",
    "RegionSpec",
    "TopologyDocument",
    "ValidationIssue",
    "ValidationResult",
    "build_model",
    "load_model",
    "load_model_from_text",
    "parse_document",
    "read_document",
    "validate_document",
    "validate_file",
    "validate_text",
]
