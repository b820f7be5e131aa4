"""
Analyzer module.

Contains schema inference, reference resolution, validation and the
required-properties passes.
"""

from __future__ import annotations

from .inference import JSON_SCHEMA_DRAFT, SchemaInferrer, cast_node_value_by_type, type_from_tag
from .reference_resolver import ReferenceResolver, ResolutionContext
from .required import disable_required_properties, fix_required_properties
from .validator import SchemaValidator, validate_schema

__all__ = [
    "JSON_SCHEMA_DRAFT",
    "ReferenceResolver",
    "ResolutionContext",
    "SchemaInferrer",
    "SchemaValidator",
    "cast_node_value_by_type",
    "disable_required_properties",
    "fix_required_properties",
    "type_from_tag",
    "validate_schema",
]
