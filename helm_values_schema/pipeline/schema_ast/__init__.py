"""
Schema AST module.

Contains the Schema node model, its decoder and structural equality.
"""

from __future__ import annotations

from .equality import schemas_equal
from .nodes import CUSTOM_ANNOTATION_PREFIX, PRIMITIVE_TYPES, Required, Schema
from .parser import SchemaParser, parse_schema

__all__ = [
    "CUSTOM_ANNOTATION_PREFIX",
    "PRIMITIVE_TYPES",
    "Required",
    "Schema",
    "SchemaParser",
    "parse_schema",
    "schemas_equal",
]
