"""
Pipeline - values file to JSON Schema generator.

1. Phase 1 (Values): Compose the values file and read key comments
2. Phase 2 (Analyzer): Infer the Schema tree, resolve $refs, fix required lists
3. Phase 3 (Validator): Check the result before it is serialized
"""

from __future__ import annotations

from .config import POSSIBLE_SKIP_FIELDS, GeneratorConfig, SkipAutoGenerationConfig
from .generator import SchemaGenerator
from .schema_ast import Schema, parse_schema, schemas_equal

__all__ = [
    "POSSIBLE_SKIP_FIELDS",
    "GeneratorConfig",
    "Schema",
    "SchemaGenerator",
    "SkipAutoGenerationConfig",
    "parse_schema",
    "schemas_equal",
]
