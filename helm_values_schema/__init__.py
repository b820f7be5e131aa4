"""Helm Values Schema Generator

A Python package for generating a JSON Schema (draft-07) from a Helm
values file, using the types and key comments of the values themselves
plus optional `# @schema` annotations.
"""

__version__ = "0.1.0"

from .exceptions import HelmValuesSchemaError
from .pipeline import GeneratorConfig, Schema, SchemaGenerator, SkipAutoGenerationConfig

__all__ = [
    "GeneratorConfig",
    "HelmValuesSchemaError",
    "Schema",
    "SchemaGenerator",
    "SkipAutoGenerationConfig",
]
