"""
Exception hierarchy for the values schema generator.

Everything raised deliberately by the package derives from
HelmValuesSchemaError so that the command line can catch a single type
at its boundary and abort without writing a partial schema.
"""

from __future__ import annotations


class HelmValuesSchemaError(Exception):
    """Base class for all errors raised by helm_values_schema."""

    pass


class ConfigError(HelmValuesSchemaError):
    """Raised when the run configuration is invalid."""

    pass


class ValuesFileError(HelmValuesSchemaError):
    """Raised when a values file cannot be read or has an unexpected shape."""

    pass


class AnnotationError(HelmValuesSchemaError):
    """Raised when a `# @schema` comment block cannot be parsed.

    This can happen when:
    - The block is opened but never closed
    - The block content is not valid YAML
    - The block content does not decode to a schema
    """

    pass


class SchemaDecodeError(HelmValuesSchemaError):
    """Raised when a mapping cannot be decoded into a Schema node."""

    pass


class InferenceError(HelmValuesSchemaError):
    """Raised when a schema cannot be inferred from a values node."""

    pass


class SchemaValidationError(HelmValuesSchemaError):
    """Raised when a schema breaks one of the cross-field rules."""

    pass


class DefinitionConflictError(HelmValuesSchemaError):
    """Raised when two different schemas are registered under one definition name."""

    def __init__(self, name: str):
        super().__init__(f"definition conflict: '{name}' has different definitions in multiple schema files")
        self.name = name


class ReferenceResolutionError(HelmValuesSchemaError):
    """Raised when a local $ref points at a file or fragment that cannot be loaded."""

    pass
