"""
Structural validation of generated schemas.

Checks that a schema is valid JSON Schema syntax and that its keywords
are compatible with each other (e.g. no `pattern` on an integer).
"""

from __future__ import annotations

from jsonschema import Draft7Validator
from jsonschema.exceptions import SchemaError

from ...exceptions import SchemaValidationError
from ..schema_ast import PRIMITIVE_TYPES, Schema

SUPPORTED_FORMATS = frozenset(
    {
        "date-time",
        "time",
        "date",
        "duration",
        "email",
        "idn-email",
        "hostname",
        "idn-hostname",
        "ipv4",
        "ipv6",
        "uuid",
        "uri",
        "uri-reference",
        "iri",
        "iri-reference",
        "uri-template",
        "json-pointer",
        "relative-json-pointer",
        "regex",
    }
)


def _type_str(schema: Schema) -> str:
    return "[" + " ".join(schema.type) + "]"


class SchemaValidator:
    """Validates a Schema tree, stopping at the first violation."""

    def validate(self, schema: Schema) -> None:
        """
        Validate a schema and all of its nested schemas.

        Raises:
            SchemaValidationError: Describing the first rule that is broken
        """
        self._validate_syntax(schema)
        self._validate_type_constraints(schema)
        self._validate_numeric_constraints(schema)
        self._validate_string_constraints(schema)
        self._validate_array_constraints(schema)
        self._validate_nested_schemas(schema)

    def _validate_syntax(self, schema: Schema) -> None:
        try:
            Draft7Validator.check_schema(schema.to_dict())
        except SchemaError as e:
            raise SchemaValidationError(f"invalid schema syntax: {e.message}") from e

        for type_name in schema.type:
            if type_name and type_name not in PRIMITIVE_TYPES:
                raise SchemaValidationError(f"unsupported type {type_name}")

    def _validate_type_constraints(self, schema: Schema) -> None:
        if schema.const is not None and not schema.type_is_empty():
            raise SchemaValidationError("cannot use both 'const' and 'type' in the same schema")
        if schema.enum is not None and not schema.type_is_empty():
            raise SchemaValidationError("cannot use both 'enum' and 'type' in the same schema")

    def _validate_numeric_constraints(self, schema: Schema) -> None:
        if not schema.has_numeric_constraints():
            return

        if not schema.type_is_empty() and not schema.type_matches("number") and not schema.type_matches("integer"):
            raise SchemaValidationError(
                f"numeric constraints can only be used with number or integer types, got {_type_str(schema)}"
            )
        if schema.multiple_of is not None and schema.multiple_of <= 0:
            raise SchemaValidationError("multipleOf must be greater than 0")
        if schema.minimum is not None and schema.exclusive_minimum is not None:
            raise SchemaValidationError("cannot use both minimum and exclusiveMinimum")
        if schema.maximum is not None and schema.exclusive_maximum is not None:
            raise SchemaValidationError("cannot use both maximum and exclusiveMaximum")

    def _validate_string_constraints(self, schema: Schema) -> None:
        if schema.format:
            if not schema.type_is_empty() and not schema.type_matches("string"):
                raise SchemaValidationError(f"format can only be used with string type, got {_type_str(schema)}")
            if schema.format not in SUPPORTED_FORMATS:
                raise SchemaValidationError(f"unsupported format: {schema.format}")

        if schema.pattern and not schema.type_is_empty() and not schema.type_matches("string"):
            raise SchemaValidationError(f"pattern can only be used with string type, got {_type_str(schema)}")

        if schema.format and schema.pattern:
            raise SchemaValidationError("cannot use both format and pattern in the same schema")

        if schema.min_length is not None and schema.max_length is not None and schema.min_length > schema.max_length:
            raise SchemaValidationError(
                f"minLength ({schema.min_length}) cannot be greater than maxLength ({schema.max_length})"
            )

    def _validate_array_constraints(self, schema: Schema) -> None:
        if schema.items is not None:
            if not schema.type_is_empty() and not schema.type_matches("array"):
                raise SchemaValidationError(f"items can only be used with array type, got {_type_str(schema)}")
            try:
                self.validate(schema.items)
            except SchemaValidationError as e:
                raise SchemaValidationError(f"invalid items schema: {e}") from e

        if schema.min_items is not None or schema.max_items is not None:
            if not schema.type_is_empty() and not schema.type_matches("array"):
                raise SchemaValidationError(
                    f"minItems/maxItems can only be used with array type, got {_type_str(schema)}"
                )
            if schema.min_items is not None and schema.max_items is not None and schema.max_items < schema.min_items:
                raise SchemaValidationError(
                    f"maxItems ({schema.max_items}) cannot be less than minItems ({schema.min_items})"
                )

    def _validate_nested_schemas(self, schema: Schema) -> None:
        for variants in (schema.all_of, schema.any_of, schema.one_of):
            for variant in variants or []:
                self.validate(variant)

        for sub_schema in (schema.if_, schema.then, schema.else_, schema.not_):
            if sub_schema is not None:
                self.validate(sub_schema)

        for definition in (schema.definitions or {}).values():
            self.validate(definition)


def validate_schema(schema: Schema) -> None:
    """Validate a schema with a default SchemaValidator."""
    SchemaValidator().validate(schema)
