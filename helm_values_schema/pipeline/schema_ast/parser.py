"""
Decoder that builds Schema nodes from plain mappings.

The mappings come either from a `# @schema` annotation block (decoded
from YAML) or from a referenced JSON document (a file or a URL).
"""

from __future__ import annotations

from typing import Any

from ...exceptions import SchemaDecodeError
from .nodes import CUSTOM_ANNOTATION_PREFIX, Required, Schema


class SchemaParser:
    """Parses a JSON Schema mapping into a Schema tree."""

    # keyword -> attribute for plain string fields
    STRING_FIELDS = {
        "$schema": "schema",
        "$id": "id",
        "$ref": "ref",
        "title": "title",
        "description": "description",
        "pattern": "pattern",
        "format": "format",
    }

    BOOL_FIELDS = {
        "deprecated": "deprecated",
        "readOnly": "read_only",
        "writeOnly": "write_only",
        "uniqueItems": "unique_items",
    }

    INT_FIELDS = {
        "minimum": "minimum",
        "maximum": "maximum",
        "exclusiveMinimum": "exclusive_minimum",
        "exclusiveMaximum": "exclusive_maximum",
        "multipleOf": "multiple_of",
        "minLength": "min_length",
        "maxLength": "max_length",
        "minItems": "min_items",
        "maxItems": "max_items",
    }

    SCHEMA_FIELDS = {
        "items": "items",
        "not": "not_",
        "if": "if_",
        "then": "then",
        "else": "else_",
    }

    SCHEMA_LIST_FIELDS = {
        "anyOf": "any_of",
        "allOf": "all_of",
        "oneOf": "one_of",
    }

    SCHEMA_MAP_FIELDS = {
        "properties": "properties",
        "patternProperties": "pattern_properties",
        "definitions": "definitions",
    }

    def parse(self, data: Any, path: str = "#") -> Schema:
        """
        Parse a schema mapping.

        Args:
            data: The decoded mapping (None gives an empty schema)
            path: Location of data, used in error messages

        Returns:
            The decoded Schema

        Raises:
            SchemaDecodeError: If a keyword has a value of the wrong shape
        """
        if data is None:
            return Schema()
        if not isinstance(data, dict):
            raise SchemaDecodeError(f"{path}: expected a mapping, got {type(data).__name__}")

        schema = Schema()

        for key, value in data.items():
            if not isinstance(key, str):
                continue
            key_path = f"{path}/{key}"

            if key in self.STRING_FIELDS:
                setattr(schema, self.STRING_FIELDS[key], self._parse_string(value, key_path))
            elif key in self.BOOL_FIELDS:
                setattr(schema, self.BOOL_FIELDS[key], self._parse_bool(value, key_path))
            elif key in self.INT_FIELDS:
                setattr(schema, self.INT_FIELDS[key], self._parse_int(value, key_path))
            elif key in self.SCHEMA_FIELDS:
                setattr(schema, self.SCHEMA_FIELDS[key], self._parse_optional(value, key_path))
            elif key in self.SCHEMA_LIST_FIELDS:
                setattr(schema, self.SCHEMA_LIST_FIELDS[key], self._parse_schema_list(value, key_path))
            elif key in self.SCHEMA_MAP_FIELDS:
                setattr(schema, self.SCHEMA_MAP_FIELDS[key], self._parse_schema_map(value, key_path))
            elif key == "type":
                schema.type = self._parse_type(value, key_path)
            elif key == "required":
                schema.required = self._parse_required(value, key_path)
            elif key == "additionalProperties":
                schema.additional_properties = self._parse_additional_properties(value, key_path)
            elif key == "default":
                schema.default = value
            elif key == "const":
                schema.const = value
            elif key in ("enum", "examples"):
                setattr(schema, key, self._parse_list(value, key_path))
            elif key.startswith(CUSTOM_ANNOTATION_PREFIX):
                schema.custom_annotations[key] = value

        return schema

    def _parse_string(self, value: Any, path: str) -> str:
        if value is None:
            return ""
        if not isinstance(value, str):
            raise SchemaDecodeError(f"{path}: expected a string, got {value!r}")
        return value

    def _parse_bool(self, value: Any, path: str) -> bool:
        if value is None:
            return False
        if not isinstance(value, bool):
            raise SchemaDecodeError(f"{path}: expected a boolean, got {value!r}")
        return value

    def _parse_int(self, value: Any, path: str) -> int | None:
        if value is None:
            return None
        # bool is a subclass of int but never a valid bound
        if isinstance(value, bool) or not isinstance(value, int):
            raise SchemaDecodeError(f"{path}: expected an integer, got {value!r}")
        return value

    def _parse_list(self, value: Any, path: str) -> list[Any] | None:
        if value is None:
            return None
        if not isinstance(value, list):
            raise SchemaDecodeError(f"{path}: expected a list, got {value!r}")
        return list(value)

    def _parse_optional(self, value: Any, path: str) -> Schema | None:
        if value is None:
            return None
        return self.parse(value, path)

    def _parse_schema_list(self, value: Any, path: str) -> list[Schema] | None:
        items = self._parse_list(value, path)
        if items is None:
            return None
        return [self.parse(item, f"{path}/{i}") for i, item in enumerate(items)]

    def _parse_schema_map(self, value: Any, path: str) -> dict[str, Schema] | None:
        if value is None:
            return None
        if not isinstance(value, dict):
            raise SchemaDecodeError(f"{path}: expected a mapping, got {value!r}")
        return {str(name): self.parse(sub_schema, f"{path}/{name}") for name, sub_schema in value.items()}

    def _parse_type(self, value: Any, path: str) -> list[str]:
        """Decode a type name or a list of type names; null entries mean "null"."""
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        if isinstance(value, list):
            types = []
            for item in value:
                if item is None:
                    types.append("null")
                elif isinstance(item, str):
                    types.append(item)
                else:
                    raise SchemaDecodeError(f"{path}: expected type names, got {item!r}")
            return types
        raise SchemaDecodeError(f"{path}: expected a type name or a list of type names, got {value!r}")

    def _parse_required(self, value: Any, path: str) -> Required:
        if isinstance(value, bool):
            return Required(flag=value)
        if isinstance(value, list) and all(isinstance(name, str) for name in value):
            return Required(names=list(value))
        raise SchemaDecodeError(f"{path}: could not unmarshal {value!r} to slice of string or bool")

    def _parse_additional_properties(self, value: Any, path: str) -> bool | Schema | None:
        if value is None or isinstance(value, bool):
            return value
        return self.parse(value, path)


def parse_schema(data: Any, path: str = "#") -> Schema:
    """Decode a schema mapping with a default SchemaParser."""
    return SchemaParser().parse(data, path)
