"""
Tests for the cross-field rules of the schema validator.
"""

import pytest

from helm_values_schema.exceptions import SchemaValidationError
from helm_values_schema.pipeline import Schema, parse_schema
from helm_values_schema.pipeline.analyzer import validate_schema


def assert_invalid(data, message):
    with pytest.raises(SchemaValidationError) as exc_info:
        validate_schema(parse_schema(data))
    assert message in str(exc_info.value)


class TestValidSchemas:
    """Schemas that pass validation"""

    @pytest.mark.parametrize(
        "data",
        [
            {},
            {"type": "string", "format": "email"},
            {"type": ["integer", "null"], "minimum": 0, "maximum": 10},
            {"type": "number", "exclusiveMinimum": 0},
            {"enum": ["a", "b"]},
            {"const": 3},
            {"type": "array", "items": {"type": "string", "pattern": "^a"}, "minItems": 1, "maxItems": 1},
            {"type": "string", "minLength": 2, "maxLength": 2},
            {"anyOf": [{"type": "string"}, {"type": "null"}]},
            {"$ref": "#/definitions/Missing"},
            {"definitions": {"A": {"type": "string"}}},
        ],
    )
    def test_valid(self, data):
        validate_schema(parse_schema(data))

    def test_empty_node(self):
        validate_schema(Schema())


class TestInvalidSchemas:
    """Each rule reports the first violation with its own message"""

    def test_syntax(self):
        assert_invalid({"type": "color"}, "invalid schema syntax")

    def test_multiple_of_must_be_positive(self):
        with pytest.raises(SchemaValidationError):
            validate_schema(Schema(type=["integer"], multiple_of=0))

    def test_const_and_type(self):
        assert_invalid({"type": "string", "const": "a"}, "cannot use both 'const' and 'type' in the same schema")

    def test_enum_and_type(self):
        assert_invalid({"type": "string", "enum": ["a"]}, "cannot use both 'enum' and 'type' in the same schema")

    def test_numeric_constraint_on_string(self):
        assert_invalid(
            {"type": "string", "minimum": 1},
            "numeric constraints can only be used with number or integer types, got [string]",
        )

    def test_minimum_and_exclusive_minimum(self):
        assert_invalid(
            {"type": "integer", "minimum": 1, "exclusiveMinimum": 0},
            "cannot use both minimum and exclusiveMinimum",
        )

    def test_maximum_and_exclusive_maximum(self):
        assert_invalid(
            {"type": "integer", "maximum": 1, "exclusiveMaximum": 2},
            "cannot use both maximum and exclusiveMaximum",
        )

    def test_format_on_integer(self):
        assert_invalid({"type": "integer", "format": "email"}, "format can only be used with string type, got [integer]")

    def test_unsupported_format(self):
        assert_invalid({"type": "string", "format": "color"}, "unsupported format: color")

    def test_pattern_on_object(self):
        assert_invalid({"type": "object", "pattern": "^a"}, "pattern can only be used with string type, got [object]")

    def test_format_and_pattern(self):
        assert_invalid(
            {"type": "string", "format": "email", "pattern": "@"},
            "cannot use both format and pattern in the same schema",
        )

    def test_min_length_greater_than_max_length(self):
        assert_invalid(
            {"type": "string", "minLength": 3, "maxLength": 1},
            "minLength (3) cannot be greater than maxLength (1)",
        )

    def test_items_on_string(self):
        assert_invalid({"type": "string", "items": {}}, "items can only be used with array type, got [string]")

    def test_invalid_items_schema(self):
        assert_invalid(
            {"type": "array", "items": {"type": "integer", "pattern": "^a"}},
            "invalid items schema: pattern can only be used with string type, got [integer]",
        )

    def test_min_items_on_object(self):
        assert_invalid(
            {"type": "object", "minItems": 1},
            "minItems/maxItems can only be used with array type, got [object]",
        )

    def test_max_items_less_than_min_items(self):
        assert_invalid(
            {"type": "array", "minItems": 3, "maxItems": 1},
            "maxItems (1) cannot be less than minItems (3)",
        )

    def test_multi_type_is_formatted_as_list(self):
        assert_invalid(
            {"type": ["string", "null"], "minimum": 1},
            "got [string null]",
        )

    @pytest.mark.parametrize("keyword", ["allOf", "anyOf", "oneOf"])
    def test_composition_members_are_validated(self, keyword):
        assert_invalid({keyword: [{"type": "string", "const": "a"}]}, "cannot use both 'const' and 'type'")

    @pytest.mark.parametrize("keyword", ["if", "then", "else", "not"])
    def test_conditional_schemas_are_validated(self, keyword):
        assert_invalid({keyword: {"type": "string", "enum": ["a"]}}, "cannot use both 'enum' and 'type'")

    def test_definitions_are_validated(self):
        assert_invalid(
            {"definitions": {"A": {"type": "integer", "format": "email"}}},
            "format can only be used with string type",
        )


if __name__ == "__main__":
    pytest.main([__file__])
