"""
Schema tree node definitions.

A Schema is a (partial) JSON Schema document node as produced from a
values file. Fields mirror the JSON Schema keywords; the json names are
restored by to_dict().
"""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field, fields
from typing import Any

# Prefix marking vendor annotations kept outside the typed fields
CUSTOM_ANNOTATION_PREFIX = "x-"

# Type names accepted in a "type" keyword
PRIMITIVE_TYPES = ("object", "string", "integer", "number", "array", "null", "boolean")


@dataclass
class Required:
    """The `required` keyword, which can be a boolean or a list of names.

    The boolean form is a shorthand written on a property to mark it as
    required in its parent; fix_required_properties() turns it into a
    real list on the parent.
    """

    names: list[str] = field(default_factory=list)
    flag: bool = False


@dataclass
class Schema:
    """A JSON Schema node."""

    # Identity and annotations
    schema: str = ""  # $schema
    id: str = ""  # $id
    title: str = ""
    description: str = ""
    deprecated: bool = False
    read_only: bool = False
    write_only: bool = False
    default: Any = None
    examples: list[Any] | None = None
    const: Any = None
    enum: list[Any] | None = None

    # Type names, empty means unconstrained
    type: list[str] = field(default_factory=list)

    # Numeric constraints
    minimum: int | None = None
    maximum: int | None = None
    exclusive_minimum: int | None = None
    exclusive_maximum: int | None = None
    multiple_of: int | None = None

    # String constraints
    pattern: str = ""
    format: str = ""
    min_length: int | None = None
    max_length: int | None = None

    # Array constraints
    items: Schema | None = None
    min_items: int | None = None
    max_items: int | None = None
    unique_items: bool = False

    # Object constraints
    properties: dict[str, Schema] | None = None
    pattern_properties: dict[str, Schema] | None = None
    additional_properties: bool | Schema | None = None
    required: Required = field(default_factory=Required)

    # Composition and conditionals
    any_of: list[Schema] | None = None
    all_of: list[Schema] | None = None
    one_of: list[Schema] | None = None
    not_: Schema | None = None
    if_: Schema | None = None
    then: Schema | None = None
    else_: Schema | None = None

    # References
    ref: str = ""  # $ref
    definitions: dict[str, Schema] | None = None

    # x-* keys, inlined at top level when serialized
    custom_annotations: dict[str, Any] = field(default_factory=dict)

    # True if the node was filled from an explicit annotation (never serialized)
    has_data: bool = False

    @staticmethod
    def new(type_name: str = "") -> Schema:
        """Create an empty schema, typed when type_name is given."""
        if not type_name:
            return Schema()
        return Schema(type=[type_name])

    def set(self) -> None:
        """Mark the node as populated from explicit data."""
        self.has_data = True

    def copy(self) -> Schema:
        """Return a deep copy of this node."""
        return copy.deepcopy(self)

    def replace_with(self, other: Schema) -> None:
        """Overwrite every field of this node with the fields of other."""
        for f in fields(self):
            setattr(self, f.name, getattr(other, f.name))

    # Type helpers

    def type_is_empty(self) -> bool:
        """True if the type is unconstrained."""
        return not self.type or any(t == "" for t in self.type)

    def type_matches(self, type_name: str) -> bool:
        """True if type_name is one of the allowed types."""
        return type_name in self.type

    def has_numeric_constraints(self) -> bool:
        return (
            self.minimum is not None
            or self.maximum is not None
            or self.exclusive_minimum is not None
            or self.exclusive_maximum is not None
            or self.multiple_of is not None
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dictionary using JSON Schema keyword names."""
        d: dict[str, Any] = {}

        if self.schema:
            d["$schema"] = self.schema
        if self.id:
            d["$id"] = self.id
        if self.ref:
            d["$ref"] = self.ref
        if self.title:
            d["title"] = self.title
        if self.description:
            d["description"] = self.description
        if self.type:
            d["type"] = self.type[0] if len(self.type) == 1 else list(self.type)
        if self.deprecated:
            d["deprecated"] = True
        if self.read_only:
            d["readOnly"] = True
        if self.write_only:
            d["writeOnly"] = True
        if self.default is not None:
            d["default"] = self.default
        if self.examples:
            d["examples"] = list(self.examples)
        if self.const is not None:
            d["const"] = self.const
        if self.enum:
            d["enum"] = list(self.enum)

        for key, value in (
            ("minimum", self.minimum),
            ("maximum", self.maximum),
            ("exclusiveMinimum", self.exclusive_minimum),
            ("exclusiveMaximum", self.exclusive_maximum),
            ("multipleOf", self.multiple_of),
        ):
            if value is not None:
                d[key] = value

        if self.pattern:
            d["pattern"] = self.pattern
        if self.format:
            d["format"] = self.format
        if self.min_length is not None:
            d["minLength"] = self.min_length
        if self.max_length is not None:
            d["maxLength"] = self.max_length

        if self.items is not None:
            d["items"] = self.items.to_dict()
        if self.min_items is not None:
            d["minItems"] = self.min_items
        if self.max_items is not None:
            d["maxItems"] = self.max_items
        if self.unique_items:
            d["uniqueItems"] = True

        if self.properties:
            d["properties"] = {name: prop.to_dict() for name, prop in self.properties.items()}
        if self.pattern_properties:
            d["patternProperties"] = {pattern: prop.to_dict() for pattern, prop in self.pattern_properties.items()}
        if isinstance(self.additional_properties, Schema):
            d["additionalProperties"] = self.additional_properties.to_dict()
        elif self.additional_properties is not None:
            d["additionalProperties"] = self.additional_properties
        if self.required.names:
            d["required"] = list(self.required.names)

        for key, variants in (("anyOf", self.any_of), ("allOf", self.all_of), ("oneOf", self.one_of)):
            if variants:
                d[key] = [variant.to_dict() for variant in variants]
        for key, sub_schema in (("not", self.not_), ("if", self.if_), ("then", self.then), ("else", self.else_)):
            if sub_schema is not None:
                d[key] = sub_schema.to_dict()

        if self.definitions:
            d["definitions"] = {name: definition.to_dict() for name, definition in self.definitions.items()}

        # Vendor annotations are inlined, not nested
        for key, value in self.custom_annotations.items():
            d[key] = value

        return d

    def to_json(self, indent: int = 2) -> str:
        """Serialize to a JSON string."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)
