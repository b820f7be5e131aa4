"""
Normalization of the `required` keyword.

Annotations may mark a property with `required: true`, which is not valid
JSON Schema. These passes turn that shorthand into `required` lists on the
parent object, or drop required lists altogether.
"""

from __future__ import annotations

from collections.abc import Iterator

from ..schema_ast import Schema


def _sub_schemas(schema: Schema) -> Iterator[Schema]:
    """Yield every nested schema except properties."""
    for sub_schema in (schema.then, schema.if_, schema.else_, schema.items, schema.not_):
        if sub_schema is not None:
            yield sub_schema
    if isinstance(schema.additional_properties, Schema):
        yield schema.additional_properties
    for variants in (schema.any_of, schema.all_of, schema.one_of):
        yield from variants or []
    yield from (schema.definitions or {}).values()


def fix_required_properties(schema: Schema) -> None:
    """Move `required: true` flags of properties into the parent's required list.

    Also forces the object type on any schema with properties. Running it
    twice changes nothing.
    """
    if schema.properties:
        for name, prop in schema.properties.items():
            fix_required_properties(prop)
            if prop.required.flag and name not in schema.required.names:
                schema.required.names.append(name)
        if not schema.type_matches("object"):
            schema.type = ["object"]

    for sub_schema in _sub_schemas(schema):
        fix_required_properties(sub_schema)


def disable_required_properties(schema: Schema) -> None:
    """Recursively clear every required list and flag."""
    schema.required.names = []
    schema.required.flag = False
    for prop in (schema.properties or {}).values():
        disable_required_properties(prop)
    for sub_schema in _sub_schemas(schema):
        disable_required_properties(sub_schema)
