"""
Structural equality of schema nodes.

Two definitions registered under the same name may be merged only if
they are structurally equal. Descriptive fields (title, description)
are ignored: two schemas that differ only in prose are the same
definition.
"""

from __future__ import annotations

from .nodes import Schema

# Scalar fields compared first, in this order
_SCALAR_FIELDS = ("pattern", "format", "deprecated", "read_only", "write_only", "unique_items", "ref")

_BOUND_FIELDS = (
    "minimum",
    "maximum",
    "exclusive_minimum",
    "exclusive_maximum",
    "multiple_of",
    "min_length",
    "max_length",
    "min_items",
    "max_items",
)


def schemas_equal(a: Schema | None, b: Schema | None) -> bool:
    """Compare two schema nodes for semantic equality."""
    if a is None and b is None:
        return True
    if a is None or b is None:
        return False

    for name in _SCALAR_FIELDS:
        if getattr(a, name) != getattr(b, name):
            return False

    if list(a.type) != list(b.type):
        return False

    # None means absent, so 0 and None differ
    for name in _BOUND_FIELDS:
        if getattr(a, name) != getattr(b, name):
            return False

    if a.default != b.default or a.const != b.const:
        return False

    if (a.enum or []) != (b.enum or []) or (a.examples or []) != (b.examples or []):
        return False

    return _nested_equal(a, b)


def _nested_equal(a: Schema, b: Schema) -> bool:
    for name in ("properties", "definitions", "pattern_properties"):
        if not _schema_maps_equal(getattr(a, name), getattr(b, name)):
            return False

    for name in ("items", "if_", "then", "else_", "not_"):
        if not schemas_equal(getattr(a, name), getattr(b, name)):
            return False

    for name in ("any_of", "all_of", "one_of"):
        if not _schema_lists_equal(getattr(a, name), getattr(b, name)):
            return False

    return True


def _schema_maps_equal(a: dict[str, Schema] | None, b: dict[str, Schema] | None) -> bool:
    a = a or {}
    b = b or {}
    if a.keys() != b.keys():
        return False
    return all(schemas_equal(a[key], b[key]) for key in a)


def _schema_lists_equal(a: list[Schema] | None, b: list[Schema] | None) -> bool:
    a = a or []
    b = b or []
    if len(a) != len(b):
        return False
    return all(schemas_equal(x, y) for x, y in zip(a, b))
