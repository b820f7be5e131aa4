import copy
from unittest import TestCase

from helm_values_schema.pipeline import parse_schema
from helm_values_schema.pipeline.analyzer import disable_required_properties, fix_required_properties


class TestFixRequiredProperties(TestCase):
    def _schema(self):
        return parse_schema(
            {
                "properties": {
                    "a": {"type": "string", "required": True},
                    "b": {"type": "string", "required": False},
                    "c": {
                        "properties": {"d": {"type": "integer", "required": True}},
                    },
                },
                "items": {"properties": {"e": {"required": True}}},
                "definitions": {"F": {"properties": {"g": {"required": True}}}},
            }
        )

    def test_flags_become_parent_lists(self):
        schema = self._schema()
        fix_required_properties(schema)

        self.assertEqual(schema.required.names, ["a"])
        self.assertEqual(schema.properties["c"].required.names, ["d"])
        self.assertEqual(schema.items.required.names, ["e"])
        self.assertEqual(schema.definitions["F"].required.names, ["g"])

    def test_objects_get_object_type(self):
        schema = self._schema()
        fix_required_properties(schema)

        self.assertEqual(schema.type, ["object"])
        self.assertEqual(schema.properties["c"].type, ["object"])

    def test_existing_names_are_kept(self):
        schema = parse_schema({"required": ["x"], "properties": {"a": {"required": True}}})
        fix_required_properties(schema)
        self.assertEqual(schema.required.names, ["x", "a"])

    def test_idempotent(self):
        schema = self._schema()
        fix_required_properties(schema)
        once = copy.deepcopy(schema.to_dict())
        fix_required_properties(schema)
        self.assertEqual(schema.to_dict(), once)

    def test_disable(self):
        schema = self._schema()
        fix_required_properties(schema)
        disable_required_properties(schema)

        self.assertNotIn("required", schema.to_dict())
        self.assertNotIn("required", schema.properties["c"].to_dict())
        self.assertFalse(schema.properties["a"].required.flag)
        self.assertEqual(schema.definitions["F"].required.names, [])
