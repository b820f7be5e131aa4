"""
Schema inference from values files.

Walks the composed YAML node graph of a values document and builds a
Schema tree: types come from the YAML tags, titles from the key names,
descriptions from the key comments and defaults from the values
themselves, unless a `# @schema` annotation says otherwise.
"""

from __future__ import annotations

import logging
import math
import re

import yaml

from ...exceptions import (
    AnnotationError,
    DefinitionConflictError,
    InferenceError,
    SchemaValidationError,
    ValuesFileError,
)
from ..config import GeneratorConfig
from ..schema_ast import Schema, schemas_equal
from ..values import (
    ValuesDocument,
    get_schema_from_comment,
    helm_docs_type_to_schema_type,
    parse_helm_docs_comment,
    strip_helm_docs_prefix,
    strip_leading_comments,
)
from .reference_resolver import ReferenceResolver, ResolutionContext
from .required import fix_required_properties
from .validator import validate_schema

logger = logging.getLogger(__name__)

JSON_SCHEMA_DRAFT = "http://json-schema.org/draft-07/schema#"

GLOBAL_PROPERTY = "global"
GLOBAL_DESCRIPTION = (
    "Global values are values that can be accessed from any chart or subchart by exactly the same name."
)

_YAML_TAG_PREFIX = "tag:yaml.org,2002:"

# Literals accepted by strict integer and float parsing
_INT_LITERAL_REGEX = re.compile(r"[-+]?[0-9]+")
_FLOAT_LITERAL_REGEX = re.compile(r"[-+]?(?:\.[0-9]+|[0-9]+(?:\.[0-9]*)?)(?:[eE][-+]?[0-9]+)?")

# YAML tag -> JSON Schema type
_TAG_TYPES = {
    _YAML_TAG_PREFIX + "null": "null",
    _YAML_TAG_PREFIX + "bool": "boolean",
    _YAML_TAG_PREFIX + "str": "string",
    _YAML_TAG_PREFIX + "int": "integer",
    _YAML_TAG_PREFIX + "float": "number",
    _YAML_TAG_PREFIX + "timestamp": "string",
    _YAML_TAG_PREFIX + "seq": "array",
    _YAML_TAG_PREFIX + "map": "object",
}


def type_from_tag(tag: str) -> list[str]:
    """Return the schema type of a YAML node tag.

    Raises:
        InferenceError: If the tag is not one of the core schema tags
    """
    try:
        return [_TAG_TYPES[tag]]
    except KeyError:
        raise InferenceError(f"unsupported yaml tag found: {tag}") from None


def cast_node_value_by_type(raw_value: str, field_type: list[str]):
    """
    Convert the literal text of a scalar to the first matching type.

    Examples:
        ("3", ["integer"]) -> 3
        ("true", ["boolean"]) -> True
        ("3", ["string"]) -> "3"
        ("abc", ["integer", "number"]) -> "abc"
        ("1_0", ["integer"]) -> "1_0"
        ("1e400", ["number"]) -> "1e400"

    Returns:
        The converted value, or raw_value if no type accepts it
    """
    for type_name in field_type:
        if type_name == "boolean":
            if raw_value == "true":
                return True
            if raw_value == "false":
                return False
        elif type_name == "integer":
            if _INT_LITERAL_REGEX.fullmatch(raw_value):
                return int(raw_value)
        elif type_name == "number":
            if _FLOAT_LITERAL_REGEX.fullmatch(raw_value):
                value = float(raw_value)
                if math.isfinite(value):
                    return value
    return raw_value


class SchemaInferrer:
    """Builds the schema of one values document."""

    def __init__(self, config: GeneratorConfig, context: ResolutionContext):
        """
        Initialize the inferrer.

        Args:
            config: Generator configuration
            context: Resolution state; its root schema receives the result
        """
        self.config = config
        self.context = context
        self.skip = config.skip_config()
        self.resolver = ReferenceResolver(context)
        self._locator = ""

    def infer(self, document: ValuesDocument) -> Schema:
        """
        Infer the root schema of a document.

        Args:
            document: A composed values document

        Returns:
            The root schema (the context's root, filled in)

        Raises:
            HelmValuesSchemaError: On any structural problem, naming the key involved
        """
        if len(document.content) != 1:
            raise ValuesFileError(
                f"Strange yaml document found in {document.path or '<string>'}: "
                f"expected exactly one root node, got {len(document.content)}"
            )

        self._document = document
        self._locator = document.path

        root = self.context.root
        root.schema = JSON_SCHEMA_DRAFT
        if not root.type:
            root.type = ["object"]

        content = self._yaml_to_schema(document.content[0], root.required.names)
        root.properties = content.properties

        if not self.config.dont_add_global and GLOBAL_PROPERTY not in (root.properties or {}):
            # helm lint fails when the global key is not allowed
            if root.properties is None:
                root.properties = {}
            global_schema = Schema.new("object")
            if not self.skip.title:
                global_schema.title = GLOBAL_PROPERTY
            if not self.skip.description:
                global_schema.description = GLOBAL_DESCRIPTION
            root.properties[GLOBAL_PROPERTY] = global_schema

        if not self.skip.additional_properties:
            root.additional_properties = False

        return root

    def _yaml_to_schema(self, node: yaml.Node, parent_required: list[str]) -> Schema:
        schema = Schema.new("object")
        if not isinstance(node, yaml.MappingNode):
            return schema

        schema.properties = {}
        for key_node, value_node in node.value:
            key = self._key_name(key_node)
            schema.properties[key] = self._infer_property(key, key_node, value_node, parent_required)
        return schema

    def _key_name(self, key_node: yaml.Node) -> str:
        if not isinstance(key_node, yaml.ScalarNode):
            raise InferenceError(f"unsupported mapping key at {key_node.start_mark}: keys must be scalars")
        return key_node.value

    def _infer_property(
        self, key: str, key_node: yaml.Node, value_node: yaml.Node, parent_required: list[str]
    ) -> Schema:
        raw_comment = self._document.head_comment(key_node)
        comment = raw_comment if self.config.keep_full_comment else strip_leading_comments(raw_comment)

        try:
            schema, description = get_schema_from_comment(comment)
        except AnnotationError as e:
            raise AnnotationError(f"Error while parsing comment of key {key}: {e}") from e

        if self.config.helm_docs_compatibility_mode:
            self._apply_helm_docs(schema, raw_comment)

        if not self.config.dont_strip_helm_docs_prefix:
            description = strip_helm_docs_prefix(description)

        if schema.ref or schema.pattern_properties:
            self._resolve_refs(schema)

        if schema.has_data:
            try:
                validate_schema(schema)
            except SchemaValidationError as e:
                raise SchemaValidationError(f"Error while validating jsonschema of key {key}: {e}") from e
        elif not self.skip.type:
            schema.type = type_from_tag(value_node.tag)

        # Referenced schemas are kept as they are
        if schema.ref:
            return schema

        if schema.required.flag or (not schema.required.names and not self.skip.required and not schema.has_data):
            if key not in parent_required:
                parent_required.append(key)

        is_mapping = isinstance(value_node, yaml.MappingNode)
        if (
            not self.skip.additional_properties
            and is_mapping
            and (not schema.has_data or schema.additional_properties is None)
        ):
            schema.additional_properties = False

        if not schema.title and not self.skip.title:
            schema.title = key
        if not schema.description and not self.skip.description:
            schema.description = description
        if not self.skip.default and schema.default is None and isinstance(value_node, yaml.ScalarNode):
            schema.default = cast_node_value_by_type(value_node.value, schema.type)

        if is_mapping and schema.properties is None:
            self._infer_properties(key, schema, value_node)
        elif isinstance(value_node, yaml.SequenceNode) and schema.items is None:
            schema.items = self._infer_items(value_node)
            # Items may carry the boolean required shorthand
            fix_required_properties(schema)

        return schema

    def _apply_helm_docs(self, schema: Schema, raw_comment: str) -> None:
        value = parse_helm_docs_comment(raw_comment.split("\n"))
        if value is None:
            return

        if value.default and schema.default is None:
            schema.set()
            schema.default = value.default
        if value.description and not schema.description:
            schema.set()
            schema.description = value.description
        if value.value_type and schema.type_is_empty():
            try:
                type_name = helm_docs_type_to_schema_type(value.value_type)
            except ValueError as e:
                logger.warning(str(e))
            else:
                schema.set()
                schema.type = [type_name]

    def _resolve_refs(self, schema: Schema) -> None:
        definitions = self.resolver.resolve(schema, self._locator)
        if not definitions:
            return

        root = self.context.root
        if root.definitions is None:
            root.definitions = {}
        for name, definition in definitions.items():
            existing = root.definitions.get(name)
            if existing is None:
                root.definitions[name] = definition
            elif not schemas_equal(existing, definition):
                raise DefinitionConflictError(name)

    def _infer_properties(self, key: str, schema: Schema, value_node: yaml.MappingNode) -> None:
        generated = self._yaml_to_schema(value_node, schema.required.names)
        patterns = list(schema.pattern_properties or {})

        schema.properties = {}
        for child_key_node, _ in value_node.value:
            child_key = self._key_name(child_key_node)
            if self._matches_pattern(key, patterns, child_key):
                continue
            schema.properties[child_key] = generated.properties[child_key]

    def _matches_pattern(self, key: str, patterns: list[str], child_key: str) -> bool:
        for pattern in patterns:
            try:
                if re.search(pattern, child_key):
                    return True
            except re.error as e:
                raise InferenceError(f"Invalid pattern '{pattern}' in patternProperties of key {key}: {e}") from e
        return False

    def _infer_items(self, value_node: yaml.SequenceNode) -> Schema:
        items = Schema.new()
        items.any_of = []
        for item_node in value_node.value:
            if isinstance(item_node, yaml.MappingNode):
                item_required: list[str] = []
                item_schema = self._yaml_to_schema(item_node, item_required)
                item_schema.required.names.extend(item_required)
                if not self.skip.additional_properties and (
                    not item_schema.has_data or item_schema.additional_properties is None
                ):
                    item_schema.additional_properties = False
            else:
                item_schema = Schema.new(type_from_tag(item_node.tag)[0])
            items.any_of.append(item_schema)
        return items
