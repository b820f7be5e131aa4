"""
Extraction of `# @schema` annotation blocks from key comments.

A key comment may contain a block of YAML, delimited by two `# @schema`
lines, holding an explicit schema for the key. Everything outside the
block is the key's description.
"""

from __future__ import annotations

import re

import yaml

from ...exceptions import AnnotationError, SchemaDecodeError
from ..schema_ast import Schema, parse_schema
from .loader import ValuesLoader

SCHEMA_PREFIX = "# @schema"
COMMENT_PREFIX = "#"

_LEADING_COMMENTS_REMOVER = re.compile(r"(?:.*\n{2,})+", re.DOTALL | re.MULTILINE)

# Lines holding helm-docs @tags, e.g. `# @ignored` or `# @default -- x`
_HELM_DOCS_TAGS_REMOVER = re.compile(r"(\r\n|\r|\n)?\s*@\w+(\s+--\s)?[^\n\r]*", re.DOTALL | re.MULTILINE)
_HELM_DOCS_PREFIX_REMOVER = re.compile(r"^--\s?", re.MULTILINE)


def _strip_comment_marker(line: str) -> str:
    return line.removeprefix(COMMENT_PREFIX).removeprefix(" ")


def get_schema_from_comment(comment: str) -> tuple[Schema, str]:
    """
    Parse the annotations of a key comment.

    Args:
        comment: The comment text, markers included

    Returns:
        (schema, description): the schema decoded from the annotation block
        (empty if there is none) and the remaining lines of the comment

    Raises:
        AnnotationError: If the block is unclosed or does not decode
    """
    raw_schema: list[str] = []
    description: list[str] = []
    inside_schema_block = False
    has_data = False

    for line in comment.splitlines():
        if line.startswith(SCHEMA_PREFIX):
            inside_schema_block = not inside_schema_block
            continue
        if inside_schema_block:
            content = line.removeprefix(COMMENT_PREFIX)
            raw_schema.append(_strip_comment_marker(content))
            has_data = True
        else:
            description.append(_strip_comment_marker(line))

    if inside_schema_block:
        raise AnnotationError(f"unclosed schema block found in comment: {comment}")

    try:
        data = yaml.load("\n".join(raw_schema), Loader=ValuesLoader)
        schema = parse_schema(data)
    except (yaml.YAMLError, SchemaDecodeError) as e:
        raise AnnotationError(str(e)) from e

    schema.has_data = has_data
    return schema, "\n".join(description)


def strip_leading_comments(comment: str) -> str:
    """Drop every paragraph of a comment except the last one."""
    return _LEADING_COMMENTS_REMOVER.sub("", comment)


def strip_helm_docs_prefix(description: str) -> str:
    """Remove helm-docs @tag lines and `-- ` prefixes from a description."""
    description = _HELM_DOCS_TAGS_REMOVER.sub("", description)
    return _HELM_DOCS_PREFIX_REMOVER.sub("", description)
