"""
Parser for helm-docs style value comments.

helm-docs documents a value with a comment group such as:

    # -- (int) Number of replicas
    # spread over the cluster
    # @default -- 3 per zone
    replicaCount: 3

Only the last group starting with `# --` is considered, like helm-docs
does.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_GROUP_PREFIX = "# --"
_VALUES_DESCRIPTION_REGEX = re.compile(r"^\s*#\s*(.*)\s+--\s*(.*)$")
_RAW_DESCRIPTION_REGEX = re.compile(r"^\s*#\s+@raw")
_COMMENT_CONTINUATION_REGEX = re.compile(r"^\s*#(\s?)(.*)$")
_DEFAULT_VALUE_REGEX = re.compile(r"^\s*# @default -- (.*)$")
_VALUE_TYPE_REGEX = re.compile(r"^\((.*?)\)\s*(.*)$")
_NOTATION_TYPE_REGEX = re.compile(r"^\s*#\s+@notationType\s+--\s+(.*)$")
_SECTION_REGEX = re.compile(r"^\s*# @section -- (.*)$")

# helm-docs type name -> JSON Schema type name
_HELM_DOCS_TYPES = {
    "int": "integer",
    "bool": "boolean",
    "float": "number",
    "list": "array",
    "map": "object",
    "string": "string",
    "object": "object",
}


@dataclass
class HelmDocsValue:
    """What a helm-docs comment says about a value."""

    default: str = ""
    description: str = ""
    value_type: str = ""


def parse_helm_docs_comment(comment_lines: list[str]) -> HelmDocsValue | None:
    """
    Parse the helm-docs annotations of a key comment.

    Args:
        comment_lines: The raw comment lines, markers included

    Returns:
        The parsed annotations, or None if no `# --` line is present
    """
    group_start = 0
    for i, line in enumerate(comment_lines):
        if line.startswith(_GROUP_PREFIX):
            group_start = i

    doc_start = None
    for i in range(group_start, len(comment_lines)):
        if _VALUES_DESCRIPTION_REGEX.match(comment_lines[i]):
            doc_start = i
            break
    if doc_start is None:
        return None

    match = _VALUES_DESCRIPTION_REGEX.match(comment_lines[doc_start])
    value = HelmDocsValue(description=match.group(2))

    type_match = _VALUE_TYPE_REGEX.match(value.description)
    if type_match and type_match.group(1):
        value.value_type = type_match.group(1)
        value.description = type_match.group(2)

    is_raw = False
    for line in comment_lines[doc_start + 1 :]:
        if not is_raw and _RAW_DESCRIPTION_REGEX.match(line):
            is_raw = True
            continue

        default_match = _DEFAULT_VALUE_REGEX.match(line)
        if default_match:
            value.default = default_match.group(1)
            continue
        if _NOTATION_TYPE_REGEX.match(line) or _SECTION_REGEX.match(line):
            continue

        continuation = _COMMENT_CONTINUATION_REGEX.match(line)
        if continuation:
            separator = "\n" if is_raw else " "
            value.description += separator + continuation.group(2)

    return value


def helm_docs_type_to_schema_type(helm_docs_type: str) -> str:
    """Translate a helm-docs type name.

    Raises:
        ValueError: If the type has no JSON Schema counterpart
    """
    try:
        return _HELM_DOCS_TYPES[helm_docs_type]
    except KeyError:
        raise ValueError(f"cant translate helm-docs type ({helm_docs_type}) to helm-schema type") from None
