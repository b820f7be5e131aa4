"""
Values file loader.

Parses a values file into PyYAML nodes (yaml.compose) so that the native
tag of every value is kept, and recovers the leading comment of each
mapping key from the source text, since PyYAML drops comments.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from ...exceptions import ValuesFileError

logger = logging.getLogger(__name__)

BOOL_TAG = "tag:yaml.org,2002:bool"
INT_TAG = "tag:yaml.org,2002:int"
FLOAT_TAG = "tag:yaml.org,2002:float"
TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"

# YAML 1.2 core schema
_CORE_BOOL_REGEX = re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$")
_CORE_INT_REGEX = re.compile(r"^(?:[-+]?[0-9]+|0o[0-7]+|0x[0-9a-fA-F]+)$")
_CORE_FLOAT_REGEX = re.compile(
    r"^(?:[-+]?(?:\.[0-9]+|[0-9]+(?:\.[0-9]*)?)(?:[eE][-+]?[0-9]+)?"
    r"|[-+]?\.(?:inf|Inf|INF)"
    r"|\.(?:nan|NaN|NAN))$"
)


class ValuesLoader(yaml.SafeLoader):
    """SafeLoader resolving booleans and numbers the YAML 1.2 way.

    Helm reads values with YAML 1.2 semantics, where `yes`, `no`, `on`
    and `off` are plain strings, and so are `10:30` and `1_000`.
    """

    def construct_yaml_int(self, node):
        value = self.construct_scalar(node)
        try:
            if value.startswith(("0o", "0x")):
                return int(value, 0)
            return int(value, 10)
        except ValueError as e:
            raise yaml.constructor.ConstructorError(
                None, None, f"invalid integer {value!r}", node.start_mark
            ) from e


ValuesLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in (BOOL_TAG, INT_TAG, FLOAT_TAG)]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
ValuesLoader.add_implicit_resolver(BOOL_TAG, _CORE_BOOL_REGEX, list("tTfF"))
ValuesLoader.add_implicit_resolver(INT_TAG, _CORE_INT_REGEX, list("-+0123456789"))
ValuesLoader.add_implicit_resolver(FLOAT_TAG, _CORE_FLOAT_REGEX, list("-+0123456789."))
ValuesLoader.add_constructor(INT_TAG, ValuesLoader.construct_yaml_int)
# Timestamps stay strings so that annotation values remain JSON serializable
ValuesLoader.add_constructor(TIMESTAMP_TAG, yaml.SafeLoader.construct_yaml_str)


def _verbatim_lines(root: yaml.Node, source_lines: list[str]) -> set[int]:
    """Return the line numbers that continue a block or quoted scalar.

    Such lines may start with `#` without being comments.
    """
    lines: set[int] = set()
    seen: set[int] = set()
    pending = [root]
    while pending:
        node = pending.pop()
        if id(node) in seen:
            continue
        seen.add(id(node))

        if isinstance(node, yaml.ScalarNode):
            if node.style:
                end = node.end_mark
                last = end.line
                # A block scalar ends at the indentation of the next line
                if last >= len(source_lines) or not source_lines[last][: end.column].strip():
                    last -= 1
                lines.update(range(node.start_mark.line + 1, last + 1))
        elif isinstance(node, yaml.SequenceNode):
            pending.extend(node.value)
        elif isinstance(node, yaml.MappingNode):
            for key_node, value_node in node.value:
                pending.extend((key_node, value_node))
    return lines


@dataclass
class ValuesDocument:
    """One YAML document of a values file.

    Attributes:
        content: Top-level nodes of the document (exactly one when well formed)
        path: Path of the file the document was read from
        lines: Source lines of the whole file, used to recover comments
        verbatim_lines: Lines inside block or quoted scalars
    """

    content: list[yaml.Node] = field(default_factory=list)
    path: str = ""
    lines: list[str] = field(default_factory=list)
    verbatim_lines: set[int] = field(default_factory=set)

    def head_comment(self, key_node: yaml.Node) -> str:
        """Return the comment block directly above a mapping key.

        Comment lines are left-stripped; blank lines between comment
        paragraphs are kept as empty lines so callers can split on them.
        Keys that do not start their line (e.g. the second key of a flow
        mapping) have no head comment, and the scan stops at the content
        of a preceding block scalar.
        """
        line_no = key_node.start_mark.line
        if line_no >= len(self.lines):
            return ""
        prefix = self.lines[line_no][: key_node.start_mark.column]
        if prefix.strip(" \t-"):
            return ""

        collected: list[str] = []
        for index in range(line_no - 1, -1, -1):
            if index in self.verbatim_lines:
                break
            stripped = self.lines[index].strip()
            if stripped.startswith("#"):
                collected.append(stripped)
            elif not stripped:
                collected.append("")
            else:
                break

        collected.reverse()
        while collected and not collected[0]:
            collected.pop(0)
        while collected and not collected[-1]:
            collected.pop()
        return "\n".join(collected)


def load_values_from_string(text: str, path: str = "") -> list[ValuesDocument]:
    """Compose every document of a YAML stream.

    Args:
        text: The YAML source
        path: Path the source was read from (used as reference locator)

    Returns:
        One ValuesDocument per document in the stream, or a single empty
        document if the stream has none

    Raises:
        ValuesFileError: If the source is not valid YAML
    """
    lines = text.splitlines()
    try:
        nodes = list(yaml.compose_all(text, Loader=ValuesLoader))
    except yaml.YAMLError as e:
        raise ValuesFileError(f"Failed to parse YAML file {path}: {e}") from e

    documents = [
        ValuesDocument(content=[node], path=path, lines=lines, verbatim_lines=_verbatim_lines(node, lines))
        for node in nodes
        if node is not None
    ]
    if not documents:
        return [ValuesDocument(content=[], path=path, lines=lines)]
    return documents


def load_values(path: str | Path) -> list[ValuesDocument]:
    """Read and compose a values file."""
    path = Path(path)
    logger.debug(f"Loading values file: {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ValuesFileError(f"Failed to read values file {path}: {e}") from e
    return load_values_from_string(text, str(path))
