"""
Values module.

Loads values files and extracts the annotations written in key comments.
"""

from __future__ import annotations

from .annotations import (
    SCHEMA_PREFIX,
    get_schema_from_comment,
    strip_helm_docs_prefix,
    strip_leading_comments,
)
from .helm_docs import HelmDocsValue, helm_docs_type_to_schema_type, parse_helm_docs_comment
from .loader import ValuesDocument, ValuesLoader, load_values, load_values_from_string

__all__ = [
    "SCHEMA_PREFIX",
    "HelmDocsValue",
    "ValuesDocument",
    "ValuesLoader",
    "get_schema_from_comment",
    "helm_docs_type_to_schema_type",
    "load_values",
    "load_values_from_string",
    "parse_helm_docs_comment",
    "strip_helm_docs_prefix",
    "strip_leading_comments",
]
