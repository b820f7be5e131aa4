"""
Schema generator orchestrating the pipeline phases.

1. Load: compose the values file, keeping tags and key comments
2. Infer: build the Schema tree and resolve annotation $refs
3. Fix: turn `required: true` shorthands into required lists
4. Validate: check the root schema before it is emitted
"""

from __future__ import annotations

import logging
from pathlib import Path

import requests

from .analyzer import (
    ResolutionContext,
    SchemaInferrer,
    disable_required_properties,
    fix_required_properties,
    validate_schema,
)
from .config import GeneratorConfig
from .schema_ast import Schema
from .values import ValuesDocument, load_values, load_values_from_string

logger = logging.getLogger(__name__)


class SchemaGenerator:
    """Generates the JSON Schema of a values file."""

    def __init__(self, config: GeneratorConfig | None = None, session: requests.Session | None = None):
        """
        Initialize the generator.

        Args:
            config: Generator configuration (defaults are used if None)
            session: HTTP session for downloading referenced schemas
        """
        self.config = config or GeneratorConfig()
        # Fail on bad skip names before any file is read
        self.config.skip_config()
        self.session = session

    def _new_context(self) -> ResolutionContext:
        context = ResolutionContext(
            root=Schema.new("object"),
            resolve_urls=self.config.resolve_urls,
            http_timeout=self.config.http_timeout,
        )
        if self.session is not None:
            context.session = self.session
        return context

    def generate(self, values_path: str | Path) -> Schema:
        """Generate the schema of the values file at values_path."""
        documents = load_values(values_path)
        return self._generate(documents)

    def generate_from_string(self, text: str, path: str = "values.yaml") -> Schema:
        """Generate the schema of values given as text.

        path is used to resolve relative $refs.
        """
        return self._generate(load_values_from_string(text, path))

    def _generate(self, documents: list[ValuesDocument]) -> Schema:
        if len(documents) > 1:
            logger.warning(f"Found {len(documents)} documents in {documents[0].path}, only the first one is used")

        inferrer = SchemaInferrer(self.config, self._new_context())
        schema = inferrer.infer(documents[0])

        fix_required_properties(schema)
        if self.config.no_required:
            disable_required_properties(schema)

        validate_schema(schema)
        logger.debug(f"Generated schema with {len(schema.properties or {})} top-level properties")
        return schema

    def generate_json(self, values_path: str | Path) -> str:
        """Generate the schema and serialize it as a JSON document."""
        return self.generate(values_path).to_json(indent=self.config.indent) + "\n"
