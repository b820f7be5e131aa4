"""
Reference resolver for $ref resolution.

Resolves $refs written in annotations against local files, remote URLs
and the root schema's definitions, so that the generated schema is
self-contained.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from urllib.parse import unquote

import jsonpointer
import requests

from ...exceptions import DefinitionConflictError, ReferenceResolutionError, SchemaDecodeError
from ...utils import generate_definition_name, is_url, relative_file
from ..schema_ast import Schema, parse_schema, schemas_equal

logger = logging.getLogger(__name__)

# JSON pointer prefix of a definitions entry
DEFINITIONS_POINTER_PREFIX = "/definitions/"

# $ref prefix of an internal definitions reference
INTERNAL_REF_PREFIX = "#" + DEFINITIONS_POINTER_PREFIX

# Files following this naming convention hold a whole set of definitions
ALL_DEFINITIONS_FILENAME = "_definitions.json"


@dataclass
class ResolutionContext:
    """State shared by every resolution of one generator run.

    Attributes:
        root: Root schema owning the definitions registry
        resolve_urls: Whether http(s) references are downloaded
        http_timeout: Timeout in seconds for a download
        session: HTTP session used for downloads
        url_cache: Downloaded and resolved schemas by base URL
    """

    root: Schema
    resolve_urls: bool = False
    http_timeout: float = 30.0
    session: requests.Session = field(default_factory=requests.Session)
    url_cache: dict[str, Schema] = field(default_factory=dict)


def _definition_name(fragment: str) -> str | None:
    """Return Name for a `/definitions/Name` pointer, None for any other pointer."""
    if not fragment.startswith(DEFINITIONS_POINTER_PREFIX):
        return None
    name = fragment.removeprefix(DEFINITIONS_POINTER_PREFIX)
    if not name or "/" in name:
        return None
    return name


class ReferenceResolver:
    """Resolves $refs of a schema tree in place."""

    def __init__(self, context: ResolutionContext):
        """
        Initialize the resolver.

        Args:
            context: Shared run state (root registry, URL cache, HTTP settings)
        """
        self.context = context
        self._reset()

    def _reset(self) -> None:
        # (file or URL, pointer) targets seen in this call
        self._visited_refs: set[tuple[str, str]] = set()
        self._visited_files: set[str] = set()
        self._visited_contexts: set[tuple[str, int]] = set()
        # target -> internal ref it was rewritten to
        self._rewritten_refs: dict[tuple[str, str], str] = {}
        # target -> schema it was replaced with
        self._inlined_refs: dict[tuple[str, str], Schema] = {}
        # file -> names of its own definitions
        self._file_definitions: dict[str, set[str]] = {}
        # file -> its resolved document
        self._loaded_files: dict[str, Schema] = {}
        self._definitions: dict[str, Schema] = {}

    def resolve(self, schema: Schema, locator: str) -> dict[str, Schema]:
        """
        Resolve every $ref reachable from schema.

        Args:
            schema: The schema to resolve, modified in place
            locator: Path or URL of the document schema was written in

        Returns:
            The definitions the caller must merge into the root registry:
            the schema's own definitions plus those of every loaded file

        Raises:
            ReferenceResolutionError: If a local file or fragment cannot be loaded
            DefinitionConflictError: If two loaded files define a name differently
        """
        self._reset()
        self._resolve_node(schema, locator)

        if schema.definitions:
            self._collect_definitions(schema.definitions)
        schema.definitions = None

        return self._definitions

    def _collect_definitions(self, definitions: dict[str, Schema]) -> None:
        for name, definition in definitions.items():
            existing = self._definitions.get(name)
            if existing is None:
                self._definitions[name] = definition
            elif not schemas_equal(existing, definition):
                raise DefinitionConflictError(name)

    def _resolve_node(self, schema: Schema | None, locator: str) -> None:
        if schema is None:
            return

        # The same external fragment may be revisited from different files
        if not is_url(locator):
            context_key = (locator, id(schema))
            if context_key in self._visited_contexts:
                logger.debug(f"Schema context already processed, skipping: {locator}")
                return
            self._visited_contexts.add(context_key)

        if schema.ref and self._resolve_ref(schema, locator):
            return

        self._resolve_children(schema, locator)

    def _resolve_ref(self, schema: Schema, locator: str) -> bool:
        """Resolve the $ref of schema.

        Returns:
            True if the nested schemas must not be visited afterwards
        """
        ref = schema.ref
        logger.debug(f"Resolving $ref={ref} from {locator}")

        base, _, fragment = ref.partition("#")
        fragment = unquote(fragment)

        if not base and fragment.startswith(DEFINITIONS_POINTER_PREFIX):
            name = fragment.removeprefix(DEFINITIONS_POINTER_PREFIX)
            if name in self._file_definitions.get(locator, ()):
                # Points into the loaded file's own definitions, which are merged under the same name
                return False
            definition = (self.context.root.definitions or {}).get(name)
            if definition is not None:
                logger.debug(f"Found internal definition reference: {name}")
                schema.replace_with(definition.copy())
                schema.set()
                return True
            logger.debug(f"Internal definition not found in root schema: {name}")

        if self.context.resolve_urls and is_url(base):
            target = (base, fragment)
            if target in self._visited_refs:
                return self._reuse_resolved_ref(schema, target)
            self._resolve_url_ref(schema, target)
            return True

        file_path = relative_file(locator, base)
        if file_path is not None:
            target = (os.path.normpath(file_path), fragment)
            if target in self._visited_refs:
                return self._reuse_resolved_ref(schema, target)
            self._resolve_file_ref(schema, target)
            return True

        logger.debug(f"Not a relative file, leaving $ref={ref} for a later pass")
        return False

    def _reuse_resolved_ref(self, schema: Schema, target: tuple[str, str]) -> bool:
        """Apply the result of an earlier resolution of the same target, if any."""
        if target in self._inlined_refs:
            schema.replace_with(self._inlined_refs[target].copy())
        elif target in self._rewritten_refs:
            schema.ref = self._rewritten_refs[target]
            schema.set()
        else:
            logger.debug(f"Circular reference detected, leaving $ref={schema.ref} as written")
        return True

    def _rewrite_to_definition(self, schema: Schema, target: tuple[str, str], name: str) -> None:
        internal_ref = INTERNAL_REF_PREFIX + name
        self._rewritten_refs[target] = internal_ref
        schema.ref = internal_ref
        schema.set()

    def _resolve_file_ref(self, schema: Schema, target: tuple[str, str]) -> None:
        """Resolve a $ref to a local file, optionally with a JSON pointer."""
        file_path, fragment = target
        self._visited_refs.add(target)
        definition_name = _definition_name(fragment)
        if definition_name is not None:
            # Known before loading, so that references back into the file resolve
            self._rewritten_refs[target] = INTERNAL_REF_PREFIX + definition_name

        if file_path in self._visited_files:
            logger.debug(f"File already processed, skipping: {file_path}")
            if definition_name is not None:
                self._rewrite_to_definition(schema, target, definition_name)
            elif file_path in self._loaded_files:
                self._inline(schema, self._loaded_files[file_path], target)
            else:
                logger.debug(f"File is still being resolved, leaving $ref={schema.ref} as written")
            return
        self._visited_files.add(file_path)

        full_schema = self._load_file(file_path)
        self._file_definitions[file_path] = set(full_schema.definitions or {})

        # Resolve the loaded document relative to its own location
        self._resolve_node(full_schema, file_path)
        self._loaded_files[file_path] = full_schema

        if definition_name is not None:
            if definition_name not in (full_schema.definitions or {}):
                logger.warning(f"Definition '{definition_name}' not found in {file_path}")
            self._rewrite_to_definition(schema, target, definition_name)
        else:
            self._inline(schema, full_schema, target)

        if full_schema.definitions:
            self._collect_definitions(full_schema.definitions)

    def _inline(self, schema: Schema, full_schema: Schema, target: tuple[str, str]) -> None:
        """Replace schema with the part of full_schema its pointer designates."""
        file_path, fragment = target
        if fragment:
            resolved = self._extract_fragment(full_schema, fragment, file_path)
        else:
            resolved = full_schema.copy()
            resolved.definitions = None
        resolved.set()
        schema.replace_with(resolved)
        self._inlined_refs[target] = resolved.copy()

    def _load_file(self, file_path: str) -> Schema:
        logger.debug(f"Loading referenced schema file: {file_path}")
        try:
            with open(file_path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ReferenceResolutionError(f"Failed to load referenced schema {file_path}: {e}") from e
        try:
            return parse_schema(data, file_path)
        except SchemaDecodeError as e:
            raise ReferenceResolutionError(f"Invalid schema in {file_path}: {e}") from e

    def _extract_fragment(self, document: Schema, fragment: str, source: str) -> Schema:
        try:
            pointed = jsonpointer.resolve_pointer(document.to_dict(), fragment)
        except jsonpointer.JsonPointerException as e:
            raise ReferenceResolutionError(f"Failed to resolve JSON pointer {fragment} in {source}: {e}") from e
        try:
            return parse_schema(pointed, f"{source}#{fragment}")
        except SchemaDecodeError as e:
            raise ReferenceResolutionError(str(e)) from e

    def _resolve_url_ref(self, schema: Schema, target: tuple[str, str]) -> None:
        """Download a referenced schema and register it as a root definition.

        Network problems are logged and leave the $ref untouched.
        """
        base_url, fragment = target
        self._visited_refs.add(target)
        logger.debug(f"Processing URL reference: baseURL={base_url}, jsonPointer={fragment}")

        downloaded = self.context.url_cache.get(base_url)
        if downloaded is None:
            downloaded = self._download(base_url)
            if downloaded is None:
                return
            self.context.url_cache[base_url] = downloaded
            logger.debug(f"Recursively resolving nested refs in downloaded schema from {base_url}")
            self._resolve_node(downloaded, base_url)
        else:
            logger.debug(f"Using cached schema for URL: {base_url}")

        if fragment:
            try:
                to_store = self._extract_fragment(downloaded, fragment, base_url)
            except ReferenceResolutionError as e:
                logger.error(str(e))
                return
            self._resolve_node(to_store, base_url)
            name = _definition_name(fragment) or fragment.strip("/").replace("/", "_")
        else:
            to_store = downloaded.copy()
            name = generate_definition_name(base_url)

        self._register_url_definition(name, to_store, base_url, downloaded, schema.ref)
        self._rewrite_to_definition(schema, target, name)

    def _download(self, url: str) -> Schema | None:
        logger.debug(f"Downloading schema from URL: {url}")
        try:
            with self.context.session.get(url, timeout=self.context.http_timeout) as response:
                if not 200 <= response.status_code < 300:
                    logger.error(f"Failed to download schema from {url}: HTTP {response.status_code}")
                    return None
                data = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Failed to download schema from {url}: {e}")
            return None

        try:
            return parse_schema(data, url)
        except SchemaDecodeError as e:
            logger.error(f"Failed to parse schema from {url}: {e}")
            return None

    def _register_url_definition(
        self, name: str, to_store: Schema, base_url: str, downloaded: Schema, ref: str
    ) -> None:
        root = self.context.root
        if root.definitions is None:
            root.definitions = {}

        existing = root.definitions.get(name)
        if existing is not None:
            if not schemas_equal(existing, to_store):
                logger.warning(f"Definition conflict for '{name}' from URL {ref} - using existing definition")
            return

        logger.debug(f"Adding definition '{name}' to root schema")
        root.definitions[name] = to_store

        # Pull in every sibling so that transitive references stay resolvable
        if ALL_DEFINITIONS_FILENAME in base_url and downloaded.definitions:
            logger.debug(f"Adding all definitions from {base_url} to root schema")
            for sibling_name, sibling in downloaded.definitions.items():
                if sibling_name not in root.definitions:
                    root.definitions[sibling_name] = sibling.copy()

    def _resolve_children(self, schema: Schema, locator: str) -> None:
        for sub_schemas in (schema.properties, schema.definitions, schema.pattern_properties):
            for sub_schema in (sub_schemas or {}).values():
                self._resolve_node(sub_schema, locator)

        for sub_schema in (schema.items, schema.if_, schema.then, schema.else_, schema.not_):
            self._resolve_node(sub_schema, locator)

        for variants in (schema.any_of, schema.all_of, schema.one_of):
            for variant in variants or []:
                self._resolve_node(variant, locator)
