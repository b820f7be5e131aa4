"""
Configuration for the values schema generator pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..exceptions import ConfigError

# Fields whose automatic generation can be switched off
POSSIBLE_SKIP_FIELDS = ["type", "title", "description", "required", "default", "additionalProperties"]


@dataclass
class SkipAutoGenerationConfig:
    """Which schema fields must not be filled in automatically."""

    type: bool = False
    title: bool = False
    description: bool = False
    required: bool = False
    default: bool = False
    additional_properties: bool = False

    @staticmethod
    def from_names(names: list[str]) -> SkipAutoGenerationConfig:
        """Build the config from field names as written on the command line.

        Raises:
            ConfigError: If one of the names is not a skippable field
        """
        invalid = [name for name in names if name not in POSSIBLE_SKIP_FIELDS]
        if invalid:
            joined = "', '".join(invalid)
            raise ConfigError(f"unsupported field names '{joined}' for skipping auto-generation")

        return SkipAutoGenerationConfig(
            type="type" in names,
            title="title" in names,
            description="description" in names,
            required="required" in names,
            default="default" in names,
            additional_properties="additionalProperties" in names,
        )


@dataclass
class GeneratorConfig:
    """Configuration options for schema generation."""

    # Keep every paragraph of a key comment instead of only the last one
    keep_full_comment: bool = False

    # Read helm-docs style `# --` annotations as well
    helm_docs_compatibility_mode: bool = False

    # Keep helm-docs `@tag` lines and `-- ` prefixes in descriptions
    dont_strip_helm_docs_prefix: bool = False

    # Do not add the `global` property to the root schema
    dont_add_global: bool = False

    # Download and inline $refs pointing to http(s) URLs
    resolve_urls: bool = False

    # Drop every required list from the generated schema
    no_required: bool = False

    # Fields not to generate automatically (see POSSIBLE_SKIP_FIELDS)
    skip_auto_generation: list[str] = field(default_factory=list)

    # Timeout in seconds for downloading a referenced schema
    http_timeout: float = 30.0

    # Indentation of the written JSON document
    indent: int = 2

    def skip_config(self) -> SkipAutoGenerationConfig:
        """Return the parsed skip-auto-generation settings."""
        return SkipAutoGenerationConfig.from_names(self.skip_auto_generation)

    @staticmethod
    def from_dict(d: dict) -> GeneratorConfig:
        """Create a config from a dictionary."""
        config = GeneratorConfig()
        for k, v in d.items():
            if hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "keep_full_comment": self.keep_full_comment,
            "helm_docs_compatibility_mode": self.helm_docs_compatibility_mode,
            "dont_strip_helm_docs_prefix": self.dont_strip_helm_docs_prefix,
            "dont_add_global": self.dont_add_global,
            "resolve_urls": self.resolve_urls,
            "no_required": self.no_required,
            "skip_auto_generation": self.skip_auto_generation,
            "http_timeout": self.http_timeout,
            "indent": self.indent,
        }
