"""
Utility functions for locating referenced schemas.
"""

import os
import re
from urllib.parse import urlparse

# Characters that may not appear in a definition name derived from a URL
_NON_IDENTIFIER_PATTERN = re.compile(r"[/.\-#:]")


def is_url(text: str) -> bool:
    """Return True if text is an http or https URL."""
    try:
        parsed = urlparse(text)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https")


def relative_file(locator: str, ref_path: str) -> str | None:
    """Resolve ref_path against the directory of the document at locator.

    Examples:
        ("charts/app/values.yaml", "schemas/a.json") -> "charts/app/schemas/a.json"
        ("charts/app/values.yaml", "/abs/a.json") -> None

    Args:
        locator: Path of the document containing the reference
        ref_path: File part of a $ref (fragment already removed)

    Returns:
        The joined path if it names an existing file, otherwise None
    """
    if not ref_path or os.path.isabs(ref_path) or is_url(locator) or is_url(ref_path):
        return None
    candidate = os.path.join(os.path.dirname(locator), ref_path)
    if not os.path.isfile(candidate):
        return None
    return candidate


def generate_definition_name(ref_url: str) -> str:
    """Create a definition name from a URL.

    Examples:
        "https://example.com/schemas/foo.json" -> "example_com_schemas_foo_json"
        "http://10.0.0.1/a.json" -> "def_10_0_0_1_a_json"
    """
    name = ref_url.replace("https://", "").replace("http://", "")
    name = _NON_IDENTIFIER_PATTERN.sub("_", name)
    if name and not ("A" <= name[0] <= "Z" or "a" <= name[0] <= "z"):
        name = "def_" + name
    return name
