"""
Functional tests for schema generation.

Each case in test_data/functional/*_tests.json holds a values file, an
optional generator config and the expected schema fragments.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from helm_values_schema.pipeline import GeneratorConfig, SchemaGenerator


def load_all_test_cases():
    """Load all test cases from all JSON files in test_data/functional directory."""
    functional_dir = Path(__file__).parent / "test_data" / "functional"
    test_cases = []

    for json_file in sorted(functional_dir.glob("*_tests.json")):
        with open(json_file) as f:
            data = json.load(f)

        for test_case in data:
            test_case["_source_file"] = json_file.name
            test_cases.append(test_case)

    return test_cases


def _generate_schema(values_text, config_dict, tmp_path):
    """Helper to generate a schema dict from values text and config."""
    values_path = tmp_path / "values.yaml"
    values_path.write_text(values_text, encoding="utf-8")

    config = GeneratorConfig.from_dict(config_dict or {})
    return SchemaGenerator(config).generate(values_path).to_dict()


@pytest.mark.parametrize("test_case", load_all_test_cases(), ids=lambda tc: tc["name"])
def test_functional_generation(test_case, tmp_path):
    """Unified test for all JSON test cases using a single pattern."""
    name = test_case["name"]
    description = test_case["description"]
    source_file = test_case.get("_source_file", "unknown")

    print(f"\nTesting: {name} (from {source_file})")
    print(f"Description: {description}")

    schema = _generate_schema(test_case["values"], test_case.get("config"), tmp_path)

    assert schema["$schema"] == "http://json-schema.org/draft-07/schema#"
    assert schema["type"] == "object"

    properties = schema.get("properties", {})
    for prop_name, expected in test_case.get("expected_properties", {}).items():
        assert prop_name in properties, f"Expected property '{prop_name}' not found"
        assert properties[prop_name] == expected, f"Unexpected schema for property '{prop_name}'"

    for prop_name in test_case.get("expected_absent", []):
        assert prop_name not in properties, f"Unexpected property '{prop_name}' found"

    if "expected_required" in test_case:
        assert schema.get("required", []) == test_case["expected_required"]


if __name__ == "__main__":
    pytest.main([__file__])
