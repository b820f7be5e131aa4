import json

import pytest

from helm_values_schema.pipeline import GeneratorConfig, SchemaGenerator
from helm_values_schema.utils import generate_definition_name, is_url, relative_file


@pytest.mark.parametrize(
    "text, expected",
    [
        ("https://example.com/a.json", True),
        ("http://example.com", True),
        ("ftp://example.com/a.json", False),
        ("schemas/a.json", False),
        ("#/definitions/A", False),
        ("", False),
    ],
)
def test_is_url(text, expected):
    assert is_url(text) == expected


class TestRelativeFile:
    """Test resolution of file references against the referencing document"""

    def test_existing_file(self, tmp_path):
        (tmp_path / "schemas").mkdir()
        (tmp_path / "schemas" / "a.json").write_text("{}")
        locator = str(tmp_path / "values.yaml")
        assert relative_file(locator, "schemas/a.json") == str(tmp_path / "schemas" / "a.json")

    def test_missing_file(self, tmp_path):
        assert relative_file(str(tmp_path / "values.yaml"), "a.json") is None

    def test_absolute_path(self, tmp_path):
        (tmp_path / "a.json").write_text("{}")
        assert relative_file(str(tmp_path / "values.yaml"), str(tmp_path / "a.json")) is None

    def test_empty_path(self, tmp_path):
        assert relative_file(str(tmp_path / "values.yaml"), "") is None

    def test_url_locator(self):
        assert relative_file("https://example.com/schema.json", "a.json") is None


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://example.com/schemas/foo.json", "example_com_schemas_foo_json"),
        ("http://example.com/a-b.json", "example_com_a_b_json"),
        ("http://10.0.0.1:8080/a.json", "def_10_0_0_1_8080_a_json"),
    ],
)
def test_generate_definition_name(url, expected):
    assert generate_definition_name(url) == expected


def test_generate_json(tmp_path):
    path = tmp_path / "values.yaml"
    path.write_text("a: 1\n", encoding="utf-8")

    out = SchemaGenerator(GeneratorConfig(indent=2)).generate_json(path)

    assert out.endswith("}\n")
    assert json.loads(out)["properties"]["a"]["default"] == 1
