#!/usr/bin/env python3

import json

import pytest
from click.testing import CliRunner

from helm_values_schema.helm_values_schema import helm_values_schema, split_skip_fields

VALUES = "# Replica count\nreplicas: 2\nimage:\n  tag: latest\n"


@pytest.fixture
def values_file(tmp_path):
    path = tmp_path / "values.yaml"
    path.write_text(VALUES, encoding="utf-8")
    return path


class TestCli:
    """Test the command line entry point"""

    def test_writes_output_file(self, values_file, tmp_path):
        output = tmp_path / "values.schema.json"
        result = CliRunner().invoke(helm_values_schema, [str(values_file), str(output)])

        assert result.exit_code == 0, result.output
        schema = json.loads(output.read_text(encoding="utf-8"))
        assert schema["properties"]["replicas"]["description"] == "Replica count"
        assert schema["required"] == ["replicas", "image"]

    def test_writes_stdout(self, values_file):
        result = CliRunner().invoke(helm_values_schema, [str(values_file)])

        assert result.exit_code == 0
        assert json.loads(result.output)["properties"]["image"]["type"] == "object"

    def test_flags(self, values_file):
        result = CliRunner().invoke(
            helm_values_schema,
            [str(values_file), "--dont-add-global", "--no-required", "-k", "title,default", "-k", "description"],
        )

        schema = json.loads(result.output)
        assert "global" not in schema["properties"]
        assert "required" not in schema
        assert schema["properties"]["replicas"] == {"type": "integer"}

    def test_config_file(self, values_file, tmp_path):
        config = tmp_path / "config.json"
        config.write_text(json.dumps({"dont_add_global": True, "indent": 4}), encoding="utf-8")

        result = CliRunner().invoke(helm_values_schema, [str(values_file), "--config", str(config)])

        assert result.exit_code == 0
        assert "global" not in json.loads(result.output)["properties"]
        assert '\n    "$schema"' in result.output

    def test_invalid_skip_field(self, values_file):
        result = CliRunner().invoke(helm_values_schema, [str(values_file), "-k", "color"])

        assert result.exit_code == 1
        assert "unsupported field names 'color' for skipping auto-generation" in result.output

    def test_invalid_annotation(self, tmp_path):
        path = tmp_path / "values.yaml"
        path.write_text("# @schema\n# type: string\nbroken: 1\n", encoding="utf-8")

        result = CliRunner().invoke(helm_values_schema, [str(path)])

        assert result.exit_code == 1
        assert "Error while parsing comment of key broken" in result.output

    def test_missing_values_file(self, tmp_path):
        result = CliRunner().invoke(helm_values_schema, [str(tmp_path / "missing.yaml")])
        assert result.exit_code == 2


def test_split_skip_fields():
    assert split_skip_fields(("title, default", "required", "")) == ["title", "default", "required"]


if __name__ == "__main__":
    pytest.main([__file__])
