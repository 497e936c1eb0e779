import json
from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner

from openapi_analyzer.cli import _parse_roots, main

FIXTURES = Path(__file__).parent / "fixtures"


class TestCliAnalyze:
    def test_analyze_petstore(self):
        runner = CliRunner()
        result = runner.invoke(main, ["analyze", str(FIXTURES / "petstore.yaml")])

        assert result.exit_code == 0
        assert "Title: Petstore" in result.output
        assert "Total: 7" in result.output
        assert "pets_crud (crud)" in result.output
        assert "Tools: Yes" in result.output
        assert "Relationships:" not in result.output

    def test_analyze_detailed(self):
        runner = CliRunner()
        result = runner.invoke(main, ["analyze", "--detailed", str(FIXTURES / "petstore.yaml")])

        assert result.exit_code == 0
        assert "Pet belongs_to User" in result.output
        assert "429: GET /pets (recoverable)" in result.output

    def test_analyze_json(self):
        runner = CliRunner()
        result = runner.invoke(main, ["analyze", "--json", str(FIXTURES / "petstore.yaml")])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["has_prompts"] is True
        assert data["relationships"][0]["from"] == "Pet"
        assert "schema" in data["resources"][0]

    def test_analyze_with_context(self):
        runner = CliRunner()
        result = runner.invoke(main, [
            "analyze", "--json", "--env", "production",
            "--root", "test-workspace=file:///work",
            str(FIXTURES / "petstore.yaml"),
        ])

        assert result.exit_code == 0
        caps = json.loads(result.output)["capabilities"]
        assert caps["requires_strict_validation"] is True
        assert caps["has_test_mode"] is True

    def test_invalid_document_exits_with_error(self, tmp_path):
        f = tmp_path / "bad.yaml"
        f.write_text("openapi: 3.0.0\ninfo:\n  title: No paths\n")
        runner = CliRunner()
        result = runner.invoke(main, ["analyze", str(f)])

        assert result.exit_code == 1
        assert "Invalid specification document" in result.output

    def test_missing_file(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, ["analyze", str(tmp_path / "nope.yaml")])
        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_custom_settings(self, tmp_path):
        config = tmp_path / "analyzer.yaml"
        config.write_text("error_intelligence_threshold: 100\n")
        runner = CliRunner()
        result = runner.invoke(main, [
            "analyze", "--json", "-c", str(config), str(FIXTURES / "petstore.yaml"),
        ])

        assert result.exit_code == 0
        assert json.loads(result.output)["requires_error_intelligence"] is False

    @patch("openapi_analyzer.cli.load_document")
    def test_url_source_is_passed_through(self, mock_load):
        mock_load.return_value = {"openapi": "3.0.0", "info": {"title": "Remote"}, "paths": {}}
        runner = CliRunner()
        result = runner.invoke(main, ["analyze", "https://example.com/openapi.json"])

        assert result.exit_code == 0
        mock_load.assert_called_once_with("https://example.com/openapi.json")
        assert "Title: Remote" in result.output
        assert "Tools: No" in result.output


class TestCliInitConfig:
    def test_writes_default_settings(self, tmp_path):
        output = tmp_path / "conf" / "analyzer.yaml"
        runner = CliRunner()
        result = runner.invoke(main, ["init-config", "-o", str(output)])

        assert result.exit_code == 0
        assert output.exists()
        assert "core_resource_keywords" in output.read_text()


class TestParseRoots:
    def test_named_and_bare_roots(self):
        roots = _parse_roots(("docs=file:///docs", "https://api.example.com"))
        assert roots[0].name == "docs"
        assert roots[0].uri == "file:///docs"
        assert roots[1].name is None
        assert roots[1].uri == "https://api.example.com"
