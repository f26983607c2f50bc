"""Unit tests for the parse command."""

from __future__ import annotations

import json

from click.testing import CliRunner

from solr_query.cli import Context
from solr_query.commands.parse import cli


class TestParseCommand:
    def test_json_output(self) -> None:
        runner = CliRunner()
        result = runner.invoke(
            cli, ["--format", "json", "title:foo AND bar^2"], obj=Context(), catch_exceptions=False
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [d["type"] for d in data] == ["term", "operator", "term"]
        assert data[0]["field"] == "title"
        assert data[0]["value"] == "foo"
        assert data[1]["value"] == "AND"
        assert data[2]["field"] == "text"
        assert data[2]["boost"] == "2"

    def test_json_group(self) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["-f", "json", "(a OR b)~2"], obj=Context())
        assert result.exit_code == 0
        (term,) = json.loads(result.output)
        assert term["opener"] == "("
        assert term["closer"] == ")"
        assert term["value"] == "a OR b"
        assert term["proximity"] == "2"

    def test_arguments_are_joined(self) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["-f", "json", "a", "OR", "b"], obj=Context())
        assert result.exit_code == 0
        assert len(json.loads(result.output)) == 3

    def test_optimize_default_collapses_operators(self) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["-f", "json", "a OR OR b"], obj=Context())
        assert len(json.loads(result.output)) == 3

    def test_no_optimize_keeps_operators(self) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["-f", "json", "--no-optimize", "a OR OR b"], obj=Context())
        assert len(json.loads(result.output)) == 4

    def test_table_output(self) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["title:foo AND [1 TO 5]"], obj=Context())
        assert result.exit_code == 0
        assert "title" in result.output
        assert "foo" in result.output
        assert "1 TO 5" in result.output
        assert "title:foo AND [1 TO 5]" in result.output

    def test_invalid_boost_exit_code(self) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["foo^bar"], obj=Context())
        assert result.exit_code == 1
