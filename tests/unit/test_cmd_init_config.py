"""Unit tests for the init-config command."""

from __future__ import annotations

from pathlib import Path

from click.testing import CliRunner

from solr_query.cli import Context
from solr_query.commands.init_config import cli
from solr_query.config import load_config


class TestInitConfigCommand:
    def test_creates_config_file(self) -> None:
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["--output", "test-config.toml"], obj=Context())
            assert result.exit_code == 0
            assert Path("test-config.toml").exists()
            content = Path("test-config.toml").read_text()
            assert "[parser]" in content
            assert "[display]" in content
            assert "[output]" in content

    def test_written_config_loads_back(self) -> None:
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(
                cli,
                [
                    "--output",
                    "test-config.toml",
                    "--strict",
                    "-F",
                    "title",
                    "-F",
                    "body",
                    "--default-field",
                    "body",
                ],
                obj=Context(),
            )
            assert result.exit_code == 0
            config, warnings = load_config(Path("test-config.toml"))
            assert config.parser.strict is True
            assert config.parser.allowed_fields == frozenset({"title", "body"})
            assert config.parser.default_field == "body"
            assert warnings == []

    def test_fails_if_exists_without_force(self) -> None:
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("test-config.toml").write_text("existing")
            result = runner.invoke(cli, ["--output", "test-config.toml"], obj=Context())
            assert result.exit_code == 1
            assert Path("test-config.toml").read_text() == "existing"

    def test_force_overwrites(self) -> None:
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("test-config.toml").write_text("existing")
            result = runner.invoke(
                cli, ["--output", "test-config.toml", "--force"], obj=Context()
            )
            assert result.exit_code == 0
            assert "[parser]" in Path("test-config.toml").read_text()

    def test_empty_default_field_rejected(self) -> None:
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(
                cli, ["--output", "test-config.toml", "--default-field", ""], obj=Context()
            )
            assert result.exit_code == 1
            assert not Path("test-config.toml").exists()
