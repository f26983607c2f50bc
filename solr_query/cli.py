"""Command-line interface for solr-query."""

from __future__ import annotations

import os
from dataclasses import replace
from pathlib import Path

import click

from solr_query import __version__
from solr_query.config import Config, ParserConfig, load_config
from solr_query.exceptions import ConfigError
from solr_query.search.parser import Parser
from solr_query.utils.output import (
    error,
    set_color,
    set_verbosity,
    warning,
)


class Context:
    """Shared context for all commands."""

    def __init__(self) -> None:
        self.config: Config | None = None
        self.verbose: bool = False
        self.debug: bool = False
        self.quiet: bool = False

    @property
    def parser_config(self) -> ParserConfig:
        if self.config is None:
            return ParserConfig()
        return self.config.parser

    def make_parser(self) -> Parser:
        """Create a fresh parser from the loaded configuration."""
        return Parser(self.parser_config)


pass_context = click.make_pass_decorator(Context, ensure=True)


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=False, path_type=Path),
    help="Path to config file (default: ~/.config/solr-query/config.toml)",
)
@click.option(
    "--strict/--permissive",
    default=None,
    help="Reject unknown fields and unterminated quotes (overrides config)",
)
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable colored output",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable verbose output",
)
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug output (implies --verbose)",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    default=False,
    help="Suppress non-error output",
)
@click.version_option(version=__version__, prog_name="solr-query")
@click.pass_context
def cli(
    ctx: click.Context,
    config: Path | None,
    strict: bool | None,
    no_color: bool,
    verbose: bool,
    debug: bool,
    quiet: bool,
) -> None:
    """solr-query: Parse and normalize Solr-style search queries.

    Queries use field:value clauses, quoted phrases, the operators
    AND, OR, NOT, &&, || and !, groups in (), {} or [], boosts (^N)
    and proximity (~N).

    Configuration is loaded from ~/.config/solr-query/config.toml by default.
    Use --config to specify an alternative configuration file.

    Examples:

        # Canonical form of a query
        solr-query normalize 'title:foo  AND AND bar^2'

        # Show the parsed nodes
        solr-query parse '(a OR b) AND title:"hello world"'
    """
    ctx.ensure_object(Context)
    app_ctx = ctx.obj
    app_ctx.verbose = verbose or debug
    app_ctx.debug = debug
    app_ctx.quiet = quiet

    set_verbosity(verbose=verbose, debug=debug)

    # Color: disabled by --no-color, NO_COLOR env, or config
    disable_color = no_color or os.environ.get("NO_COLOR") is not None
    if disable_color:
        set_color(False)

    try:
        loaded_config, warnings = load_config(config)
    except ConfigError as e:
        error(str(e))
        ctx.exit(1)
        return

    if strict is not None:
        loaded_config.parser = replace(loaded_config.parser, strict=strict)
    app_ctx.config = loaded_config

    if not disable_color and not loaded_config.colored_output:
        set_color(False)

    # Only warn about a missing file when one was asked for explicitly
    if not quiet:
        for warn in warnings:
            if config is None and warn.startswith("No config file found"):
                continue
            warning(warn)


def register_commands() -> None:
    """Register all commands from the commands package."""
    from solr_query.commands import discover_commands

    for command in discover_commands():
        cli.add_command(command)


# Register commands on import
register_commands()


def main() -> None:
    """Console script entry point."""
    cli()
