"""Initialize configuration file for solr-query."""

from __future__ import annotations

from pathlib import Path

import click

from solr_query.cli import Context, pass_context
from solr_query.config import (
    DEFAULT_FIELD,
    Config,
    ParserConfig,
    get_default_config_path,
    save_config,
)
from solr_query.exceptions import ConfigValidationError
from solr_query.utils.output import error, success, warning


@click.command("init-config")
@click.option(
    "--force",
    "-f",
    is_flag=True,
    default=False,
    help="Overwrite existing config file",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Output path for config file (default: ~/.config/solr-query/config.toml)",
)
@click.option(
    "--strict",
    "strict_mode",
    is_flag=True,
    default=False,
    help="Enable strict mode in the generated config",
)
@click.option(
    "--allowed-field",
    "-F",
    "allowed_fields",
    multiple=True,
    help="Field name accepted in strict mode (repeatable)",
)
@click.option(
    "--default-field",
    default=DEFAULT_FIELD,
    show_default=True,
    help="Field assumed for clauses without a field prefix",
)
@pass_context
def cli(
    ctx: Context,
    force: bool,
    output: Path | None,
    strict_mode: bool,
    allowed_fields: tuple[str, ...],
    default_field: str,
) -> None:
    """Create a new configuration file.

    Writes the parser, display and output settings to the default
    location (~/.config/solr-query/config.toml) or to the path given
    with --output.

    \b
    Examples:
      # Permissive defaults
      solr-query init-config

    \b
      # Strict mode with a field allow-list from the index schema
      solr-query init-config --strict -F title -F body -F text
    """
    config_path = output if output is not None else get_default_config_path()
    config_path = config_path.expanduser().resolve()

    if config_path.exists() and not force:
        error(
            f"Config file already exists: {config_path}",
            hint="Use --force to overwrite",
        )
        raise SystemExit(1)

    try:
        parser_config = ParserConfig(
            strict=strict_mode,
            allowed_fields=frozenset(allowed_fields),
            default_field=default_field,
        )
    except ConfigValidationError as e:
        error(str(e))
        raise SystemExit(1)

    config = Config(parser=parser_config)
    try:
        written = save_config(config, config_path)
    except OSError as e:
        error(f"Failed to write config: {e}")
        raise SystemExit(1)

    if not ctx.quiet:
        for warn in config.validate():
            warning(warn)
    success(f"Created config file: {written}")
