"""Print the canonical wire form of a query."""

from __future__ import annotations

import click
from rich.markup import escape

from solr_query.cli import Context, pass_context
from solr_query.exceptions import QueryParseError
from solr_query.search.serializer import to_solr_string
from solr_query.utils.output import error, verbose

EXIT_SUCCESS = 0
EXIT_PARSE_ERROR = 1


@click.command("normalize")
@click.argument("query", nargs=-1, required=True)
@click.option(
    "--optimize/--no-optimize",
    default=None,
    help="Drop empty clauses and duplicate operators (default: from config)",
)
@click.option(
    "--include-default-field/--omit-default-field",
    default=None,
    help="Emit the field prefix for default-field terms too (default: from config)",
)
@pass_context
def cli(
    ctx: Context,
    query: tuple[str, ...],
    optimize: bool | None,
    include_default_field: bool | None,
) -> None:
    """Rewrite a query in canonical form.

    QUERY is a Solr-style search string. Multiple arguments are
    joined with spaces. The result is printed on a single line, suitable
    for passing to a search backend.

    \b
    Examples:
      solr-query normalize 'title:foo   AND AND bar^2'
      solr-query normalize --include-default-field hello   # text:hello
    """
    config = ctx.config
    if optimize is None:
        optimize = config.optimize if config is not None else True
    if include_default_field is None:
        include_default_field = config.include_default_field if config is not None else False

    query_string = " ".join(query)

    try:
        nodes = ctx.make_parser().parse(query_string, optimize=optimize)
    except QueryParseError as e:
        error(f"Invalid search query: {escape(str(e))}")
        raise SystemExit(EXIT_PARSE_ERROR)

    verbose(f"{len(nodes)} nodes")
    click.echo(to_solr_string(nodes, include_default_field=include_default_field))
    raise SystemExit(EXIT_SUCCESS)
