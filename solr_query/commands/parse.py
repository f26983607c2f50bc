"""Show the node list produced for a query."""

from __future__ import annotations

import json

import click
from rich.markup import escape

from solr_query.cli import Context, pass_context
from solr_query.exceptions import QueryParseError
from solr_query.search.ast_nodes import Node, Operator
from solr_query.search.serializer import to_solr_string
from solr_query.utils.output import console, create_table, debug, error, info

EXIT_SUCCESS = 0
EXIT_PARSE_ERROR = 1


@click.command("parse")
@click.argument("query", nargs=-1, required=True)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format (default: table)",
)
@click.option(
    "--optimize/--no-optimize",
    default=None,
    help="Drop empty clauses and duplicate operators (default: from config)",
)
@pass_context
def cli(
    ctx: Context,
    query: tuple[str, ...],
    output_format: str,
    optimize: bool | None,
) -> None:
    """Parse a query and print its nodes.

    QUERY is a Solr-style search string. Multiple arguments are
    joined with spaces.

    \b
    Examples:
      solr-query parse 'title:foo AND bar^2'
      solr-query parse --format json '"hello world" OR (a b)~3'
    """
    if optimize is None:
        optimize = ctx.config.optimize if ctx.config is not None else True

    query_string = " ".join(query)
    debug(escape(f"Parsing with {ctx.parser_config}"))

    try:
        nodes = ctx.make_parser().parse(query_string, optimize=optimize)
    except QueryParseError as e:
        error(f"Invalid search query: {escape(str(e))}")
        raise SystemExit(EXIT_PARSE_ERROR)

    if output_format == "json":
        click.echo(json.dumps([node.to_dict() for node in nodes], indent=2))
    else:
        _print_table(nodes, query_string, quiet=ctx.quiet)

    raise SystemExit(EXIT_SUCCESS)


def _print_table(nodes: list[Node], query_string: str, quiet: bool = False) -> None:
    """Print nodes as a Rich table followed by the normalized query."""
    if not quiet:
        info(f"Query: {escape(query_string)} ({len(nodes)} nodes)")

    table = create_table(show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Type")
    table.add_column("Mod")
    table.add_column("Field", style="node.field")
    table.add_column("Value", style="node.term")
    table.add_column("Group")
    table.add_column("Boost", justify="right")
    table.add_column("Prox", justify="right")

    for i, node in enumerate(nodes, start=1):
        if isinstance(node, Operator):
            table.add_row(
                str(i), "[node.operator]operator[/node.operator]", "", "", escape(node.value)
            )
            continue
        group = f"{node.opener}{node.closer}" if node.opener else ""
        table.add_row(
            str(i),
            "term",
            node.mod or "",
            escape(node.field),
            escape(node.value),
            escape(group),
            node.boost or "",
            "" if node.proximity is None else f"~{node.proximity}",
        )

    console.print(table)
    console.print(to_solr_string(nodes), style="query", markup=False)
