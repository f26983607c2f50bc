"""Render parsed nodes back into query wire syntax."""

from __future__ import annotations

from collections.abc import Iterable

from solr_query.search.ast_nodes import Node


def to_solr_string(
    nodes: Iterable[Node],
    include_default_field: bool = False,
    separator: str = " ",
) -> str:
    """Serialize each node and join the non-empty results.

    Args:
        nodes: Terms and operators in source order.
        include_default_field: Emit the ``field:`` prefix even for terms on
            the default field.
        separator: String placed between serialized nodes.
    """
    parts = (node.to_solr_string(include_default_field) for node in nodes)
    return separator.join(part for part in parts if part)
