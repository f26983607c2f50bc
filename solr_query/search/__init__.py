"""Solr-style query parsing and serialization."""

from solr_query.search.ast_nodes import BRACKETS, Node, Operator, Term
from solr_query.search.parser import Parser, normalize, optimize_nodes, parse_query
from solr_query.search.serializer import to_solr_string

__all__ = [
    "BRACKETS",
    "Node",
    "Operator",
    "Parser",
    "Term",
    "normalize",
    "optimize_nodes",
    "parse_query",
    "to_solr_string",
]
