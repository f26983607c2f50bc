"""solr-query: parse and normalize Solr-style search queries."""

from solr_query.config import ParserConfig
from solr_query.exceptions import QueryParseError, SolrQueryError
from solr_query.search import Operator, Parser, Term, normalize, parse_query, to_solr_string

__version__ = "0.1.0"

__all__ = [
    "Operator",
    "Parser",
    "ParserConfig",
    "QueryParseError",
    "SolrQueryError",
    "Term",
    "__version__",
    "normalize",
    "parse_query",
    "to_solr_string",
]
