"""Exception hierarchy for solr-query."""

from pathlib import Path


class SolrQueryError(Exception):
    """Base exception for all solr-query errors.

    All exceptions in this package inherit from this class,
    allowing callers to catch all solr-query errors with
    a single except clause.
    """

    pass


# Configuration Errors
class ConfigError(SolrQueryError):
    """Configuration-related errors."""

    pass


class ConfigParseError(ConfigError):
    """Configuration file has invalid syntax."""

    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Invalid config at {path}: {detail}")


class ConfigValidationError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: object, reason: str) -> None:
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid config value for '{key}': {reason}")


# Query Errors
class QueryParseError(SolrQueryError):
    """Raised when a search query cannot be parsed.

    ``query`` is the text being parsed, or None when the error comes from
    mutating a Term directly.
    """

    def __init__(self, message: str, query: str | None = None) -> None:
        self.query = query
        self.message = message
        if query is None:
            super().__init__(message)
        else:
            super().__init__(f"Failed to parse search query '{query}': {message}")


class InvalidBoostError(QueryParseError):
    """Boost value is not a plain decimal number."""

    def __init__(self, raw: str, query: str | None = None) -> None:
        self.raw = raw
        super().__init__(f"Invalid boost value: '{raw}'", query)


class InvalidBracketError(QueryParseError):
    """Character is not a known opening bracket."""

    def __init__(self, char: str, query: str | None = None) -> None:
        self.char = char
        super().__init__(f"Invalid bracket: '{char}'", query)


class UnbalancedBracketError(QueryParseError):
    """Opening bracket without closer, or stray closer."""

    def __init__(self, char: str, position: int, query: str | None = None) -> None:
        self.char = char
        self.position = position
        super().__init__(f"Unbalanced bracket '{char}' at position {position}", query)


class UnterminatedQuoteError(QueryParseError):
    """Quoted phrase is never closed (strict mode only)."""

    def __init__(self, position: int, query: str | None = None) -> None:
        self.position = position
        super().__init__(f"Unterminated quote starting at position {position}", query)


class UnknownFieldError(QueryParseError):
    """Field name is not in the allow-list (strict mode only)."""

    def __init__(self, field: str, query: str | None = None) -> None:
        self.field = field
        super().__init__(f"Unknown field: '{field}'", query)


class IllegalStateError(QueryParseError):
    """Term was mutated in a state that does not allow it."""

    pass


class MaxDepthExceededError(QueryParseError):
    """Bracket nesting is deeper than the configured limit."""

    def __init__(self, limit: int, query: str | None = None) -> None:
        self.limit = limit
        super().__init__(f"Maximum group nesting depth of {limit} exceeded", query)
