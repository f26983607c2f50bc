"""Parse Solr-style search syntax into an ordered list of nodes."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from solr_query.config import ParserConfig
from solr_query.exceptions import (
    InvalidBoostError,
    MaxDepthExceededError,
    UnbalancedBracketError,
    UnknownFieldError,
    UnterminatedQuoteError,
)
from solr_query.search.ast_nodes import (
    BRACKETS,
    CLOSERS,
    FIELD_RE,
    MODIFIERS,
    NUMBER_RE,
    Node,
    Operator,
    Term,
)
from solr_query.search.serializer import to_solr_string

logger = logging.getLogger(__name__)

# Characters that end the numeric run after '^' or '~'
_DECORATION_STOP = frozenset("^~")


def _read_run(text: str, pos: int) -> str:
    """Read from ``pos`` up to the next whitespace, ``^`` or ``~``."""
    end = pos
    while end < len(text) and not text[end].isspace() and text[end] not in _DECORATION_STOP:
        end += 1
    return text[pos:end]


def _read_token(text: str, pos: int) -> str:
    """Read the whitespace-delimited token starting at ``pos``."""
    end = pos
    while end < len(text) and not text[end].isspace():
        end += 1
    return text[pos:end]


def _find_quote_end(text: str, pos: int) -> int:
    """Return the index of the quote closing the one at ``pos``, or -1."""
    i = pos + 1
    while i < len(text):
        if text[i] == "\\" and i + 1 < len(text):
            # Skip escaped character
            i += 2
        elif text[i] == '"':
            return i
        else:
            i += 1
    return -1


def _find_closer(text: str, pos: int) -> int:
    """Return the index of the bracket matching the opener at ``pos``, or -1.

    Only brackets of the same kind count towards nesting depth. Quoted
    sections and escaped characters are skipped.
    """
    opener = text[pos]
    closer = BRACKETS[opener]
    depth = 0
    i = pos
    while i < len(text):
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == '"':
            end = _find_quote_end(text, i)
            if end == -1:
                return -1
            i = end + 1
            continue
        if ch == opener:
            depth += 1
        elif ch == closer:
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return -1


def _is_decorated(term: Term) -> bool:
    return bool(
        term.raw_field or term.mod or term.opener or term.has_boost or term.has_proximity
    )


class _Scanner:
    """Single-level scan over one query string.

    A new scanner is created for every bracket group, so nested groups never
    share cursor or builder state with their parent.
    """

    def __init__(self, parser: Parser, text: str, depth: int) -> None:
        self.parser = parser
        self.config = parser.config
        self.text = text
        self.depth = depth
        self.pos = 0
        self.term: Term | None = None
        self.nodes: list[Node] = []

    # -- builder helpers ---------------------------------------------------

    def _new_term(self) -> Term:
        self.term = Term(default_field=self.config.default_field)
        return self.term

    def _current(self) -> Term:
        return self.term if self.term is not None else self._new_term()

    def _writable(self) -> Term:
        """Return a term whose buffer accepts fragments.

        Text directly after a closed group starts a new clause.
        """
        if self.term is not None and not self.term.is_open:
            self._flush()
        return self._current()

    def _flush(self) -> None:
        """Close the current term and move it to the output."""
        if self.term is None:
            return
        self.term.close()
        if not self.term.value and _is_decorated(self.term):
            logger.debug("Clause %r has no value and will not be serialized", self.term)
        self.nodes.append(self.term)
        self.term = None

    # -- scanning ----------------------------------------------------------

    def run(self) -> list[Node]:
        text = self.text
        while self.pos < len(text):
            ch = text[self.pos]

            if ch.isspace():
                self._flush()
                self.pos += 1
                continue

            if self.term is None and self._scan_clause_start():
                continue

            if ch == '"':
                self._scan_quoted()
            elif ch == "\\":
                self._writable().push_value(text[self.pos : self.pos + 2])
                self.pos += 2
            elif ch in BRACKETS:
                self._scan_group()
            elif ch in CLOSERS:
                raise UnbalancedBracketError(ch, self.pos, self.parser.query)
            elif ch == "^":
                self._scan_boost()
            elif ch == "~":
                self._scan_proximity()
            else:
                self._writable().push_value(ch)
                self.pos += 1

        self._flush()
        return self.nodes

    def _scan_clause_start(self) -> bool:
        """Handle operators, modifiers and field prefixes at a clause start.

        Returns True when input was consumed.
        """
        text = self.text
        token = _read_token(text, self.pos)
        operator = Operator.from_token(token)
        if operator is not None:
            self.nodes.append(operator)
            self.pos += len(token)
            return True

        term = self._new_term()
        consumed = False

        ch = text[self.pos]
        if ch in MODIFIERS and self.pos + 1 < len(text) and not text[self.pos + 1].isspace():
            term.mod = ch
            self.pos += 1
            consumed = True

        match = FIELD_RE.match(text, self.pos)
        if match:
            name = match.group(1)
            if not self.config.is_allowed(name):
                raise UnknownFieldError(name, self.parser.query)
            term.set_field(name)
            self.pos = match.end()
            consumed = True

        return consumed

    def _scan_quoted(self) -> None:
        text = self.text
        start = self.pos
        end = _find_quote_end(text, start)
        if end == -1:
            if self.config.strict:
                raise UnterminatedQuoteError(start, self.parser.query)
            logger.warning("Unterminated quote at position %d, closing at end of input", start)
            self._writable().push_value(text[start:] + '"')
            self.pos = len(text)
            return
        self._writable().push_value(text[start : end + 1])
        self.pos = end + 1

    def _scan_group(self) -> None:
        text = self.text
        start = self.pos
        end = _find_closer(text, start)
        if end == -1:
            raise UnbalancedBracketError(text[start], start, self.parser.query)

        term = self._current()
        if term.has_content() or term.opener is not None:
            # Group directly after a value starts a clause of its own
            self._flush()
            term = self._new_term()

        term.set_opener(text[start])
        self.parser._parse_into(text[start + 1 : end], term, self.depth + 1)
        self.pos = end + 1

    def _scan_boost(self) -> None:
        raw = _read_run(self.text, self.pos + 1)
        if not NUMBER_RE.fullmatch(raw):
            raise InvalidBoostError(raw, self.parser.query)
        self._current().set_boost(raw)
        self.pos += 1 + len(raw)

    def _scan_proximity(self) -> None:
        raw = _read_run(self.text, self.pos + 1)
        if raw and not NUMBER_RE.fullmatch(raw):
            # Not a slop value: keep '~' as part of the term text
            self._writable().push_value("~")
            self.pos += 1
            return
        self._current().set_proximity(raw)
        self.pos += 1 + len(raw)


def optimize_nodes(nodes: list[Node]) -> list[Node]:
    """Drop empty terms and collapse repeated adjacent operators."""
    result: list[Node] = []
    for node in nodes:
        if isinstance(node, Term):
            if not node.to_solr_string():
                logger.debug("Dropping empty term (%d fragments)", node.value_count)
                continue
        elif result and result[-1] == node:
            logger.debug("Collapsing duplicate operator %s", node.value)
            continue
        result.append(node)
    return result


class Parser:
    """Stateful parser for Solr-style query strings.

    A clause that ends up without a value, such as ``title: foo`` (field
    followed by whitespace), ``foo ^2`` or ``()``, is kept in the node list
    unless optimizing, but always serializes to nothing, so its field and
    decorations are dropped from the wire form. This is logged at debug level.

    Not safe for concurrent ``parse()`` calls on the same instance; use one
    parser per thread.
    """

    def __init__(self, config: ParserConfig | Mapping[str, Any] | None = None) -> None:
        if config is None:
            config = ParserConfig()
        elif not isinstance(config, ParserConfig):
            config = ParserConfig.from_dict(config)
        self.config = config
        self.query: str | None = None
        self.nodes: list[Node] = []
        self._optimize = False
        self._scanner: _Scanner | None = None

    def reset(self) -> None:
        """Clear all per-parse state. Configuration is kept."""
        self.query = None
        self.nodes = []
        self._optimize = False
        self._scanner = None

    def parse(
        self,
        text: str,
        optimize: bool = False,
        force_term: Term | None = None,
    ) -> list[Node]:
        """Parse ``text`` into an ordered list of Term and Operator nodes.

        Args:
            text: The raw query string.
            optimize: Drop empty terms and collapse duplicate operators.
            force_term: When given, the parsed query becomes this term's value
                and ``[force_term]`` is returned.

        Returns:
            The node list.

        Raises:
            QueryParseError: Or one of its subclasses; no partial result is
                kept on failure.
        """
        self.reset()
        self.query = text
        self._optimize = optimize
        logger.debug("Parsing query %r (strict=%s)", text, self.config.strict)

        if force_term is not None:
            self._parse_into(text, force_term, 0)
            nodes: list[Node] = [force_term]
        else:
            self._scanner = _Scanner(self, text, 0)
            nodes = self._scanner.run()
            if optimize:
                nodes = optimize_nodes(nodes)

        self.nodes = nodes
        logger.debug("Parsed %d nodes", len(nodes))
        return nodes

    def _parse_into(self, text: str, target: Term, depth: int) -> None:
        """Parse ``text`` and store its serialized form as ``target``'s value."""
        if depth > self.config.max_depth:
            raise MaxDepthExceededError(self.config.max_depth, self.query)
        logger.debug("Parsing group %r at depth %d", text, depth)

        nodes = _Scanner(self, text, depth).run()
        if self._optimize:
            nodes = optimize_nodes(nodes)

        target.set_value(to_solr_string(nodes))


def parse_query(
    query_string: str,
    config: ParserConfig | Mapping[str, Any] | None = None,
    optimize: bool = False,
) -> list[Node]:
    """Parse a Solr-style query string with a fresh parser.

    Args:
        query_string: The search query to parse.
        config: Parser configuration (defaults to permissive mode).
        optimize: Run the optimize pass.

    Returns:
        The parsed node list.

    Raises:
        QueryParseError: If the query cannot be parsed.
    """
    return Parser(config).parse(query_string, optimize=optimize)


def normalize(
    query_string: str,
    config: ParserConfig | Mapping[str, Any] | None = None,
    optimize: bool = True,
    include_default_field: bool = False,
) -> str:
    """Parse a query and render it back in canonical form.

    ``normalize(normalize(q)) == normalize(q)`` for any query that parses.
    """
    nodes = parse_query(query_string, config, optimize=optimize)
    return to_solr_string(nodes, include_default_field=include_default_field)
