"""AST data classes for parsed search queries."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from typing import Any

from solr_query.config import DEFAULT_FIELD
from solr_query.exceptions import (
    IllegalStateError,
    InvalidBoostError,
    InvalidBracketError,
)

# Opening bracket -> closing bracket. Closers are always derived from here.
BRACKETS: dict[str, str] = {
    "(": ")",
    "{": "}",
    "[": "]",
}

CLOSERS: frozenset[str] = frozenset(BRACKETS.values())

# Leading modifiers kept verbatim in front of a clause
MODIFIERS: frozenset[str] = frozenset({"+", "-", "!"})

NUMBER_RE = re.compile(r"\d+(\.\d+)?")

# A field name directly followed by ':' at the start of a clause
FIELD_RE = re.compile(r"([A-Za-z_][\w.\-]*):")


class Operator(enum.Enum):
    """Boolean connective between two clauses."""

    AND = "AND"
    OR = "OR"
    NOT = "NOT"
    AMP_AND = "&&"
    PIPE_OR = "||"
    BANG = "!"

    @classmethod
    def from_token(cls, token: str) -> Operator | None:
        """Return the operator spelled exactly as ``token``, or None."""
        try:
            return cls(token)
        except ValueError:
            return None

    def get_value(self) -> str:
        return self.value

    def to_solr_string(self, include_default_field: bool = False) -> str:
        # Operators are already wire syntax.
        return self.value

    def to_dict(self) -> dict[str, Any]:
        return {"type": "operator", "value": self.value}


@dataclass
class OpenContent:
    """Value buffer still accepting fragments."""

    fragments: list[str] = field(default_factory=list)

    def text(self) -> str:
        return "".join(self.fragments)


@dataclass(frozen=True)
class ClosedContent:
    """Finalized value."""

    value: str

    def text(self) -> str:
        return self.value


class Term:
    """One ``field:value`` clause with its decorations.

    The clause content is either an :class:`OpenContent` buffer that the
    parser appends to while scanning, or a :class:`ClosedContent` value.
    ``close()`` turns the former into the latter; after that,
    ``push_value()`` raises :class:`IllegalStateError`.

    Decorations:
        - ``mod``: leading ``+``, ``-`` or ``!``
        - ``opener``: bracket wrapping the value; the closer is looked up in
          :data:`BRACKETS`
        - ``boost``: ``^N`` relevance multiplier (None when unset)
        - ``proximity``: ``~N`` slop; ``""`` means the backend default,
          None means unset
    """

    def __init__(
        self,
        field: str | None = None,
        value: str | None = None,
        *,
        mod: str | None = None,
        opener: str | None = None,
        boost: str | None = None,
        proximity: str | None = None,
        default_field: str = DEFAULT_FIELD,
    ) -> None:
        self.raw_field = field
        self.default_field = default_field
        self.mod = mod
        self.opener: str | None = None
        self.boost: str | None = None
        self.proximity = proximity
        self.value_count = 0
        self._content: OpenContent | ClosedContent = OpenContent()

        if value is not None:
            self.set_value(value)
        if opener is not None:
            self.set_opener(opener)
        if boost is not None:
            self.set_boost(boost)

    # -- field -------------------------------------------------------------

    @property
    def field(self) -> str:
        """Resolved field: the explicit field, or the default field."""
        return self.raw_field or self.default_field

    @field.setter
    def field(self, name: str | None) -> None:
        self.raw_field = name

    def get_field(self) -> str:
        return self.field

    def set_field(self, name: str | None) -> None:
        self.raw_field = name

    # -- content -----------------------------------------------------------

    @property
    def is_open(self) -> bool:
        return isinstance(self._content, OpenContent)

    @property
    def value(self) -> str:
        """Accumulated content with surrounding whitespace stripped."""
        return self._content.text().strip()

    def get_value(self) -> str:
        return self.value

    def has_content(self) -> bool:
        return bool(self._content.text())

    def push_value(self, fragment: str) -> None:
        """Append a fragment to the open buffer.

        Raises:
            IllegalStateError: If the buffer was already closed.
        """
        if not isinstance(self._content, OpenContent):
            raise IllegalStateError(f"Cannot append '{fragment}' to a closed term")
        self._content.fragments.append(fragment)
        self.value_count += 1

    def set_value(self, value: str) -> None:
        """Replace the content with a static value and close the buffer."""
        self._content = ClosedContent(value)

    def close(self) -> None:
        """Finalize the buffer, keeping what was appended so far."""
        if isinstance(self._content, OpenContent):
            self._content = ClosedContent(self._content.text())

    # -- decorations -------------------------------------------------------

    @property
    def closer(self) -> str | None:
        if self.opener is None:
            return None
        return BRACKETS[self.opener]

    def set_opener(self, char: str) -> None:
        """Set the bracket wrapping this term's value.

        Raises:
            InvalidBracketError: If ``char`` is not an opening bracket.
        """
        if char not in BRACKETS:
            raise InvalidBracketError(char)
        self.opener = char

    @property
    def has_boost(self) -> bool:
        return self.boost is not None

    def set_boost(self, raw: str) -> None:
        """Set the ``^N`` boost.

        Raises:
            InvalidBoostError: If ``raw`` is not a plain decimal number.
                The term is left unchanged.
        """
        if not NUMBER_RE.fullmatch(raw):
            raise InvalidBoostError(raw)
        self.boost = raw

    @property
    def has_proximity(self) -> bool:
        return self.proximity is not None

    def set_proximity(self, raw: str = "") -> None:
        self.proximity = raw

    # -- serialization -----------------------------------------------------

    def to_solr_string(self, include_default_field: bool = False) -> str:
        """Render the clause in wire syntax.

        Returns an empty string when the clause has no value, so callers can
        drop degenerate clauses.
        """
        value = self.value
        if not value:
            return ""

        parts: list[str] = []
        if self.mod:
            parts.append(self.mod)
        if include_default_field or self.field != self.default_field or self._needs_prefix(value):
            parts.append(f"{self.field}:")
        if self.opener is not None:
            parts.append(f"{self.opener}{value}{self.closer}")
        else:
            parts.append(value)
        if self.boost is not None:
            parts.append(f"^{self.boost}")
        if self.proximity is not None:
            parts.append(f"~{self.proximity}")
        return "".join(parts)

    def _needs_prefix(self, value: str) -> bool:
        """Whether a bare ``value`` would re-parse as something else.

        A bracketed value is never ambiguous. Otherwise a value that looks
        like a ``field:`` prefix is, and without a modifier so is one that
        reads as an operator or starts with a modifier character.
        """
        if self.opener is not None:
            return False
        if FIELD_RE.match(value):
            return True
        if self.mod:
            return False
        return Operator.from_token(value) is not None or value[0] in MODIFIERS

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable description of the term."""
        return {
            "type": "term",
            "field": self.field,
            "value": self.value,
            "mod": self.mod,
            "opener": self.opener,
            "closer": self.closer,
            "boost": self.boost,
            "proximity": self.proximity,
            "value_count": self.value_count,
        }

    def _key(self) -> tuple[Any, ...]:
        return (self.field, self.value, self.mod, self.opener, self.boost, self.proximity)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Term):
            return NotImplemented
        return self._key() == other._key()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        parts = [f"field={self.field!r}", f"value={self.value!r}"]
        if self.mod:
            parts.append(f"mod={self.mod!r}")
        if self.opener:
            parts.append(f"opener={self.opener!r}")
        if self.boost is not None:
            parts.append(f"boost={self.boost!r}")
        if self.proximity is not None:
            parts.append(f"proximity={self.proximity!r}")
        return f"Term({', '.join(parts)})"


Node = Term | Operator
