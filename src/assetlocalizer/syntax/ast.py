"""AST nodes for the translation call grammar subset.

Only the shapes a translation call can take are modelled: a callee path and
an argument list whose items are literals, identifiers, nested calls, or
opaque balanced expressions kept as raw text.

All nodes are immutable (frozen dataclasses with slots).

Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass

__all__ = [
    "Argument",
    "CallExpression",
    "Identifier",
    "NumberLiteral",
    "RawExpression",
    "Span",
    "StringLiteral",
]


@dataclass(frozen=True, slots=True)
class Span:
    """Half-open character range [start, end) in the parsed source."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0:
            msg = f"Span start must be >= 0, got {self.start}"
            raise ValueError(msg)
        if self.end < self.start:
            msg = f"Span end ({self.end}) must be >= start ({self.start})"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class Identifier:
    """Identifier or dotted member path, e.g. ``t`` or ``i18n.t``."""

    name: str


@dataclass(frozen=True, slots=True)
class StringLiteral:
    """String literal.

    Attributes:
        value: Decoded string value
        raw: Source text including quotes, preserved for serialization
    """

    value: str
    raw: str


@dataclass(frozen=True, slots=True)
class NumberLiteral:
    """Numeric literal; raw text is preserved for serialization."""

    value: int | float
    raw: str


@dataclass(frozen=True, slots=True)
class RawExpression:
    """Any other balanced expression, kept verbatim (whitespace-trimmed)."""

    text: str


@dataclass(frozen=True, slots=True, eq=False)
class CallExpression:
    """Call expression ``callee(arg, ...)``.

    Equality ignores span so a re-parsed call compares equal to the original.
    """

    callee: Identifier
    arguments: tuple["Argument", ...]
    span: Span | None = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CallExpression):
            return NotImplemented
        return self.callee == other.callee and self.arguments == other.arguments

    def __hash__(self) -> int:
        return hash((self.callee, self.arguments))

    @property
    def function_name(self) -> str:
        """Callee path as written, e.g. ``__``."""
        return self.callee.name

    @property
    def first_string_argument(self) -> StringLiteral | None:
        """First argument when it is a string literal, else None."""
        if self.arguments and isinstance(self.arguments[0], StringLiteral):
            return self.arguments[0]
        return None


type Argument = StringLiteral | NumberLiteral | Identifier | CallExpression | RawExpression
