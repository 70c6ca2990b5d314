"""Call-expression syntax: AST, parser, serializer and lexical helpers.

Python 3.13+. Zero external dependencies.
"""

from .ast import (
    Argument,
    CallExpression,
    Identifier,
    NumberLiteral,
    RawExpression,
    Span,
    StringLiteral,
)
from .cursor import Cursor, LineOffsetCache, ParseResult
from .parser import decode_string_literal, parse_call_expression, parse_call_expression_at
from .serializer import escape_string_content, js_literal, serialize

__all__ = [
    "Argument",
    "CallExpression",
    "Cursor",
    "Identifier",
    "LineOffsetCache",
    "NumberLiteral",
    "ParseResult",
    "RawExpression",
    "Span",
    "StringLiteral",
    "decode_string_literal",
    "escape_string_content",
    "js_literal",
    "parse_call_expression",
    "parse_call_expression_at",
    "serialize",
]
