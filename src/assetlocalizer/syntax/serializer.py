"""Serializer: call-expression AST back to compact source text.

Output is canonical: ``callee(arg1, arg2)`` with literal raw text preserved,
so ``serialize(parse(serialize(node))) == serialize(node)``.

Also provides the string-literal helpers used when translated values are
written into code.

Python 3.13+. Zero external dependencies.
"""

import json
from typing import Any

from .ast import (
    Argument,
    CallExpression,
    Identifier,
    NumberLiteral,
    RawExpression,
    StringLiteral,
)

__all__ = [
    "escape_string_content",
    "js_literal",
    "serialize",
]

_CONTENT_ESCAPES = str.maketrans(
    {
        "\\": "\\\\",
        '"': '\\"',
        "'": "\\'",
        "`": "\\`",
        "\n": "\\n",
        "\r": "\\r",
        "\u2028": "\\u2028",
        "\u2029": "\\u2029",
    }
)


def serialize(node: Argument) -> str:
    """Serialize an argument or call expression to source text.

    Example:
        >>> from assetlocalizer.syntax import parse_call_expression, serialize
        >>> serialize(parse_call_expression('__( "k" ,{ a } )'))
        '__("k", { a })'
    """
    match node:
        case CallExpression(callee=callee, arguments=arguments):
            args = ", ".join(serialize(argument) for argument in arguments)
            return f"{callee.name}({args})"
        case StringLiteral(raw=raw) | NumberLiteral(raw=raw):
            return raw
        case Identifier(name=name):
            return name
        case RawExpression(text=text):
            return text


def js_literal(value: Any) -> str:
    """JSON text of value, usable directly as a JavaScript literal.

    Non-ASCII characters are kept as-is; U+2028 and U+2029 are escaped so
    the literal stays valid in older engines.
    """
    return (
        json.dumps(value, ensure_ascii=False)
        .replace("\u2028", "\\u2028")
        .replace("\u2029", "\\u2029")
    )


def escape_string_content(value: str) -> str:
    """Escape value for insertion inside an existing string literal.

    Every quote style is escaped because the enclosing delimiter is unknown.
    Control characters other than line breaks pass through unchanged.
    """
    return value.translate(_CONTENT_ESCAPES)
