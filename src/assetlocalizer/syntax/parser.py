"""Parser for translation call expressions.

Grammar (JavaScript expression subset):

    call      := callee WS? "(" WS? [arg (WS? "," WS? arg)* [WS? ","]] WS? ")"
    callee    := identifier ("." identifier)*
    arg       := string | number | call | identifier | raw
    string    := '"' chars '"' | "'" chars "'"
    number    := decimal, hex (0x), octal (0o) or binary (0b) literal
    raw       := balanced text up to the next top-level "," or ")"

An argument is parsed structurally only when the structured form is
followed directly by "," or ")"; anything else (``a + b``, ``{a}``,
``x => x``) becomes a RawExpression holding the trimmed source text.

Python 3.13+. Zero external dependencies.
"""

import re

from assetlocalizer.constants import MAX_CALL_NESTING_DEPTH
from assetlocalizer.diagnostics import CallSyntaxError, ErrorTemplate

from .ast import (
    Argument,
    CallExpression,
    Identifier,
    NumberLiteral,
    RawExpression,
    Span,
    StringLiteral,
)
from .cursor import JS_WHITESPACE, Cursor, ParseResult
from .lexer import balanced_end, identifier_end, string_end

__all__ = [
    "decode_string_literal",
    "parse_call_expression",
    "parse_call_expression_at",
]

_NUMBER_PATTERN = re.compile(
    r"-?(?:0[xX][0-9a-fA-F_]+|0[oO][0-7_]+|0[bB][01_]+|(?:\d[\d_]*)?\.?\d[\d_]*(?:[eE][+-]?\d+)?)"
)

_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
}

_LINE_CONTINUATIONS = frozenset("\n\u2028\u2029")


def _syntax_error(reason: str, position: int) -> CallSyntaxError:
    return CallSyntaxError(ErrorTemplate.call_syntax(reason, position))


# ============================================================================
# LITERALS
# ============================================================================


def decode_string_literal(raw: str) -> str:
    """Decode the value of a quoted JavaScript string literal.

    Handles simple escapes, legacy octal, ``\\xHH``, ``\\uHHHH``,
    ``\\u{H...}`` and line continuations. Escaped surrogate pairs are
    combined into one code point.

    Raises:
        CallSyntaxError: Malformed escape sequence
    """
    body = raw[1:-1]
    if "\\" not in body:
        return body

    out: list[str] = []
    i = 0
    length = len(body)
    while i < length:
        char = body[i]
        if char != "\\":
            out.append(char)
            i += 1
            continue
        if i + 1 >= length:
            raise _syntax_error("dangling escape", i)
        escape = body[i + 1]
        i += 2
        if escape in _SIMPLE_ESCAPES:
            out.append(_SIMPLE_ESCAPES[escape])
        elif escape == "x":
            out.append(chr(_hex_value(body[i : i + 2], 2, i)))
            i += 2
        elif escape == "u":
            if body.startswith("{", i):
                close = body.find("}", i)
                if close == -1:
                    raise _syntax_error("unterminated \\u{} escape", i)
                out.append(chr(_hex_value(body[i + 1 : close], None, i)))
                i = close + 1
            else:
                out.append(chr(_hex_value(body[i : i + 4], 4, i)))
                i += 4
        elif escape in "01234567":
            digits = escape
            while len(digits) < 3 and i < length and body[i] in "01234567":
                if int(digits + body[i], 8) > 0o377:
                    break
                digits += body[i]
                i += 1
            out.append(chr(int(digits, 8)))
        elif escape == "\r":
            if body.startswith("\n", i):
                i += 1
        elif escape in _LINE_CONTINUATIONS:
            pass
        else:
            out.append(escape)

    decoded = "".join(out)
    # Recombine escaped surrogate pairs such as \ud83d\ude00
    return decoded.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "surrogatepass")


def _hex_value(digits: str, width: int | None, position: int) -> int:
    if not digits or (width is not None and len(digits) != width):
        raise _syntax_error("malformed hex escape", position)
    try:
        value = int(digits, 16)
    except ValueError as e:
        raise _syntax_error("malformed hex escape", position) from e
    if value > 0x10FFFF:
        raise _syntax_error("code point out of range", position)
    return value


def _parse_string(cursor: Cursor) -> ParseResult[StringLiteral]:
    end = string_end(cursor.source, cursor.pos)
    raw = cursor.slice_to(end)
    return ParseResult(StringLiteral(decode_string_literal(raw), raw), Cursor(cursor.source, end))


def _parse_number(cursor: Cursor) -> ParseResult[NumberLiteral] | None:
    match = _NUMBER_PATTERN.match(cursor.source, cursor.pos)
    if match is None:
        return None
    raw = match.group()
    cleaned = raw.replace("_", "")
    try:
        if cleaned.lstrip("-")[:2].lower() in ("0x", "0o", "0b"):
            value: int | float = int(cleaned, 0)
        elif any(c in cleaned for c in ".eE"):
            value = float(cleaned)
        else:
            value = int(cleaned, 10)
    except ValueError:
        return None
    return ParseResult(NumberLiteral(value, raw), Cursor(cursor.source, match.end()))


# ============================================================================
# IDENTIFIERS AND CALLS
# ============================================================================


def _parse_identifier_path(cursor: Cursor) -> ParseResult[Identifier]:
    source = cursor.source
    end = identifier_end(source, cursor.pos)
    if end == cursor.pos:
        raise _syntax_error("expected identifier", cursor.pos)
    while end < len(source) and source[end] == ".":
        next_end = identifier_end(source, end + 1)
        if next_end == end + 1:
            break
        end = next_end
    return ParseResult(Identifier(cursor.slice_to(end)), Cursor(source, end))


def _parse_structured_argument(cursor: Cursor, depth: int) -> ParseResult[Argument] | None:
    char = cursor.current
    if char in "'\"":
        return _parse_string(cursor)
    if char.isdigit() or char in "-.":
        return _parse_number(cursor)
    if not (char.isalpha() or char in "$_"):
        return None

    identifier = _parse_identifier_path(cursor)
    after = identifier.cursor.skip_whitespace()
    if after.is_eof or after.current != "(":
        return identifier
    if depth + 1 > MAX_CALL_NESTING_DEPTH:
        return None
    try:
        return parse_call_expression_at(cursor.source, cursor.pos, depth=depth + 1)
    except CallSyntaxError:
        return None


def _parse_argument(cursor: Cursor, depth: int) -> ParseResult[Argument]:
    source = cursor.source
    structured = _parse_structured_argument(cursor, depth)
    if structured is not None:
        after = structured.cursor.skip_whitespace()
        if not after.is_eof and after.current in ",)":
            return structured

    stop = balanced_end(source, cursor.pos, ",)")
    text = cursor.slice_to(stop).rstrip("".join(JS_WHITESPACE))
    if not text:
        raise _syntax_error("expected argument", cursor.pos)
    return ParseResult(RawExpression(text), Cursor(source, cursor.pos + len(text)))


def parse_call_expression_at(
    source: str, pos: int = 0, *, depth: int = 0
) -> ParseResult[CallExpression]:
    """Parse a call expression whose callee starts at pos.

    Args:
        source: Text containing the call
        pos: Offset of the first callee character
        depth: Current nesting depth (internal)

    Returns:
        ParseResult with the CallExpression (span covers callee through ")")
        and a cursor just past the closing parenthesis

    Raises:
        CallSyntaxError: Text at pos is not a call expression
    """
    callee = _parse_identifier_path(Cursor(source, pos))
    cursor = callee.cursor.skip_whitespace()
    opened = cursor.expect("(")
    if opened is None:
        raise _syntax_error("expected '('", cursor.pos)
    cursor = opened.skip_whitespace()

    arguments: list[Argument] = []
    while True:
        if cursor.is_eof:
            raise _syntax_error("expected ')'", cursor.pos)
        if cursor.current == ")":
            cursor = cursor.advance()
            break
        argument = _parse_argument(cursor, depth)
        arguments.append(argument.value)
        cursor = argument.cursor.skip_whitespace()
        if cursor.is_eof:
            raise _syntax_error("expected ',' or ')'", cursor.pos)
        if cursor.current == ",":
            cursor = cursor.advance().skip_whitespace()
            continue
        if cursor.current == ")":
            cursor = cursor.advance()
            break
        raise _syntax_error("expected ',' or ')'", cursor.pos)

    node = CallExpression(callee.value, tuple(arguments), Span(pos, cursor.pos))
    return ParseResult(node, cursor)


def parse_call_expression(text: str) -> CallExpression:
    """Parse text that must consist of exactly one call expression.

    Surrounding whitespace is allowed.

    Example:
        >>> call = parse_call_expression('__("hello-key", {a})')
        >>> call.function_name, call.first_string_argument.value
        ('__', 'hello-key')

    Raises:
        CallSyntaxError: Text is not a single call expression
    """
    start = Cursor(text, 0).skip_whitespace()
    result = parse_call_expression_at(text, start.pos)
    rest = result.cursor.skip_whitespace()
    if not rest.is_eof:
        raise _syntax_error("unexpected text after call expression", rest.pos)
    return result.value
