"""Lexical skipping helpers for JavaScript source text.

The engine never tokenizes whole modules. It only needs to step over the
constructs that can hide commas, parentheses or marker-like text: string
literals, template literals and comments. These helpers take and return
plain integer offsets so the scanners built on them stay linear.

Regular expression literals are not recognized; a ``/`` starts a comment or
is ordinary text.

Python 3.13+. Zero external dependencies.
"""

from assetlocalizer.diagnostics import CallSyntaxError, ErrorTemplate

__all__ = [
    "balanced_end",
    "comment_end",
    "identifier_end",
    "is_identifier_part",
    "is_identifier_start",
    "string_end",
    "template_end",
]

_CLOSERS = {"(": ")", "[": "]", "{": "}"}


def is_identifier_start(char: str) -> bool:
    """True for characters that may start a JavaScript identifier."""
    return char.isalpha() or char in "$_"


def is_identifier_part(char: str) -> bool:
    """True for characters that may continue a JavaScript identifier."""
    return char.isalnum() or char in "$_\u200c\u200d"


def identifier_end(source: str, pos: int) -> int:
    """Offset just past the identifier starting at pos (pos if none)."""
    length = len(source)
    if pos >= length or not is_identifier_start(source[pos]):
        return pos
    pos += 1
    while pos < length and is_identifier_part(source[pos]):
        pos += 1
    return pos


def string_end(source: str, pos: int) -> int:
    """Offset just past the string literal whose opening quote is at pos.

    Raises:
        CallSyntaxError: Unterminated literal or raw line break inside it
    """
    quote = source[pos]
    length = len(source)
    i = pos + 1
    while i < length:
        char = source[i]
        if char == "\\":
            i += 2
            continue
        if char == quote:
            return i + 1
        if char in "\n\r":
            break
        i += 1
    raise CallSyntaxError(ErrorTemplate.call_syntax("unterminated string literal", pos))


def template_end(source: str, pos: int) -> int:
    """Offset just past the template literal whose backtick is at pos.

    Substitutions (``${...}``) are skipped as balanced expressions.

    Raises:
        CallSyntaxError: Unterminated template
    """
    length = len(source)
    i = pos + 1
    while i < length:
        char = source[i]
        if char == "\\":
            i += 2
            continue
        if char == "`":
            return i + 1
        if char == "$" and i + 1 < length and source[i + 1] == "{":
            i = balanced_end(source, i + 2, "}") + 1
            continue
        i += 1
    raise CallSyntaxError(ErrorTemplate.call_syntax("unterminated template literal", pos))


def comment_end(source: str, pos: int) -> int | None:
    """Offset just past a comment starting at pos, or None if none starts there.

    A line comment ends before its line terminator. An unterminated block
    comment runs to the end of the source.
    """
    if not source.startswith("/", pos) or pos + 1 >= len(source):
        return None
    match source[pos + 1]:
        case "/":
            newline = source.find("\n", pos + 2)
            return len(source) if newline == -1 else newline
        case "*":
            close = source.find("*/", pos + 2)
            return len(source) if close == -1 else close + 2
        case _:
            return None


def balanced_end(source: str, pos: int, stops: str) -> int:
    """Offset of the first top-level character in stops, starting at pos.

    Brackets must balance between pos and the stop; strings, templates and
    comments are stepped over.

    Raises:
        CallSyntaxError: Mismatched bracket or end of input before a stop
    """
    stack: list[str] = []
    length = len(source)
    i = pos
    while i < length:
        char = source[i]
        if not stack and char in stops:
            return i
        if char in "'\"":
            i = string_end(source, i)
            continue
        if char == "`":
            i = template_end(source, i)
            continue
        if char == "/":
            end = comment_end(source, i)
            if end is not None:
                i = end
                continue
        if char in _CLOSERS:
            stack.append(_CLOSERS[char])
        elif char in ")]}":
            if not stack or stack.pop() != char:
                raise CallSyntaxError(ErrorTemplate.call_syntax(f"unbalanced '{char}'", i))
        i += 1
    raise CallSyntaxError(ErrorTemplate.call_syntax("unexpected end of input", length))
