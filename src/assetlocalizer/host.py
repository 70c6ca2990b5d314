"""Reference host adapter: module scanning.

A real host (a bundler) recognizes translation calls while it parses each
module and asks the session for replacements. transform_module() does the
same for plain JavaScript module text so the engine can be driven without a
bundler: it finds calls to the intercepted function names and free
references to the locale variable, outside strings, templates, comments and
regular expression literals, and splices in the session's replacements.

Python 3.13+.
"""

import logging
from typing import TYPE_CHECKING

from assetlocalizer.diagnostics import CallSyntaxError, SourceSpan
from assetlocalizer.splicer import TextSplicer
from assetlocalizer.syntax import LineOffsetCache, parse_call_expression_at
from assetlocalizer.syntax.lexer import (
    comment_end,
    identifier_end,
    is_identifier_part,
    is_identifier_start,
    string_end,
    template_end,
)
from assetlocalizer.types import ModuleId

if TYPE_CHECKING:
    from assetlocalizer.session import BuildSession

__all__ = ["transform_module"]

logger = logging.getLogger(__name__)

# A "/" after one of these (or at the start) opens a regular expression.
_REGEX_PRECEDERS = frozenset("(,=:[!&|?{};+-*%<>~^")


def _regex_end(source: str, pos: int) -> int:
    in_class = False
    i = pos + 1
    while i < len(source):
        char = source[i]
        if char == "\\":
            i += 2
            continue
        if char in "\n\r":
            break
        if char == "[":
            in_class = True
        elif char == "]":
            in_class = False
        elif char == "/" and not in_class:
            return identifier_end(source, i + 1) if i + 1 < len(source) else i + 1
        i += 1
    return pos + 1


def _previous_significant(source: str, pos: int) -> str:
    i = pos - 1
    while i >= 0 and source[i].isspace():
        i -= 1
    return source[i] if i >= 0 else ""


def _path_end(source: str, pos: int) -> int:
    # Dotted identifier path starting at pos, e.g. ``i18n.t``.
    end = identifier_end(source, pos)
    while end + 1 < len(source) and source[end] == "." and is_identifier_start(source[end + 1]):
        end = identifier_end(source, end + 1)
    return end


def transform_module(session: "BuildSession", source: str, module_id: ModuleId) -> str:
    """Localize one module's source text through session's parse-time hooks.

    Args:
        session: Active build session
        source: JavaScript module text
        module_id: Identifier used in diagnostics

    Returns:
        Module text with every replaced call and locale variable spliced in

    Raises:
        CallSyntaxError: Unterminated string or template literal
        MissingKeyError: See BuildSession.on_call()
    """
    function_names = frozenset(session.function_names)
    locale_variable = session.locale_variable
    lines = LineOffsetCache(source)
    splicer = TextSplicer(source)

    pos = 0
    length = len(source)
    while pos < length:
        char = source[pos]
        if char in "'\"":
            pos = string_end(source, pos)
            continue
        if char == "`":
            pos = template_end(source, pos)
            continue
        if char == "/":
            end = comment_end(source, pos)
            if end is None and _previous_significant(source, pos) in _REGEX_PRECEDERS | {""}:
                end = _regex_end(source, pos)
            pos = end if end is not None else pos + 1
            continue
        if not is_identifier_start(char):
            pos += 1
            continue

        end = _path_end(source, pos)
        preceded = pos > 0 and (source[pos - 1] == "." or is_identifier_part(source[pos - 1]))
        path = source[pos:end]
        if preceded:
            pos = end
            continue

        if path in function_names:
            try:
                parsed = parse_call_expression_at(source, pos)
            except CallSyntaxError:
                # Not followed by an argument list, e.g. a bare reference.
                pos = end
                continue
            call_end = parsed.cursor.pos
            line, column = lines.get_line_col(pos)
            span = SourceSpan(pos, call_end, line, column)
            replacement = session.on_call(path, source[pos:call_end], span, module_id)
            if replacement is None:
                pos = end
                continue
            splicer.replace(pos, call_end, replacement)
            pos = call_end
            continue

        name_end = identifier_end(source, pos)
        if source[pos:name_end] == locale_variable:
            splicer.replace(pos, name_end, session.on_locale_variable(module_id))
        pos = end

    logger.debug("%s: %d replacement(s)", module_id, len(splicer))
    return splicer.apply().text
