"""Locating placeholders in built asset text.

The locator scans an asset once, left to right, for both placeholder
encodings and returns every occurrence with its decoded payload and the
context its replacement must be rendered for. Consumed spans are never
scanned again, so the cost is linear in the text plus the occurrences.

Occurrences that look like placeholders but cannot be completed (no
terminator, undecodable payload) are skipped and logged; they are never a
build failure.

Python 3.13+.
"""

import json
import logging
import re
from bisect import bisect_right
from dataclasses import dataclass, replace

from assetlocalizer.diagnostics import CallSyntaxError, PlaceholderDecodeError
from assetlocalizer.placeholder import Payload, PlaceholderCodec
from assetlocalizer.syntax import escape_string_content
from assetlocalizer.syntax.lexer import string_end

__all__ = ["AssetTextLocator", "PlaceholderOccurrence"]

logger = logging.getLogger(__name__)

_BASE64_RUN = re.compile(r"[A-Za-z0-9+/=]*")
_QUOTES = "\"'`"
_CLOSE_PAREN = re.compile(r"\s*\)")
_EVAL_OPEN = re.compile(r"\beval\s*\(\s*\"")


@dataclass(frozen=True, slots=True)
class PlaceholderOccurrence:
    """One placeholder found in asset text.

    Attributes:
        start: Offset of the first replaced character
        end: Offset just past the last replaced character
        payload: Decoded payload
        embedded: The placeholder sits inside a larger string literal
            (a minifier merged it with neighbouring literals)
        escaped: The surrounding code is itself JSON-string escaped
    """

    start: int
    end: int
    payload: Payload
    embedded: bool = False
    escaped: bool = False

    def render(self, code: str) -> str:
        """Adapt replacement code to this occurrence's context.

        For embedded occurrences code must be a JavaScript literal; its value
        is written as string content instead.
        """
        if self.embedded:
            value = json.loads(code)
            code = escape_string_content(value if isinstance(value, str) else code)
        if self.escaped:
            code = PlaceholderCodec.escape(code)
        return code


class AssetTextLocator:
    """Finds placeholder occurrences in asset text.

    Example:
        >>> codec = PlaceholderCodec()
        >>> text = "export default " + codec.encode_key("hello-key") + ";"
        >>> [o.payload.key for o in AssetTextLocator(codec).locate(text)]
        ['hello-key']
    """

    __slots__ = ("_codec", "_start_pattern")

    def __init__(self, codec: PlaceholderCodec | None = None) -> None:
        self._codec = codec if codec is not None else PlaceholderCodec()
        self._start_pattern = re.compile(
            re.escape(self._codec.key_prefix) + "|" + re.escape(self._codec.marker) + r"\s*\("
        )

    @property
    def codec(self) -> PlaceholderCodec:
        return self._codec

    def locate(self, text: str) -> list[PlaceholderOccurrence]:
        """All placeholder occurrences in text, ordered and non-overlapping.

        Args:
            text: Asset code

        Returns:
            Occurrences sorted by start offset; empty when text holds no
            marker prefix
        """
        occurrences: list[PlaceholderOccurrence] = []
        eval_spans = _eval_string_spans(text) if "eval" in text else []
        pos = 0
        while True:
            match = self._start_pattern.search(text, pos)
            if match is None:
                break
            if match.group().startswith(self._codec.key_prefix):
                occurrence = self._match_key(text, match.start(), match.end(), pos)
            else:
                occurrence = self._match_expression(text, match.start(), match.end())
            if occurrence is not None and not occurrence.escaped:
                if _inside(eval_spans, occurrence.start):
                    occurrence = replace(occurrence, escaped=True)
            if occurrence is None:
                pos = match.end()
                continue
            occurrences.append(occurrence)
            pos = occurrence.end

        logger.debug("Located %d placeholder(s)", len(occurrences))
        return occurrences

    def _match_key(
        self, text: str, start: int, body_start: int, floor: int
    ) -> PlaceholderOccurrence | None:
        body_end = _BASE64_RUN.match(text, body_start).end()  # type: ignore[union-attr]
        if not text.startswith(self._codec.key_suffix, body_end):
            logger.debug("Key placeholder at %d has no terminator", start)
            return None
        end = body_end + len(self._codec.key_suffix)
        try:
            payload = self._codec.decode_key_body(text[body_start:body_end])
        except PlaceholderDecodeError as e:
            logger.debug("Skipping key placeholder at %d: %s", start, e)
            return None

        if start - 2 >= floor and text[start - 2 : start] == '\\"' and text.startswith('\\"', end):
            return PlaceholderOccurrence(start - 2, end + 2, payload, escaped=True)
        quote = text[start - 1] if start - 1 >= floor else ""
        if quote and quote in _QUOTES and text.startswith(quote, end):
            return PlaceholderOccurrence(start - 1, end + 1, payload)
        return PlaceholderOccurrence(start, end, payload, embedded=True)

    def _match_expression(
        self, text: str, start: int, body_start: int
    ) -> PlaceholderOccurrence | None:
        # The terminator must use the next marker in the text.
        next_marker = text.find(self._codec.marker, body_start)
        if next_marker == -1:
            logger.debug("Expression placeholder at %d has no terminator", start)
            return None
        close = _CLOSE_PAREN.match(text, next_marker + len(self._codec.marker))
        trailer = (
            self._codec.trailer_pattern.search(text, body_start, close.end()) if close else None
        )
        if trailer is None:
            logger.debug("Expression placeholder at %d is not terminated before the next", start)
            return None

        body = text[body_start : trailer.start()]
        try:
            payload = self._codec.decode_expression_body(body)
        except PlaceholderDecodeError as e:
            logger.debug("Skipping expression placeholder at %d: %s", start, e)
            return None
        escaped = PlaceholderCodec.is_escaped(body.strip())
        return PlaceholderOccurrence(start, trailer.end(), payload, escaped=escaped)


def _eval_string_spans(text: str) -> list[tuple[int, int]]:
    """Ordered spans of ``eval("...")`` string arguments.

    Code inside them is JSON-string escaped, so any replacement spliced there
    needs one more level of escaping.
    """
    spans: list[tuple[int, int]] = []
    pos = 0
    while True:
        match = _EVAL_OPEN.search(text, pos)
        if match is None:
            return spans
        opening = match.end() - 1
        try:
            end = string_end(text, opening)
        except CallSyntaxError:
            logger.debug("Unterminated eval string at %d", opening)
            end = len(text)
        spans.append((opening, end))
        pos = end


def _inside(spans: list[tuple[int, int]], offset: int) -> bool:
    index = bisect_right(spans, offset, key=lambda span: span[0]) - 1
    return index >= 0 and spans[index][0] < offset < spans[index][1]
